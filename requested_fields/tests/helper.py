import pathlib
from typing import Any, Optional

from ariadne import (
    QueryType,
    graphql_sync,
    load_schema_from_path,
    make_executable_schema,
)
from graphql import GraphQLResolveInfo
from graphql.language import (
    FieldNode,
    FragmentDefinitionNode,
    OperationDefinitionNode,
    parse,
)

type_defs = load_schema_from_path(pathlib.Path(__file__).parent / "schema.graphql")
query_bindable = QueryType()


@query_bindable.field("viewer")
def resolve_viewer(_: Any, info: GraphQLResolveInfo) -> dict:
    info.context["info"] = info
    return {}


schema = make_executable_schema(type_defs, query_bindable, convert_names_case=True)


def exec_query(query: str, variables: Optional[dict] = None) -> GraphQLResolveInfo:
    """
    Executes `query` against the test schema and returns the resolver info
    the `viewer` field has been resolved with.
    """
    context: dict[str, Any] = {}
    success, result = graphql_sync(
        schema,
        {"query": query, "variables": variables or {}},
        context_value=context,
    )
    assert success and not result.get("errors"), result
    return context["info"]


def parse_into_resolveinfo(
    source: str, field_name: str, variables: Optional[dict] = None
) -> GraphQLResolveInfo:
    """
    Builds the resolver info of the top level field `field_name` of the
    operation in `source` without validating or executing it.
    """
    document = parse(source)

    operation: OperationDefinitionNode | None = None
    fragments: dict[str, FragmentDefinitionNode] = {}

    for definition in document.definitions:
        if isinstance(definition, OperationDefinitionNode):
            operation = definition
        elif isinstance(definition, FragmentDefinitionNode):
            fragments[definition.name.value] = definition

    assert operation
    field_nodes = [
        selection
        for selection in operation.selection_set.selections
        if isinstance(selection, FieldNode) and selection.name.value == field_name
    ]

    return GraphQLResolveInfo(
        field_name,
        field_nodes,  # list[FieldNode]
        None,
        None,
        None,
        None,
        fragments,  # dict[str, FragmentDefinitionNode]
        None,
        operation,
        variables or {},  # dict[str, Any]
        None,
        None,
    )
