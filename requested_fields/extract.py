import logging
from collections import deque
from typing import Any, Optional

import sentry_sdk
from graphql import GraphQLResolveInfo
from graphql.language import FieldNode

from requested_fields.config import FieldsListOptions, parse_options
from requested_fields.skip import skip_tree
from requested_fields.traverse import (
    FieldTree,
    TraverseContext,
    get_selections,
    merge_trees,
    traverse,
)

log = logging.getLogger(__name__)


def get_field_nodes(info: Any) -> Optional[list[FieldNode]]:
    """
    Field nodes of a resolver info object, also accepting the legacy
    graphql-core 2 shape which stored them as `field_asts`.
    """
    if info is None:
        return None

    field_nodes = getattr(info, "field_nodes", None)
    if field_nodes is None:
        field_nodes = getattr(info, "field_asts", None)

    if not isinstance(field_nodes, (list, tuple)):
        return None
    return list(field_nodes)


def verify_info(info: GraphQLResolveInfo) -> list[FieldNode]:
    """
    Returns the field nodes of the field currently being resolved which have
    a selection set, an empty list if there is none or `info` is malformed.
    """
    field_nodes = get_field_nodes(info)
    if not field_nodes:
        return []

    field_name = getattr(info, "field_name", None)
    nodes = [
        node
        for node in field_nodes
        if isinstance(node, FieldNode)
        and node.name is not None
        and node.name.value == field_name
        and get_selections(node)
    ]

    if not nodes:
        log.debug(
            "No field node with a selection set found for field",
            extra=dict(field_name=field_name),
        )
    return nodes


def get_branch(tree: FieldTree, path: Optional[str] = None) -> FieldTree:
    """
    Returns the subtree at the dot-notated `path`, or an empty tree when the
    path leads to a missing or leaf field.
    """
    if not path:
        return tree

    branch = tree
    for field_name in path.split("."):
        branch = branch.get(field_name)
        if not isinstance(branch, dict):
            return {}

    return branch


def to_dot_notation(parent: str, child: str) -> str:
    return f"{parent}.{child}" if parent else child


@sentry_sdk.trace
def fields_map(
    info: GraphQLResolveInfo, options: Optional[FieldsListOptions] = None
) -> FieldTree:
    """
    Extracts the tree of fields requested below the field being resolved,
    where every requested leaf field maps to `False`:

        users { id profile { email } }  ->  {"id": False, "profile": {"email": False}}
    """
    nodes = verify_info(info)
    if not nodes:
        return {}

    options = parse_options(options)
    context = TraverseContext(
        fragments=getattr(info, "fragments", None) or {},
        variables=getattr(info, "variable_values", None) or {},
        with_directives=bool(options["with_directives"]),
    )
    skip = skip_tree(options["skip"])

    tree: FieldTree = {}
    for node in nodes:
        tree = merge_trees(tree, traverse(get_selections(node), context, skip))

    return get_branch(tree, options["path"])


@sentry_sdk.trace
def fields_list(
    info: GraphQLResolveInfo, options: Optional[FieldsListOptions] = None
) -> list[str]:
    """
    Names of the fields requested directly below the field being resolved
    (or below `options["path"]`), renamed through `options["transform"]`.
    """
    transform = parse_options(options)["transform"]
    return [transform.get(name) or name for name in fields_map(info, options)]


@sentry_sdk.trace
def fields_projection(
    info: GraphQLResolveInfo, options: Optional[FieldsListOptions] = None
) -> dict[str, int]:
    """
    Flattens the requested fields tree into a projection whose keys are dot
    paths of the requested leaf fields, e.g. `{"id": 1, "profile.email": 1}`.

    With `keep_parent_field` the paths of fields having sub-selections are
    returned as well. `transform` renames leaf paths matching it exactly.
    """
    parsed = parse_options(options)
    transform = parsed["transform"]

    projection: dict[str, int] = {}
    queue: deque[tuple[str, FieldTree]] = deque([("", fields_map(info, options))])

    while queue:
        parent, tree = queue.popleft()
        for name, subtree in tree.items():
            dotted_name = to_dot_notation(parent, name)

            if isinstance(subtree, dict):
                queue.append((dotted_name, subtree))
                if parsed["keep_parent_field"]:
                    projection[dotted_name] = 1
                continue

            projection[transform.get(dotted_name) or dotted_name] = 1

    return projection


def selected_fields(info: GraphQLResolveInfo) -> set[str]:
    """
    Given a GraphQL "sub-query", this collects all the queried field paths.

    For example, if the query being resolved looks like
    `owner { repository { name } }`, resolving `owner` this would return
    `repository` and `repository.name`.
    """
    return set(fields_projection(info, {"keep_parent_field": True}))
