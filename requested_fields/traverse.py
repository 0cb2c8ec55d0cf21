import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Literal, Union

from graphql.language import (
    FieldNode,
    FragmentDefinitionNode,
    FragmentSpreadNode,
    InlineFragmentNode,
    Node,
    SelectionNode,
)

from requested_fields.directives import verify_directives
from requested_fields.skip import SkipValue, verify_skip

log = logging.getLogger(__name__)

# marks a requested field without a sub-selection
LEAF: Literal[False] = False

FieldTree = dict[str, Union["FieldTree", Literal[False]]]


@dataclass(frozen=True)
class TraverseContext:
    fragments: Mapping[str, FragmentDefinitionNode] = field(default_factory=dict)
    variables: Mapping[str, Any] = field(default_factory=dict)
    with_directives: bool = True


def get_selections(node: Node | None) -> Sequence[SelectionNode]:
    """
    Selections of a field, inline fragment or fragment definition node,
    an empty tuple for anything without a proper selection set.
    """
    selection_set = getattr(node, "selection_set", None)
    selections = getattr(selection_set, "selections", None)
    if not isinstance(selections, (list, tuple)):
        return ()
    return selections


def merge_trees(left: FieldTree, right: FieldTree) -> FieldTree:
    """
    Unions two field trees into a new one. Keys keep their first occurrence
    order (`left` first), and a field becomes a leaf only when it is a leaf on
    both sides.
    """
    merged = dict(left)
    for name, subtree in right.items():
        if name not in merged:
            merged[name] = subtree
            continue

        current = merged[name]
        if isinstance(current, dict) and isinstance(subtree, dict):
            merged[name] = merge_trees(current, subtree)
        elif isinstance(subtree, dict):
            merged[name] = subtree
    return merged


def merge_into(target: FieldTree, source: FieldTree) -> FieldTree:
    """
    Same union as `merge_trees`, but updates `target` in place. Only for trees
    owned by the caller: nested mappings of `target` are modified as well.
    """
    for name, subtree in source.items():
        current = target.get(name, LEAF)
        if name not in target:
            target[name] = subtree
        elif isinstance(current, dict) and isinstance(subtree, dict):
            merge_into(current, subtree)
        elif isinstance(subtree, dict):
            target[name] = subtree
    return target


def _selection_tree(
    selection: SelectionNode, context: TraverseContext, skip: SkipValue
) -> FieldTree:
    match selection:
        case InlineFragmentNode():
            return traverse(get_selections(selection), context, skip)

        case FragmentSpreadNode():
            fragment_name = selection.name.value
            fragment = context.fragments.get(fragment_name)
            if fragment is None:
                log.debug(
                    "Fragment is not defined, ignoring its spread",
                    extra=dict(fragment_name=fragment_name),
                )
                return {}
            return traverse(get_selections(fragment), context, skip)

        case FieldNode():
            name = selection.name.value
            node_skip = verify_skip(name, skip)
            if node_skip is True:
                return {}

            selections = get_selections(selection)
            if not selections:
                return {name: LEAF}
            return {name: traverse(selections, context, node_skip)}

        case _:
            return {}


def traverse(
    selections: Iterable[SelectionNode],
    context: TraverseContext,
    skip: SkipValue = False,
) -> FieldTree:
    """
    Recursively collects the requested fields of the given selections into a
    field tree, e.g. `users { id ...UserContacts }` with
    `fragment UserContacts on User { email }` becomes
    `{"users": {"id": False, "email": False}}`.

    Fragments (inline or spread) add their fields to the current level,
    selections dropped by @skip / @include are ignored when
    `context.with_directives` is set, and fields matching the `skip` rules are
    left out together with their subtrees.
    """
    tree: FieldTree = {}
    for selection in selections:
        if context.with_directives and not verify_directives(
            getattr(selection, "directives", None), context.variables
        ):
            continue

        merge_into(tree, _selection_tree(selection, context, skip))
    return tree
