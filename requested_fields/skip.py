import logging
from typing import Iterable, Union

import regex

from requested_fields.config import get_wildcard_match_timeout

log = logging.getLogger(__name__)

WILDCARD = "*"

SkipTree = dict[str, "SkipValue"]
# True: exclude the field with its whole subtree
# SkipTree: keep the field, continue excluding inside of it
# False: keep the field, nothing is excluded below it
SkipValue = Union[bool, SkipTree]


def skip_tree(patterns: Iterable[str]) -> SkipTree:
    """
    Builds the exclusion rules tree from a list of dot-notated skip patterns.

    For example `["users.*", "teams.stats.points", "*Name"]` results in
    `{"users": True, "teams": {"stats": {"points": True}}, "*Name": True}`.
    A trailing `*` segment excludes the whole subtree of its parent, which is
    the same as ending the pattern at the parent: `users.*` == `users`.
    """
    tree: SkipTree = {}

    for pattern in patterns:
        if not pattern:
            continue

        segments = pattern.split(".")
        if len(segments) > 1 and segments[-1] == WILDCARD:
            segments = segments[:-1]

        scope = tree
        for segment in segments[:-1]:
            current = scope.get(segment)
            if current is True:
                break
            if current is None:
                current = scope[segment] = {}
            scope = current
        else:
            scope[segments[-1]] = True

    return tree


def _wildcard_matches(pattern: str, name: str) -> bool:
    expression = ".*".join(regex.escape(part) for part in pattern.split(WILDCARD))
    try:
        match = regex.search(expression, name, timeout=get_wildcard_match_timeout())
        return match is not None
    except TimeoutError:
        log.error(
            "Regex Timeout Error matching skip pattern",
            extra=dict(pattern=pattern, field_name=name),
        )
        return False


def verify_skip(name: str, skip: SkipValue) -> SkipValue:
    """
    Looks up the exclusion rule for the field `name` in the current `skip`
    scope. Exact names take precedence over wildcard patterns; among wildcard
    patterns a full exclusion wins, otherwise the last matching scope is used.
    """
    if not skip or skip is True:
        return False

    if name in skip:
        return skip[name]

    node_skip: SkipValue = False
    for pattern, value in skip.items():
        if WILDCARD not in pattern or not _wildcard_matches(pattern, name):
            continue
        node_skip = value
        if node_skip is True:
            break

    return node_skip
