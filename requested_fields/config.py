import logging
import os
from typing import Optional, TypedDict

log = logging.getLogger(__name__)

# regex timeout (in seconds) applied to caller supplied wildcard skip patterns
WILDCARD_MATCH_TIMEOUT = 2.0


def get_wildcard_match_timeout() -> float:
    value = os.getenv("REQUESTED_FIELDS_WILDCARD_TIMEOUT")
    if not value:
        return WILDCARD_MATCH_TIMEOUT
    try:
        return float(value)
    except ValueError:
        log.warning(
            "Invalid wildcard match timeout, using the default",
            extra=dict(value=value, default=WILDCARD_MATCH_TIMEOUT),
        )
        return WILDCARD_MATCH_TIMEOUT


class FieldsListOptions(TypedDict, total=False):
    # dot-notated path to the tree branch which should be returned
    path: Optional[str]
    # field name (or dot-notated path for projections) -> replacement name
    transform: dict[str, str]
    # evaluate @skip / @include directives against the query variables
    with_directives: Optional[bool]
    # exclusion patterns, ex: ["users.*", "users.email", "*Name"]
    skip: list[str]
    # projections only: also emit paths of fields which have sub-selections
    keep_parent_field: bool


DEFAULT_OPTIONS: FieldsListOptions = {
    "path": None,
    "transform": {},
    "with_directives": True,
    "skip": [],
    "keep_parent_field": False,
}


def parse_options(options: Optional[FieldsListOptions] = None) -> FieldsListOptions:
    """
    Returns a new options dict with defaults filled in for every missing key.
    The given options are never modified.
    """
    parsed: FieldsListOptions = {**DEFAULT_OPTIONS, **(options or {})}
    if parsed["with_directives"] is None:
        parsed["with_directives"] = True
    parsed["transform"] = parsed["transform"] or {}
    parsed["skip"] = parsed["skip"] or []
    return parsed
