from requested_fields.config import FieldsListOptions
from requested_fields.extract import (
    fields_list,
    fields_map,
    fields_projection,
    selected_fields,
)
from requested_fields.traverse import LEAF, FieldTree

__all__ = [
    "LEAF",
    "FieldTree",
    "FieldsListOptions",
    "fields_list",
    "fields_map",
    "fields_projection",
    "selected_fields",
]
