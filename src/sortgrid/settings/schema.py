"""Schema helpers for table configuration documents."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from sortgrid.config import DEFAULT_CASE_FIRST, DEFAULT_COLLATION_LOCALES, DEFAULT_PAGE_SIZE

TABLE_SCHEMA: dict[str, Any] = {
    "$id": "sortgrid/table.schema.json",
    "type": "object",
    "required": ["columns"],
    "properties": {
        "schema": {"const": "sortgrid/table@1"},
        "columns": {
            "type": "array",
            "minItems": 1,
            "items": {
                "type": "object",
                "required": ["id"],
                "properties": {
                    "id": {"type": "string", "minLength": 1},
                    "title": {"type": "string"},
                    "sortable": {"type": "boolean"},
                    "value_type": {
                        "type": "string",
                        "enum": ["string", "number", "date"],
                    },
                },
                "additionalProperties": True,
            },
        },
        "mode": {"type": "string", "enum": ["client", "server"]},
        "page_size": {"type": "integer", "minimum": 1},
        "initial_sort": {
            "type": ["object", "null"],
            "required": ["column_id"],
            "properties": {
                "column_id": {"type": "string"},
                "direction": {"type": "string", "enum": ["asc", "desc"]},
            },
        },
        "url": {"type": ["string", "null"]},
        "params": {"type": "object"},
        "collation": {
            "type": "object",
            "properties": {
                "locales": {"type": "array", "items": {"type": "string"}},
                "case_first": {"type": "string", "enum": ["upper", "lower"]},
            },
        },
    },
    "additionalProperties": True,
}

DEFAULT_TABLE_SETTINGS: dict[str, Any] = {
    "schema": "sortgrid/table@1",
    "mode": "server",
    "page_size": DEFAULT_PAGE_SIZE,
    "initial_sort": None,
    "url": None,
    "params": {},
    "collation": {"locales": list(DEFAULT_COLLATION_LOCALES), "case_first": DEFAULT_CASE_FIRST},
}

_VALIDATOR = Draft202012Validator(TABLE_SCHEMA)


def validation_errors(document: dict[str, Any]) -> list[str]:
    """Return readable messages for every schema violation in *document*."""
    messages = []
    for error in sorted(_VALIDATOR.iter_errors(document), key=lambda e: list(e.path)):
        location = "/".join(str(part) for part in error.path) or "<root>"
        messages.append(f"{location}: {error.message}")
    return messages


def merge_with_defaults(document: dict[str, Any] | None) -> dict[str, Any]:
    """Overlay *document* on the defaults; nested ``collation`` merges per key."""
    merged = deepcopy(DEFAULT_TABLE_SETTINGS)
    if not document:
        return merged
    for key, value in document.items():
        if key == "collation" and isinstance(value, dict):
            merged["collation"].update(value)
        else:
            merged[key] = deepcopy(value)
    return merged
