"""Load and validate table configuration files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from sortgrid.config import DEFAULT_CASE_FIRST, DEFAULT_COLLATION_LOCALES
from sortgrid.domain.models.column import ColumnDescriptor, columns_from_config
from sortgrid.domain.models.sort import SortDirection, SortMode, SortState
from sortgrid.errors import SettingsLoadError, SettingsValidationError
from sortgrid.gui.viewmodels.fetch_orchestrator import TableOptions

from .schema import merge_with_defaults, validation_errors

LOGGER = logging.getLogger(__name__)


@dataclass
class TableSettings:
    """Validated table configuration ready to build an engine from."""

    columns: list[ColumnDescriptor]
    options: TableOptions
    url: Optional[str] = None
    locales: tuple[str, ...] = DEFAULT_COLLATION_LOCALES
    case_first: str = DEFAULT_CASE_FIRST
    raw: dict[str, Any] = field(default_factory=dict)


def parse_table_settings(document: dict[str, Any]) -> TableSettings:
    """Validate *document* and convert it into :class:`TableSettings`."""
    if not isinstance(document, dict):
        raise SettingsValidationError("Table settings must be a JSON object")
    errors = validation_errors(document)
    if errors:
        raise SettingsValidationError("; ".join(errors))

    data = merge_with_defaults(document)
    initial = data.get("initial_sort")
    initial_sort = None
    if initial:
        initial_sort = SortState(
            column_id=initial["column_id"],
            direction=SortDirection.coerce(initial.get("direction", "asc")),
        )

    options = TableOptions(
        mode=SortMode(data["mode"]),
        page_size=data["page_size"],
        initial_sort=initial_sort,
        params=dict(data["params"]),
    )
    collation = data["collation"]
    return TableSettings(
        columns=columns_from_config(data["columns"]),
        options=options,
        url=data.get("url"),
        locales=tuple(collation.get("locales") or ()),
        case_first=collation.get("case_first", DEFAULT_CASE_FIRST),
        raw=data,
    )


def load_table_settings(path: Path) -> TableSettings:
    """Read a JSON settings file from *path*."""
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise SettingsLoadError(f"Cannot read table settings {path}: {exc}") from exc
    LOGGER.debug("Loaded table settings from %s", path)
    return parse_table_settings(payload)
