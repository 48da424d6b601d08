"""Loaders for the curated override and narrative tables."""
from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter

from econpulse.schemas import NarrativeTable, OverrideTable

_OVERRIDES = TypeAdapter(OverrideTable)
_NARRATIVES = TypeAdapter(NarrativeTable)


def load_override_table(path: Path) -> OverrideTable:
    """Parse ``{"SWE": {"debt_to_gdp": {"value": .., "source": .., "period": ..}}}``.

    Keys starting with an underscore are comments and skipped.
    """
    raw = json.loads(Path(path).read_text())
    table = _OVERRIDES.validate_python(
        {code.upper(): entries for code, entries in raw.items() if not code.startswith("_")}
    )
    return table


def load_narrative_table(path: Path) -> NarrativeTable:
    raw = json.loads(Path(path).read_text())
    return _NARRATIVES.validate_python(
        {code.upper(): text for code, text in raw.items() if not code.startswith("_")}
    )
