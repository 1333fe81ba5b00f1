"""
Destination catalog loader.

The catalog is a JSON list of surf spots with coordinates, seasonality and cost
data. By default the catalog packaged with wavefinder is used; a custom file can
be configured via `catalog.path` (or `WAVEFINDER_CATALOG_PATH`). We validate it
into typed Pydantic models so downstream scoring code can assume a consistent shape.
"""

from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path

from pydantic import TypeAdapter

from wavefinder.core.env import resolve_project_path
from wavefinder.domain.models import Destination

PACKAGED_CATALOG = "destinations.json"

_DESTINATIONS_ADAPTER = TypeAdapter(list[Destination])


def _validate_unique_ids(destinations: list[Destination]) -> list[Destination]:
    seen: set[str] = set()
    for d in destinations:
        if d.id in seen:
            raise ValueError(f"Duplicate destination id '{d.id}' in catalog.")
        seen.add(d.id)
    return destinations


def load_destinations(path: str | Path | None = None) -> list[Destination]:
    """Load and validate a destination catalog JSON file (packaged catalog when `path` is None)."""
    if path is None:
        text = resources.files("wavefinder.catalog").joinpath(PACKAGED_CATALOG).read_text(encoding="utf-8")
    else:
        text = resolve_project_path(path).read_text(encoding="utf-8")
    payload = json.loads(text)
    return _validate_unique_ids(_DESTINATIONS_ADAPTER.validate_python(payload))


@lru_cache
def get_catalog(path: str | None = None) -> tuple[Destination, ...]:
    """Load a catalog once per process; a tuple so callers cannot reorder the shared list."""
    return tuple(load_destinations(path))


def find_destination(destinations: list[Destination] | tuple[Destination, ...], destination_id: str) -> Destination | None:
    for d in destinations:
        if d.id == destination_id:
            return d
    return None
