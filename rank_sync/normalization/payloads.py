"""
Tagged representation of the upstream payload shapes.

The marketing API answers with ``{"feed": {"results": [...]}}``; the legacy
syndication API answers with ``{"feed": {"entry": [...]}}``. Detection order
is fixed: results first, then entry, otherwise empty.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class ResultsArrayShape:
    results: tuple[Any, ...]


@dataclass(frozen=True)
class EntryArrayShape:
    entries: tuple[Any, ...]


@dataclass(frozen=True)
class EmptyShape:
    pass


RawPayload = Union[ResultsArrayShape, EntryArrayShape, EmptyShape]


def classify_payload(raw: Any) -> RawPayload:
    feed = raw.get("feed") if isinstance(raw, dict) else None
    if not isinstance(feed, dict):
        return EmptyShape()

    results = feed.get("results")
    if isinstance(results, list):
        return ResultsArrayShape(results=tuple(results))

    entries = feed.get("entry")
    if isinstance(entries, list):
        return EntryArrayShape(entries=tuple(entries))
    # a single-entry syndication feed is serialized as an object
    if isinstance(entries, dict):
        return EntryArrayShape(entries=(entries,))

    return EmptyShape()
