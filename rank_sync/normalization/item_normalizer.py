"""
Convert classified upstream payloads into canonical ranked items.
"""

from __future__ import annotations

from typing import Any

from rank_sync.normalization.payloads import (
    EmptyShape,
    EntryArrayShape,
    ResultsArrayShape,
    classify_payload,
)
from rank_sync.types import Item


class ItemNormalizer:
    """
    Total, deterministic mapping from a raw payload to ranked items.

    Missing or malformed fields degrade to empty strings; ranks are always
    the 1-based list position.
    """

    def normalize(self, raw: Any, *, run_date: str) -> list[Item]:
        shape = classify_payload(raw)
        if isinstance(shape, ResultsArrayShape):
            return [
                self._from_result(record, rank=index + 1, run_date=run_date)
                for index, record in enumerate(shape.results)
            ]
        if isinstance(shape, EntryArrayShape):
            return [
                self._from_entry(entry, rank=index + 1, run_date=run_date)
                for index, entry in enumerate(shape.entries)
            ]
        if isinstance(shape, EmptyShape):
            return []
        raise TypeError(f"Unsupported payload shape: {type(shape).__name__}")

    @staticmethod
    def _from_result(record: Any, *, rank: int, run_date: str) -> Item:
        if not isinstance(record, dict):
            record = {}
        return Item(
            date=run_date,
            rank=rank,
            id=_text(record.get("id")),
            name=_text(record.get("name")),
            artist_name=_text(record.get("artistName")),
            kind=_text(record.get("kind")),
            release_date=_text(record.get("releaseDate")),
            artwork_url=_text(record.get("artworkUrl100")),
            url=_text(record.get("url")),
        )

    @staticmethod
    def _from_entry(entry: Any, *, rank: int, run_date: str) -> Item:
        images = _dig(entry, "im:image")
        artwork = images[-1] if isinstance(images, list) and images else None
        return Item(
            date=run_date,
            rank=rank,
            id=_text(_dig(entry, "id", "attributes", "im:id")),
            name=_text(_dig(entry, "im:name", "label")),
            artist_name=_text(_dig(entry, "im:artist", "label")),
            kind=_text(_dig(entry, "im:contentType", "attributes", "term")),
            release_date=_text(_dig(entry, "im:releaseDate", "label")),
            artwork_url=_text(_dig(artwork, "label")),
            url=_text(_entry_link(entry)),
        )


def _entry_link(entry: Any) -> Any:
    link = _dig(entry, "link")
    if isinstance(link, list):
        link = link[0] if link else None
    return _dig(link, "attributes", "href")


def _dig(value: Any, *path: str) -> Any:
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


def _text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value)
