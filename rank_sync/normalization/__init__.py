"""
Normalization layer for upstream chart payloads.
"""

from rank_sync.normalization.item_normalizer import ItemNormalizer
from rank_sync.normalization.payloads import (
    EmptyShape,
    EntryArrayShape,
    RawPayload,
    ResultsArrayShape,
    classify_payload,
)

__all__ = [
    "EmptyShape",
    "EntryArrayShape",
    "ItemNormalizer",
    "RawPayload",
    "ResultsArrayShape",
    "classify_payload",
]
