"""
Feed alias resolution and upstream URL construction.

Upstream has used two spellings for the same ranking lists: the legacy
syndication identifiers (``topfreeapplications``) and the hyphenated ids of
the current marketing API (``top-free``). Requests are normalized to one
canonical id and expanded into a short, ordered candidate chain so a
rejected spelling can fall through to an equivalent one.
"""

from __future__ import annotations

from rank_sync.config.models import SyncSettings

DEFAULT_FEED = "top-free"

LEGACY_FEED_ALIASES: dict[str, str] = {
    "topfreeapplications": "top-free",
    "toppaidapplications": "top-paid",
    "topgrossingapplications": "top-grossing",
}

# substring family -> canonical id
FEED_FAMILIES: tuple[tuple[str, str], ...] = (
    ("topfree", "top-free"),
    ("toppaid", "top-paid"),
    ("topgrossing", "top-grossing"),
)

CATEGORY_GENRES: dict[str, str] = {
    "apps": "",
    "games": "6014",
}


def normalize_feed_alias(feed: str | None) -> str:
    text = str(feed or "").strip().lower()
    if not text:
        return DEFAULT_FEED
    return LEGACY_FEED_ALIASES.get(text, text)


def build_feed_candidates(feed: str | None) -> list[str]:
    """
    Ordered, duplicate-free candidate ids; the canonical id always comes first.
    """

    normalized = normalize_feed_alias(feed)
    candidates = {normalized: None}
    for family, canonical in FEED_FAMILIES:
        if family in normalized:
            candidates.setdefault(canonical, None)
    return list(candidates)


def genre_for_category(category: str) -> str:
    return CATEGORY_GENRES.get(category.strip().lower(), "")


def is_legacy_feed(feed: str) -> bool:
    return "-" not in feed


def build_feed_url(
    *,
    settings: SyncSettings,
    region: str,
    category: str,
    feed: str,
) -> str:
    """
    Build the request URL for one candidate feed id.

    Hyphenated ids go to the marketing JSON API; anything else is treated as
    a legacy syndication feed, which answers in the entry-array shape.
    """

    genre = genre_for_category(category)
    limit = settings.item_limit
    if is_legacy_feed(feed):
        genre_part = f"/genre={genre}" if genre else ""
        return f"{settings.legacy_feed_base_url}/{region}/rss/{feed}/limit={limit}{genre_part}/json"

    url = f"{settings.feed_base_url}/{region}/apps/{feed}/{limit}/apps.json"
    if genre:
        url = f"{url}?genre={genre}"
    return url
