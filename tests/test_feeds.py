from __future__ import annotations

import pytest

from rank_sync.feeds import (
    build_feed_candidates,
    build_feed_url,
    genre_for_category,
    normalize_feed_alias,
)

SAMPLE_FEEDS = [
    "top-free",
    "TOP-PAID",
    "topfreeapplications",
    "TopGrossingApplications",
    " toppaidapplications ",
    "topfreeipadapplications",
    "new-apps-we-love",
    "",
    None,
]


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("topfreeapplications", "top-free"),
        ("toppaidapplications", "top-paid"),
        ("topgrossingapplications", "top-grossing"),
        ("Top-Free", "top-free"),
        ("new-apps-we-love", "new-apps-we-love"),
        ("", "top-free"),
        (None, "top-free"),
    ],
)
def test_normalize_feed_alias(raw, expected) -> None:
    assert normalize_feed_alias(raw) == expected


@pytest.mark.parametrize("raw", SAMPLE_FEEDS)
def test_normalize_is_idempotent(raw) -> None:
    once = normalize_feed_alias(raw)
    assert normalize_feed_alias(once) == once


@pytest.mark.parametrize("raw", SAMPLE_FEEDS)
def test_candidates_start_with_canonical_and_have_no_duplicates(raw) -> None:
    candidates = build_feed_candidates(raw)
    assert candidates[0] == normalize_feed_alias(raw)
    assert len(candidates) == len(set(candidates))


def test_candidates_add_substring_family() -> None:
    assert build_feed_candidates("topfreeipadapplications") == ["topfreeipadapplications", "top-free"]
    assert build_feed_candidates("topfreeapplications") == ["top-free"]
    assert build_feed_candidates("top-paid") == ["top-paid"]


def test_genre_mapping() -> None:
    assert genre_for_category("apps") == ""
    assert genre_for_category("Games") == "6014"
    assert genre_for_category("books") == ""


def test_modern_feed_url(make_settings) -> None:
    settings = make_settings(item_limit=50)
    assert (
        build_feed_url(settings=settings, region="us", category="apps", feed="top-free")
        == "https://rss.applemarketingtools.com/api/v2/us/apps/top-free/50/apps.json"
    )
    assert build_feed_url(settings=settings, region="us", category="games", feed="top-paid").endswith(
        "/us/apps/top-paid/50/apps.json?genre=6014"
    )


def test_legacy_feed_url(make_settings) -> None:
    settings = make_settings(item_limit=25)
    assert (
        build_feed_url(settings=settings, region="jp", category="games", feed="topfreeipadapplications")
        == "https://itunes.apple.com/jp/rss/topfreeipadapplications/limit=25/genre=6014/json"
    )
    assert (
        build_feed_url(settings=settings, region="jp", category="apps", feed="newapplications")
        == "https://itunes.apple.com/jp/rss/newapplications/limit=25/json"
    )
