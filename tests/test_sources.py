"""Tests for buenos_dias.sources module."""

from datetime import date

import pytest

from buenos_dias.sources import (
    NEWS_SOURCES,
    Source,
    build_sources,
    get_source,
    newyorker_weekly_sitemaps,
    requested_source_ids,
    resolve_sources,
)


class TestSource:
    def test_brand_defaults_to_name_without_article(self) -> None:
        source = Source(id="ny", name="The New Yorker", sitemaps=(), url_patterns=(), extractor="newyorker")
        assert source.brand == "new yorker"

    def test_explicit_brand_is_kept(self) -> None:
        source = Source(id="ny", name="The New Yorker", sitemaps=(), url_patterns=(),
                        extractor="newyorker", brand="newyorker")
        assert source.brand == "newyorker"

    def test_source_is_frozen(self) -> None:
        source = NEWS_SOURCES["newyorker"]
        with pytest.raises(Exception):
            source.name = "Other"


class TestNewYorkerWeeklySitemaps:
    def test_builds_three_weekly_shards_newest_first(self) -> None:
        urls = newyorker_weekly_sitemaps(date(2025, 11, 20))
        assert urls == (
            "https://www.newyorker.com/sitemap.xml?year=2025&month=11&week=3",
            "https://www.newyorker.com/sitemap.xml?year=2025&month=11&week=2",
            "https://www.newyorker.com/sitemap.xml?year=2025&month=11&week=1",
        )

    def test_crosses_month_boundary(self) -> None:
        urls = newyorker_weekly_sitemaps(date(2025, 12, 3), weeks=2)
        assert urls == (
            "https://www.newyorker.com/sitemap.xml?year=2025&month=12&week=1",
            "https://www.newyorker.com/sitemap.xml?year=2025&month=11&week=4",
        )


class TestResolveSources:
    def test_empty_request_returns_all(self) -> None:
        assert resolve_sources(None) == list(NEWS_SOURCES.values())

    def test_all_keyword_returns_all(self) -> None:
        assert resolve_sources("all") == list(NEWS_SOURCES.values())

    def test_unknown_sources_are_skipped(self, source) -> None:
        registry = {"newyorker": source}
        assert resolve_sources(["missing", "newyorker"], registry) == [source]

    def test_comma_separated_string(self, source) -> None:
        registry = {"newyorker": source}
        assert resolve_sources("newyorker, newyorker", registry) == [source]

    def test_get_source_unknown_raises(self) -> None:
        with pytest.raises(KeyError, match="Unknown source"):
            get_source("nope")


class TestRequestedSourceIds:
    def test_keeps_unknown_and_drops_duplicates(self) -> None:
        assert requested_source_ids("newyorker, missing, newyorker") == ["newyorker", "missing"]

    def test_all_and_empty(self) -> None:
        assert requested_source_ids("all") == []
        assert requested_source_ids(None) == []


class TestBuildSources:
    def test_generic_source_uses_newspaper_strategy(self) -> None:
        sources = build_sources(date(2025, 11, 20))
        assert sources["atlantic"].extractor == "newspaper"
        assert sources["atlantic"].brand == "atlantic"
        assert sources["newyorker"].extractor == "newyorker"
