"""Shared fixtures for the curation pipeline tests."""

from datetime import datetime, timezone

import pytest

from buenos_dias.errors import CollaboratorError
from buenos_dias.models import Analysis, RawArticle
from buenos_dias.sources import Source

LONG_BODY = ("The committee met on Tuesday to debate the new housing bill. " * 20).strip()


class FakeClient:
    """Collaborator stand-in: replies are consumed in order; exceptions are raised."""

    def __init__(self, replies=None, default=None):
        self.replies = list(replies or [])
        self.default = default
        self.calls = []

    def generate(self, prompt, **kwargs):
        self.calls.append((prompt, kwargs))
        reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            raise CollaboratorError("no reply configured")
        return reply


@pytest.fixture
def source() -> Source:
    return Source(
        id="newyorker",
        name="The New Yorker",
        sitemaps=("https://example.com/sitemap-1.xml", "https://example.com/sitemap-2.xml"),
        url_patterns=("/culture/", "/politics/"),
        extractor="newyorker",
    )


@pytest.fixture
def make_article():
    def _make(url="https://www.newyorker.com/culture/a", body=LONG_BODY, **overrides) -> RawArticle:
        data = {
            "id": overrides.pop("id", url.rsplit("/", 1)[-1]),
            "url": url,
            "source": "newyorker",
            "source_name": "The New Yorker",
            "title": f"Title {url.rsplit('/', 1)[-1]}",
            "description": "A description",
            "body_text": body,
            "body_available": body is not None,
            "published_at": datetime(2025, 11, 18, 10, 0, tzinfo=timezone.utc),
        }
        data.update(overrides)
        return RawArticle(**data)

    return _make


@pytest.fixture
def make_analysis():
    def _make(category="politics", quality=8, relevance=7, engagement="high", article_id=None) -> Analysis:
        return Analysis(
            article_id=article_id,
            category=category,
            quality_score=quality,
            relevance_score=relevance,
            key_topics=["housing", "congress", "policy"],
            summary="A summary.",
            engagement_potential=engagement,
        )

    return _make


@pytest.fixture
def fake_client():
    return FakeClient
