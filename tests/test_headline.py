"""Tests for buenos_dias.tasks.headline module."""

from buenos_dias.errors import CollaboratorError
from buenos_dias.models import ScoredArticle
from buenos_dias.tasks.headline import (
    DEFAULT_HEADLINE,
    SUMMARY_EXCERPT_LENGTH,
    SUMMARY_UNAVAILABLE,
    HeadlineGeneratorTask,
)


def scored(article, analysis, score=0.5):
    return ScoredArticle(article=article, analysis=analysis, final_score=score)


class TestGenerateHeadline:
    def test_empty_selection_uses_default_without_call(self, fake_client) -> None:
        client = fake_client(default="Anything")
        assert HeadlineGeneratorTask(client).generate_headline([]) == DEFAULT_HEADLINE
        assert client.calls == []

    def test_reply_is_unquoted(self, make_article, make_analysis, fake_client) -> None:
        client = fake_client(default='"Housing takes center stage"')
        selection = [scored(make_article(), make_analysis())]
        assert HeadlineGeneratorTask(client).generate_headline(selection) == "Housing takes center stage"
        prompt, _ = client.calls[0]
        assert "1. Title a (politics, quality: 8/10)" in prompt

    def test_failure_falls_back_to_top_title(self, make_article, make_analysis, fake_client) -> None:
        client = fake_client(replies=[CollaboratorError("down")])
        selection = [
            scored(make_article(url="https://x.com/culture/first"), make_analysis()),
            scored(make_article(url="https://x.com/culture/second"), make_analysis()),
        ]
        assert HeadlineGeneratorTask(client).generate_headline(selection) == "Title first"

    def test_failure_without_title_uses_default(self, make_article, make_analysis, fake_client) -> None:
        client = fake_client(replies=[CollaboratorError("down")])
        selection = [scored(make_article(title=None), make_analysis())]
        assert HeadlineGeneratorTask(client).generate_headline(selection) == DEFAULT_HEADLINE


class TestGenerateSummary:
    def test_enhanced_summary(self, make_article, fake_client) -> None:
        client = fake_client(default="A crisp summary.")
        article = make_article(body="y" * 4000)
        assert HeadlineGeneratorTask(client).generate_summary(article) == "A crisp summary."
        prompt, _ = client.calls[0]
        assert "y" * SUMMARY_EXCERPT_LENGTH in prompt
        assert "y" * (SUMMARY_EXCERPT_LENGTH + 1) not in prompt

    def test_failure_falls_back_to_description(self, make_article, fake_client) -> None:
        client = fake_client(replies=[CollaboratorError("down")])
        article = make_article(description="Stored description")
        assert HeadlineGeneratorTask(client).generate_summary(article) == "Stored description"

    def test_no_description_fallback(self, make_article, fake_client) -> None:
        client = fake_client(replies=[CollaboratorError("down")])
        article = make_article(description=None)
        assert HeadlineGeneratorTask(client).generate_summary(article) == SUMMARY_UNAVAILABLE

    def test_no_body_skips_call(self, make_article, fake_client) -> None:
        client = fake_client(default="unused")
        article = make_article(body=None)
        generator = HeadlineGeneratorTask(client)
        assert generator.request_summary(article) is None
        assert generator.generate_summary(article) == "A description"
        assert client.calls == []
