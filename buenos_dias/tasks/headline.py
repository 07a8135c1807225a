import logging

from ..errors import CollaboratorError

logger = logging.getLogger(__name__)

DEFAULT_HEADLINE = "Daily News Summary"
SUMMARY_UNAVAILABLE = "Summary not available"
SUMMARY_EXCERPT_LENGTH = 1500

HEADLINE_SYSTEM_PROMPT = (
    'You are an editor for "Buenos Días", a Chilean news aggregator. Create a compelling, '
    "professional headline in Spanish or English that captures the essence of today's top "
    "stories. The headline should be engaging but factual, suitable for a serious news "
    "publication. Reply with the headline only."
)

SUMMARY_SYSTEM_PROMPT = (
    "Create a compelling 2-3 sentence summary of this article for a news aggregator. "
    "The summary should be engaging, informative, and capture the main point."
)


class HeadlineGeneratorTask:
    def __init__(self, client):
        self.client = client

    @staticmethod
    def describe_selection(selected):
        lines = [
            f"{i}. {s.article.title} ({s.analysis.category}, quality: {s.analysis.quality_score}/10)"
            for i, s in enumerate(selected, start=1)
        ]
        return "Today's top articles:\n" + "\n".join(lines) + "\n\nCreate a main headline for the Buenos Días front page."

    def generate_headline(self, selected):
        """One headline for the ranked selection; falls back to the top title."""
        if not selected:
            return DEFAULT_HEADLINE
        fallback = selected[0].article.title or DEFAULT_HEADLINE
        try:
            headline = self.client.generate(
                self.describe_selection(selected),
                system_instruction=HEADLINE_SYSTEM_PROMPT,
                temperature=0.7,
                max_output_tokens=100,
            )
        except CollaboratorError as e:
            logger.error(f"Error generating headline: {e}")
            return fallback
        return headline.strip().strip('"') or fallback

    def request_summary(self, article):
        """Ask the collaborator for an enhanced summary; None if there's no body or the call fails."""
        if not article.body_available or not article.body_text:
            return None
        try:
            return self.client.generate(
                f"Title: {article.title}\n\nContent: {article.body_text[:SUMMARY_EXCERPT_LENGTH]}...",
                system_instruction=SUMMARY_SYSTEM_PROMPT,
                temperature=0.5,
                max_output_tokens=300,
            )
        except CollaboratorError as e:
            logger.error(f"Error generating summary for {article.url}: {e}")
            return None

    @staticmethod
    def summary_fallback(article):
        return article.description or SUMMARY_UNAVAILABLE

    def generate_summary(self, article):
        """Enhanced summary for one article, falling back to its stored description."""
        return self.request_summary(article) or self.summary_fallback(article)
