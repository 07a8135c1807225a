import json
import logging
import re
import threading
from concurrent.futures import ThreadPoolExecutor

from pydantic import ValidationError

from ..errors import CollaboratorError, ParseError
from ..models import Analysis, AnalysisResponse

logger = logging.getLogger(__name__)

BODY_EXCERPT_LENGTH = 2000

ANALYSIS_SYSTEM_PROMPT = """You are a news content analyst. Analyze the article and provide:
1. Category (politics, culture, business, international, lifestyle, opinion)
2. Quality score (1-10)
3. Relevance score (1-10)
4. Key topics (3-5 keywords)
5. Summary (2-3 sentences)
6. Engagement potential (low/medium/high)

Respond with JSON only."""

_FENCE_RE = re.compile(r"^```(?:json)?\s*|\s*```$", re.IGNORECASE)


def strip_code_fence(text):
    return _FENCE_RE.sub("", text.strip())


def parse_analysis_reply(text):
    """Validate a collaborator reply against AnalysisResponse.

    Raises ParseError when the reply is not JSON and CollaboratorError when it
    doesn't match the schema.
    """
    try:
        payload = json.loads(strip_code_fence(text))
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON response: {e}") from e
    if not isinstance(payload, dict):
        raise CollaboratorError(f"Expected a JSON object, got {type(payload).__name__}")
    try:
        return AnalysisResponse.model_validate(payload)
    except ValidationError as e:
        raise CollaboratorError(f"Invalid analysis format: {e}") from e


class GeminiAnalyzerTask:
    def __init__(self, client, max_workers=3):
        if client is None:
            raise ValueError("Collaborator client cannot be None")
        self.client = client
        self.max_workers = max_workers
        self.stats = {
            'skipped_no_body': 0,
            'analyzed': 0,
            'failed': 0,
        }
        self._lock = threading.Lock()

    def _count(self, key):
        with self._lock:
            self.stats[key] += 1

    def build_prompt(self, article):
        excerpt = (article.body_text or "")[:BODY_EXCERPT_LENGTH]
        return (
            f"Title: {article.title}\n\n"
            f"Description: {article.description}\n\n"
            f"Content: {excerpt}...\n\n"
            f"Reply with a JSON object following this schema:\n"
            f"{json.dumps(AnalysisResponse.model_json_schema(), indent=2)}"
        )

    def analyze_article(self, article):
        """Analyze one article; returns None when it has no body or the call fails."""
        if not article.body_available or not article.body_text:
            self._count('skipped_no_body')
            return None

        try:
            reply = self.client.generate(
                self.build_prompt(article),
                system_instruction=ANALYSIS_SYSTEM_PROMPT,
                temperature=0.3,
                json_output=True,
            )
            response = parse_analysis_reply(reply)
        except (CollaboratorError, ParseError) as e:
            logger.error(f"Error analyzing article {article.url}: {e}")
            self._count('failed')
            return None

        self._count('analyzed')
        return Analysis.from_response(article.id, response)

    def analyze_many(self, articles):
        """Analyze articles on a bounded pool.

        Returns the (article, analysis) pairs that succeeded, in input order.
        """
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            analyses = list(executor.map(self.analyze_article, articles))
        return [(article, analysis) for article, analysis in zip(articles, analyses) if analysis is not None]
