"""Deterministic scoring and top-K selection of analyzed articles."""
from ..models import ScoredArticle

CATEGORY_WEIGHTS = {
    "politics": 0.25,
    "culture": 0.20,
    "business": 0.20,
    "international": 0.15,
    "lifestyle": 0.10,
    "opinion": 0.10,
}
DEFAULT_CATEGORY_WEIGHT = 0.1

ENGAGEMENT_BOOST = {
    "high": 1.2,
    "medium": 1.1,
}
DEFAULT_TOP_K = 10


def compute_final_score(analysis):
    category_weight = CATEGORY_WEIGHTS.get(analysis.category, DEFAULT_CATEGORY_WEIGHT)
    quality_weight = analysis.quality_score / 10
    relevance_weight = analysis.relevance_score / 10
    engagement_boost = ENGAGEMENT_BOOST.get(analysis.engagement_potential, 1.0)

    return (category_weight * 0.3 + quality_weight * 0.4 + relevance_weight * 0.3) * engagement_boost


def score_articles(pairs):
    return [
        ScoredArticle(article=article, analysis=analysis, final_score=compute_final_score(analysis))
        for article, analysis in pairs
    ]


def select_top(scored, k=DEFAULT_TOP_K):
    """Stable sort by final score, highest first, truncated to k."""
    ranked = sorted(scored, key=lambda s: s.final_score, reverse=True)
    return ranked[:k]


def rank_and_select(pairs, k=DEFAULT_TOP_K):
    return select_top(score_articles(pairs), k)
