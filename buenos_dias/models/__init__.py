from .article import RawArticle, SitemapEntry
from .analysis import Analysis, AnalysisResponse, CATEGORIES, ENGAGEMENT_LEVELS
from .bundle import BundleEntry, DailyBundle, RunReport, ScoredArticle, StageCount

__all__ = [
    'RawArticle', 'SitemapEntry',
    'Analysis', 'AnalysisResponse', 'CATEGORIES', 'ENGAGEMENT_LEVELS',
    'BundleEntry', 'DailyBundle', 'RunReport', 'ScoredArticle', 'StageCount',
]
