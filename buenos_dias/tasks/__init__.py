from .analyzer import GeminiAnalyzerTask
from .headline import HeadlineGeneratorTask
from .pipeline import DailyCurationTask, build_pipeline
from .scraper import ArticleScraperTask
from .sitemap import SitemapCollectorTask

__all__ = [
    'ArticleScraperTask',
    'DailyCurationTask',
    'GeminiAnalyzerTask',
    'HeadlineGeneratorTask',
    'SitemapCollectorTask',
    'build_pipeline',
]
