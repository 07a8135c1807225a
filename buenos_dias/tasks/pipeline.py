import logging
from concurrent.futures import ThreadPoolExecutor

from ..database import ArticleStore
from ..errors import ConfigurationError
from ..models import BundleEntry, DailyBundle, RunReport
from ..services.gemini_client import DEFAULT_MODEL, DEFAULT_THINKING_BUDGET, GeminiClient
from ..sources import build_sources, requested_source_ids, resolve_sources
from ..utils.http import build_session
from .analyzer import GeminiAnalyzerTask
from .headline import HeadlineGeneratorTask
from .ranker import DEFAULT_TOP_K, rank_and_select
from .scraper import ArticleScraperTask
from .sitemap import SitemapCollectorTask

logger = logging.getLogger(__name__)


class DailyCurationTask:
    """Runs one curation pass: scrape → store → analyze → rank → summarize → bundle.

    Per-item failures at every stage are isolated and show up only as counts
    in the RunReport; the store must be reachable before anything runs.
    """

    def __init__(self, store, collector, scraper, analyzer, headline_generator,
                 top_k=DEFAULT_TOP_K, recent_window_hours=24, candidate_limit=50,
                 summary_max_workers=3):
        if store is None:
            raise ConfigurationError("A content store is required to run the pipeline")
        self.store = store
        self.collector = collector
        self.scraper = scraper
        self.analyzer = analyzer
        self.headline_generator = headline_generator
        self.top_k = top_k
        self.recent_window_hours = recent_window_hours
        self.candidate_limit = candidate_limit
        self.summary_max_workers = summary_max_workers

    def _check_store(self):
        if not self.store.ping():
            raise ConfigurationError("Content store is not reachable")

    def scrape(self, sources=None, limit=50, report=None):
        """Collect sitemap entries, extract each candidate and upsert the results."""
        report = report or RunReport()
        self._check_store()

        selected_sources = resolve_sources(sources, build_sources())
        logger.info(f"Scraping {len(selected_sources)} sources (limit {limit})")
        failed_before = self.collector.stats['shards_failed']
        requested_count = len(requested_source_ids(sources)) or len(selected_sources)
        entries_by_source = self.collector.collect(selected_sources, limit=limit, requested_count=requested_count)
        shard_count = sum(len(s.sitemaps) for s in selected_sources)
        report.collected.attempted += shard_count
        report.collected.succeeded += shard_count - (self.collector.stats['shards_failed'] - failed_before)

        articles = []
        for source in selected_sources:
            entries = entries_by_source.get(source.id, [])
            report.extracted.attempted += len(entries)
            scraped = self.scraper.scrape_entries(entries, source)
            report.extracted.succeeded += len(scraped)
            articles.extend(scraped)

        report.stored.attempted = len(articles)
        saved = self.store.save_articles(articles)
        report.stored.succeeded = len(saved)
        logger.info(f"Saved {len(saved)} articles to database")
        return report

    def _enhance(self, selected, report):
        report.summarized.attempted = len(selected)
        with ThreadPoolExecutor(max_workers=self.summary_max_workers) as executor:
            summaries = list(executor.map(
                lambda s: self.headline_generator.request_summary(s.article), selected
            ))

        entries = []
        for scored, summary in zip(selected, summaries):
            if summary:
                report.summarized.succeeded += 1
            else:
                summary = self.headline_generator.summary_fallback(scored.article)
            entries.append(BundleEntry(scored=scored, enhanced_summary=summary))
        return entries

    def curate(self, report=None):
        """Analyze the recent window, rank, summarize and persist a new DailyBundle."""
        report = report or RunReport()
        self._check_store()

        candidates = self.store.read_recent(hours=self.recent_window_hours, limit=self.candidate_limit)
        logger.info(f"Found {len(candidates)} recent articles")

        analyzable = [a for a in candidates if a.body_available]
        report.analyzed.attempted = len(analyzable)
        pairs = self.analyzer.analyze_many(analyzable)
        report.analyzed.succeeded = len(pairs)

        selected = rank_and_select(pairs, self.top_k)
        report.selected.attempted = len(pairs)
        report.selected.succeeded = len(selected)
        logger.info(f"Selected {len(selected)} top articles")

        entries = self._enhance(selected, report)
        headline = self.headline_generator.generate_headline(selected)
        logger.info(f"Generated headline: {headline}")

        bundle = self.store.append_bundle(DailyBundle(headline=headline, entries=entries))
        report.bundle_id = bundle.id
        report.headline = headline
        return report

    def run(self, sources=None, limit=50):
        report = RunReport()
        self.scrape(sources=sources, limit=limit, report=report)
        self.curate(report=report)
        logger.info(f"Curation run complete: {report.summary_line()}")
        return report


def build_pipeline(settings, store: ArticleStore, client=None):
    """Wire a DailyCurationTask from a Flask-style settings mapping."""
    if store is None:
        raise ConfigurationError("A content store is required to run the pipeline")
    if client is None:
        client = GeminiClient(
            api_key=settings.get('GOOGLE_API_KEY'),
            model=settings.get('GEMINI_MODEL') or DEFAULT_MODEL,
            thinking_budget=settings.get('GEMINI_THINKING_BUDGET', DEFAULT_THINKING_BUDGET),
        )

    timeout = settings.get('REQUEST_TIMEOUT_SECONDS', 15)
    fetch_workers = settings.get('FETCH_MAX_WORKERS', 5)
    analysis_workers = settings.get('ANALYSIS_MAX_WORKERS', 3)
    session = build_session()

    return DailyCurationTask(
        store=store,
        collector=SitemapCollectorTask(session=session, timeout=timeout, max_workers=fetch_workers),
        scraper=ArticleScraperTask(session=session, timeout=timeout, max_workers=fetch_workers),
        analyzer=GeminiAnalyzerTask(client, max_workers=analysis_workers),
        headline_generator=HeadlineGeneratorTask(client),
        top_k=settings.get('TOP_K', DEFAULT_TOP_K),
        recent_window_hours=settings.get('RECENT_WINDOW_HOURS', 24),
        candidate_limit=settings.get('CANDIDATE_LIMIT', 50),
        summary_max_workers=analysis_workers,
    )
