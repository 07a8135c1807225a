import logging
import math
import threading
import xml.etree.ElementTree as ET
from concurrent.futures import ThreadPoolExecutor
from datetime import timezone

from dateutil.parser import parse as parse_date

from ..errors import FetchError, ParseError
from ..models import SitemapEntry
from ..utils.http import DEFAULT_TIMEOUT, build_session, fetch_text

logger = logging.getLogger(__name__)

LASTMOD_TAGS = ("lastmod", "lastModified")


def _local_name(tag):
    """Strip the XML namespace from a tag name."""
    return tag.rsplit('}', 1)[-1]


def parse_lastmod(value):
    if not value:
        return None
    try:
        parsed = parse_date(value.strip())
    except (ValueError, OverflowError):
        logger.debug(f"Unparseable lastmod: {value}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_sitemap_xml(xml):
    """Parse a <urlset> document into (loc, lastmod) pairs.

    Raises ParseError for malformed XML; a document without <url> records
    yields an empty list.
    """
    if not xml or not xml.strip():
        return []
    try:
        root = ET.fromstring(xml)
    except ET.ParseError as e:
        raise ParseError(f"Malformed sitemap: {e}") from e

    if _local_name(root.tag).lower() != "urlset":
        return []

    entries = []
    for url_el in root:
        if _local_name(url_el.tag) != "url":
            continue
        fields = {_local_name(child.tag): (child.text or "").strip() for child in url_el}
        loc = fields.get("loc")
        if not loc:
            continue
        lastmod = next((fields[tag] for tag in LASTMOD_TAGS if fields.get(tag)), None)
        entries.append((loc, parse_lastmod(lastmod)))
    return entries


def matches_patterns(loc, patterns):
    return any(pattern in loc for pattern in patterns)


def dedupe_entries(entries):
    """Keep the first-seen entry for each loc, preserving encounter order."""
    deduped = {}
    for entry in entries:
        if entry.loc not in deduped:
            deduped[entry.loc] = entry
    return list(deduped.values())


def sort_entries(entries):
    """Newest lastmod first; undated entries last, in encounter order.

    Both passes use Python's stable sort, so ties keep their input order.
    """
    dated = [e for e in entries if e.lastmod is not None]
    undated = [e for e in entries if e.lastmod is None]
    dated = sorted(dated, key=lambda e: e.lastmod, reverse=True)
    return dated + undated


def per_source_cap(limit, source_count):
    if source_count <= 0:
        return 0
    return math.ceil(limit / source_count)


class SitemapCollectorTask:
    def __init__(self, session=None, timeout=DEFAULT_TIMEOUT, max_workers=5):
        self.session = session or build_session()
        self.timeout = timeout
        self.max_workers = max_workers
        self.stats = {
            'shards_fetched': 0,
            'shards_failed': 0,
            'entries_parsed': 0,
            'entries_kept': 0,
        }
        self._lock = threading.Lock()

    def _count(self, key, amount=1):
        with self._lock:
            self.stats[key] += amount

    def fetch_shard(self, sitemap_url):
        """Fetch and parse one sitemap shard. A failing shard yields no entries."""
        try:
            xml = fetch_text(sitemap_url, session=self.session, timeout=self.timeout)
            parsed = parse_sitemap_xml(xml)
        except FetchError as e:
            logger.error(f"Failed to fetch sitemap {sitemap_url}: {e}")
            self._count('shards_failed')
            return []
        except ParseError as e:
            logger.error(f"Failed to parse sitemap {sitemap_url}: {e}")
            self._count('shards_failed')
            return []

        self._count('shards_fetched')
        self._count('entries_parsed', len(parsed))
        return parsed

    def collect_source(self, source, cap=None):
        """Collect, filter, deduplicate and order the sitemap entries of one source."""
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            # map() yields in shard order, keeping first-seen dedup deterministic
            shards = list(executor.map(self.fetch_shard, source.sitemaps))

        matched = [
            SitemapEntry(loc=loc, lastmod=lastmod, source=source.id)
            for shard in shards
            for loc, lastmod in shard
            if matches_patterns(loc, source.url_patterns)
        ]
        entries = sort_entries(dedupe_entries(matched))
        if cap is not None:
            entries = entries[:cap]

        self._count('entries_kept', len(entries))
        logger.info(f"Collected {len(entries)} candidate URLs for {source.name} "
                    f"({len(matched)} matched across {len(source.sitemaps)} sitemaps)")
        return entries

    def collect(self, sources, limit=50, requested_count=None):
        """Collect entries for every source, capped at ceil(limit / requested_count) each.

        requested_count defaults to len(sources); callers pass the number of ids
        asked for, unknown ones included.
        """
        cap = per_source_cap(limit, requested_count or len(sources))
        return {source.id: self.collect_source(source, cap=cap) for source in sources}
