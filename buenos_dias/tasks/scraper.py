import json
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from datetime import datetime, timezone

from bs4 import BeautifulSoup
from dateutil.parser import parse as parse_date

from ..errors import FetchError
from ..models import RawArticle
from ..utils.http import DEFAULT_TIMEOUT, build_session, fetch_text
from ..utils.text import evaluate_body
from .extractors import get_strategy

logger = logging.getLogger(__name__)

ARTICLE_TYPES = ("NewsArticle", "Article")


def _node_shape(node):
    """Classify a JSON-LD node: 'list', 'article', 'graph' or 'other'."""
    if isinstance(node, list):
        return "list"
    if isinstance(node, dict):
        declared = node.get("@type")
        types = declared if isinstance(declared, list) else [declared]
        if any(t in ARTICLE_TYPES for t in types):
            return "article"
        if isinstance(node.get("@graph"), list):
            return "graph"
    return "other"


def pick_article_node(node):
    """Depth-first search for the first article-typed node, in encounter order."""
    shape = _node_shape(node)
    if shape == "article":
        return node
    if shape == "list":
        children = node
    elif shape == "graph":
        children = node["@graph"]
    else:
        return None

    for child in children:
        picked = pick_article_node(child)
        if picked is not None:
            return picked
    return None


def find_structured_article(soup):
    """Return (article_node, raw_block_text) from the page's JSON-LD blocks.

    Every block is parsed on its own; a block that fails to parse is skipped.
    """
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        text = script.get_text().strip()
        if not text:
            continue
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError as e:
            logger.debug(f"Skipping unparseable JSON-LD block: {e}")
            continue
        node = pick_article_node(parsed)
        if node is not None:
            return node, text
    return None, None


def _text(value):
    """Non-empty string value, or None for any other shape."""
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _first(value):
    """First usable string of a scalar, list or ImageObject value."""
    if isinstance(value, list):
        return next((v for v in map(_first, value) if v), None)
    if isinstance(value, dict):
        return _first(value.get("url"))
    return _text(value)


def extract_from_structured_data(node):
    if not node:
        return {}
    return {
        "title": _text(node.get("headline")) or _text(node.get("name")),
        "description": _text(node.get("description")),
        "image_url": _first(node.get("image")),
        "published_at": _text(node.get("datePublished")) or _text(node.get("dateCreated")),
    }


def _meta_content(soup, **attrs):
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return None
    return (tag.get("content") or "").strip() or None


def extract_from_meta(soup):
    page_title = soup.title.get_text().strip() if soup.title else None
    return {
        "title": (_meta_content(soup, property="og:title")
                  or _meta_content(soup, name="twitter:title")
                  or page_title or None),
        "description": (_meta_content(soup, property="og:description")
                        or _meta_content(soup, name="description")),
        "image_url": (_meta_content(soup, property="og:image")
                      or _meta_content(soup, name="twitter:image")),
        "published_at": None,
    }


def parse_published_at(value):
    if not value:
        return None
    if isinstance(value, datetime):
        return value
    try:
        parsed = parse_date(str(value))
    except (ValueError, OverflowError):
        logger.warning(f"Could not parse published_at: {value}")
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class ArticleScraperTask:
    def __init__(self, session=None, timeout=DEFAULT_TIMEOUT, max_workers=5, strategies=None):
        self.session = session or build_session()
        self.timeout = timeout
        self.max_workers = max_workers
        self.strategies = strategies
        self.stats = {
            'articles_scraped': 0,
            'bodies_available': 0,
            'errors': 0,
        }
        self._lock = threading.Lock()

    def _count(self, key):
        with self._lock:
            self.stats[key] += 1

    def parse_article(self, html, url, source):
        """Build a RawArticle from an already fetched page."""
        soup = BeautifulSoup(html, "html.parser")

        node, raw_json_ld = find_structured_article(soup)
        from_ld = extract_from_structured_data(node)
        from_meta = extract_from_meta(soup)

        strategy = get_strategy(source.extractor, self.strategies)
        body_text, body_available = evaluate_body(strategy(soup, html, url), source.brand)

        def resolve(field):
            return from_ld.get(field) or from_meta.get(field)

        return RawArticle(
            url=url,
            source=source.id,
            source_name=source.name,
            title=resolve("title"),
            description=resolve("description"),
            image_url=resolve("image_url"),
            body_text=body_text,
            body_available=body_available,
            published_at=parse_published_at(resolve("published_at")),
            scraped_at=datetime.now(timezone.utc),
            raw_structured_data=raw_json_ld,
        )

    def scrape_article(self, url, source):
        """Fetch and extract one article. Raises FetchError if the page can't be fetched."""
        html = fetch_text(url, session=self.session, timeout=self.timeout)
        article = self.parse_article(html, url, source)
        self._count('articles_scraped')
        if article.body_available:
            self._count('bodies_available')
        return article

    def _scrape_or_skip(self, url, source):
        try:
            return self.scrape_article(url, source)
        except FetchError as e:
            logger.error(f"Failed to scrape article {url}: {e}")
        except Exception as e:
            logger.error(f"Error extracting article {url}: {e}", exc_info=True)
        self._count('errors')
        return None

    def scrape_entries(self, entries, source):
        """Scrape every entry of one source; failed URLs are logged and left out.

        Results keep the order of `entries`.
        """
        results = [None] * len(entries)
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            future_to_index = {
                executor.submit(self._scrape_or_skip, entry.loc, source): index
                for index, entry in enumerate(entries)
            }
            for future in as_completed(future_to_index):
                results[future_to_index[future]] = future.result()

        articles = [a for a in results if a is not None]
        logger.info(f"Completed {source.name}: {len(articles)}/{len(entries)} articles")
        return articles
