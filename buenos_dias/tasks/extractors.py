"""Body-extraction strategies, keyed by the name a Source refers to."""
import logging

from newspaper import Article

from ..utils.text import MIN_SELECTOR_TEXT_LENGTH

logger = logging.getLogger(__name__)

NEWYORKER_SELECTORS = (
    'article .article-content p',
    'article .content p',
    '.article-body p',
    '.story-body p',
    '[data-testid="article-body"] p',
    '.paragraph-text',
    'article p',
)


def selector_strategy(selectors):
    """Build a strategy that tries CSS selectors in order.

    The first selector whose joined paragraph text is longer than
    MIN_SELECTOR_TEXT_LENGTH wins; otherwise the last non-empty text is kept.
    """
    def extract(soup, html, url):
        body_text = ''
        for selector in selectors:
            paragraphs = soup.select(selector)
            if not paragraphs:
                continue
            body_text = '\n\n'.join(p.get_text().strip() for p in paragraphs)
            if len(body_text) > MIN_SELECTOR_TEXT_LENGTH:
                break
        return body_text

    extract.selectors = tuple(selectors)
    return extract


def extract_with_newspaper(soup, html, url):
    """Generic full-text extraction for sources without hand-written selectors."""
    article = Article(url)
    article.download(input_html=html)
    article.parse()
    return article.text or ''


EXTRACTION_STRATEGIES = {
    "newyorker": selector_strategy(NEWYORKER_SELECTORS),
    "newspaper": extract_with_newspaper,
}


def get_strategy(name, strategies=None):
    strategies = EXTRACTION_STRATEGIES if strategies is None else strategies
    try:
        return strategies[name]
    except KeyError:
        raise KeyError(f"No extraction strategy registered under '{name}'") from None
