import logging
import math
from datetime import date, timedelta
from typing import Optional

from pydantic import BaseModel, ConfigDict, model_validator

logger = logging.getLogger(__name__)


class Source(BaseModel):
    """Static configuration of one content source."""
    id: str
    name: str
    sitemaps: tuple[str, ...]
    url_patterns: tuple[str, ...]
    extractor: str
    # Brand phrase the paywall heuristic looks for; derived from the name when not given
    brand: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _default_brand(cls, data):
        if isinstance(data, dict) and not data.get("brand") and data.get("name"):
            brand = data["name"]
            if brand.lower().startswith("the "):
                brand = brand[4:]
            data = {**data, "brand": brand.lower()}
        return data


def newyorker_weekly_sitemaps(today: Optional[date] = None, weeks: int = 3) -> tuple[str, ...]:
    """Weekly sitemap shards covering the last `weeks` weeks, newest first."""
    today = today or date.today()
    urls = []
    for offset in range(weeks):
        day = today - timedelta(weeks=offset)
        week_of_month = math.ceil(day.day / 7)
        url = f"https://www.newyorker.com/sitemap.xml?year={day.year}&month={day.month}&week={week_of_month}"
        if url not in urls:
            urls.append(url)
    return tuple(urls)


def build_sources(today: Optional[date] = None) -> dict[str, Source]:
    return {
        "newyorker": Source(
            id="newyorker",
            name="The New Yorker",
            sitemaps=newyorker_weekly_sitemaps(today),
            url_patterns=('/magazine/', '/culture/', '/podcast/', '/humor/', '/books/',
                          '/business/', '/tech/', '/politics/'),
            extractor="newyorker",
        ),
        "atlantic": Source(
            id="atlantic",
            name="The Atlantic",
            sitemaps=("https://www.theatlantic.com/sitemap.xml",),
            url_patterns=('/articles/', '/magazine/', '/culture/', '/politics/'),
            extractor="newspaper",
        ),
    }


NEWS_SOURCES = build_sources()


def get_source(source_id: str, registry: Optional[dict[str, Source]] = None) -> Source:
    registry = NEWS_SOURCES if registry is None else registry
    try:
        return registry[source_id]
    except KeyError:
        raise KeyError(f"Unknown source: {source_id}") from None


def requested_source_ids(requested=None) -> list[str]:
    """Distinct source ids named by a request, known or not; empty for "all"."""
    if isinstance(requested, str):
        requested = [part.strip() for part in requested.split(',')]
    ids = []
    for source_id in requested or []:
        if source_id and source_id.lower() != "all" and source_id not in ids:
            ids.append(source_id)
    return ids


def resolve_sources(requested=None, registry: Optional[dict[str, Source]] = None) -> list[Source]:
    """Map requested source ids to configured sources; unknown ids are logged and skipped.

    An empty request (or "all") selects every configured source.
    """
    registry = NEWS_SOURCES if registry is None else registry
    requested = requested_source_ids(requested)
    if not requested:
        return list(registry.values())

    sources = []
    for source_id in requested:
        if source_id not in registry:
            logger.warning(f"Ignoring unknown source: {source_id}")
            continue
        sources.append(registry[source_id])
    return sources
