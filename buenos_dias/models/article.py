from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SitemapEntry(BaseModel):
    """One <url> record of a sitemap shard, tagged with the source it came from."""
    loc: str
    lastmod: Optional[datetime] = None
    source: str

    model_config = ConfigDict(frozen=True)


class RawArticle(BaseModel):
    """A scraped article as stored in the content store, keyed by url."""
    id: Optional[str] = None
    url: str
    source: str
    source_name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    body_text: Optional[str] = None
    body_available: bool = False
    published_at: Optional[datetime] = None
    scraped_at: datetime = Field(default_factory=utcnow)
    raw_structured_data: Optional[str] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "url": "https://www.newyorker.com/culture/example-article",
                "source": "newyorker",
                "source_name": "The New Yorker",
                "title": "Example Article",
                "description": "Brief description of the article",
                "image_url": "https://media.newyorker.com/photos/example.jpg",
                "body_text": "Full article content...",
                "body_available": True,
                "published_at": "2025-11-18T10:00:00Z",
                "scraped_at": "2025-11-18T12:30:00Z",
            }
        }
    )

    def to_document(self) -> dict:
        """Mongo document for this article, without the store-assigned id."""
        return self.model_dump(exclude={"id"})

    @classmethod
    def from_document(cls, doc: dict) -> "RawArticle":
        data = {k: v for k, v in doc.items() if k != "_id"}
        if doc.get("_id") is not None:
            data["id"] = str(doc["_id"])
        return cls(**data)
