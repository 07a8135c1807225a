import datetime as dt
from typing import Optional

from pydantic import BaseModel, Field

from .analysis import Analysis
from .article import RawArticle, utcnow


class ScoredArticle(BaseModel):
    article: RawArticle
    analysis: Analysis
    final_score: float


class BundleEntry(BaseModel):
    scored: ScoredArticle
    enhanced_summary: str


class DailyBundle(BaseModel):
    """One curation run: headline plus the ranked, summarized selection."""
    id: Optional[str] = None
    headline: str
    entries: list[BundleEntry] = Field(default_factory=list)
    processed_at: dt.datetime = Field(default_factory=utcnow)
    published: bool = False
    date: dt.date = Field(default_factory=lambda: utcnow().date())

    def to_document(self) -> dict:
        doc = self.model_dump(exclude={"id"})
        # BSON has no date type
        doc["date"] = self.date.isoformat()
        return doc

    @classmethod
    def from_document(cls, doc: dict) -> "DailyBundle":
        data = {k: v for k, v in doc.items() if k != "_id"}
        if doc.get("_id") is not None:
            data["id"] = str(doc["_id"])
        return cls(**data)


class StageCount(BaseModel):
    attempted: int = 0
    succeeded: int = 0

    @property
    def failed(self) -> int:
        return self.attempted - self.succeeded


class RunReport(BaseModel):
    """Attempted vs succeeded counts per pipeline stage."""
    collected: StageCount = Field(default_factory=StageCount)
    extracted: StageCount = Field(default_factory=StageCount)
    stored: StageCount = Field(default_factory=StageCount)
    analyzed: StageCount = Field(default_factory=StageCount)
    selected: StageCount = Field(default_factory=StageCount)
    summarized: StageCount = Field(default_factory=StageCount)
    bundle_id: Optional[str] = None
    headline: Optional[str] = None

    def summary_line(self) -> str:
        stages = ("collected", "extracted", "stored", "analyzed", "selected", "summarized")
        return ", ".join(
            f"{name} {getattr(self, name).succeeded}/{getattr(self, name).attempted}" for name in stages
        )
