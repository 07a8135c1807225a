from datetime import datetime
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .article import utcnow

CATEGORIES = ("politics", "culture", "business", "international", "lifestyle", "opinion")
ENGAGEMENT_LEVELS = ("low", "medium", "high")

Category = Literal["politics", "culture", "business", "international", "lifestyle", "opinion"]
Engagement = Literal["low", "medium", "high"]


# Pydantic model for the structured JSON reply of the analysis collaborator
class AnalysisResponse(BaseModel):
    category: Category
    quality_score: int = Field(ge=1, le=10, validation_alias=AliasChoices("quality_score", "qualityScore"))
    relevance_score: int = Field(ge=1, le=10, validation_alias=AliasChoices("relevance_score", "relevanceScore"))
    key_topics: list[str] = Field(validation_alias=AliasChoices("key_topics", "keyTopics"))
    summary: str
    engagement_potential: Engagement = Field(
        validation_alias=AliasChoices("engagement_potential", "engagementPotential")
    )
    model_config = ConfigDict(extra="forbid")

    @field_validator("category", "engagement_potential", mode="before")
    @classmethod
    def _lowercase(cls, value):
        return value.strip().lower() if isinstance(value, str) else value


class Analysis(BaseModel):
    """Validated analysis of one article."""
    article_id: Optional[str] = None
    category: Category
    quality_score: int = Field(ge=1, le=10)
    relevance_score: int = Field(ge=1, le=10)
    key_topics: list[str] = Field(default_factory=list)
    summary: str
    engagement_potential: Engagement
    processed_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def from_response(cls, article_id, response: AnalysisResponse) -> "Analysis":
        return cls(article_id=article_id, **response.model_dump())
