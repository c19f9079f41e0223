"""
API Schemas for Open Douban

Pydantic models for response serialization:
- Metadata records and people
- Search results
- Celebrities and photos
- Health and errors
"""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# =============================================================================
# Metadata Schemas
# =============================================================================

class PersonResponse(BaseModel):
    """Cast or crew entry."""

    name: str
    type: str = Field(..., description="Director, Actor, or the upstream role label")
    role: str
    image_url: Optional[str] = None
    provider_ids: dict[str, str] = Field(default_factory=dict)


class MetadataRecordResponse(BaseModel):
    """Canonical movie metadata."""

    provider_ids: dict[str, str]
    name: str
    original_title: Optional[str] = None
    overview: Optional[str] = None
    community_rating: Optional[float] = None
    production_year: Optional[int] = None
    premiere_date: Optional[date] = None
    image_url: Optional[str] = None
    home_page_url: Optional[str] = None
    genres: list[str] = Field(default_factory=list)
    production_locations: list[str] = Field(default_factory=list)
    people: list[PersonResponse] = Field(default_factory=list)


class MetadataResponse(BaseModel):
    """Result of a metadata request."""

    has_metadata: bool
    queried_by_id: bool = False
    record: Optional[MetadataRecordResponse] = None

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "has_metadata": True,
                "queried_by_id": False,
                "record": {
                    "provider_ids": {"OpenDouban": "1295038", "Imdb": "tt0241527"},
                    "name": "哈利·波特与魔法石",
                    "production_year": 2001,
                    "people": [],
                },
            }
        }
    )


# =============================================================================
# Search Schemas
# =============================================================================

class SearchResultResponse(BaseModel):
    """Lightweight search candidate."""

    provider_ids: dict[str, str]
    name: str
    production_year: Optional[int] = None
    image_url: Optional[str] = None


class SearchResponse(BaseModel):
    """Candidate listing in upstream order."""

    results: list[SearchResultResponse]
    total: int


# =============================================================================
# Celebrity / Photo Schemas
# =============================================================================

class CelebrityResponse(BaseModel):
    """Person details."""

    id: str
    name: str
    img: str = ""
    role: str = ""
    intro: str = ""
    gender: str = ""
    constellation: str = ""
    birthdate: str = ""
    birthplace: str = ""
    nickname: str = ""
    imdb: str = ""
    site: str = ""


class PhotoResponse(BaseModel):
    """Photo with size variants."""

    id: str
    small: str = ""
    medium: str = ""
    large: str = ""
    size: str = ""
    width: int = 0
    height: int = 0


# =============================================================================
# System Schemas
# =============================================================================

class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    components: dict[str, str] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.utcnow)


class ErrorResponse(BaseModel):
    """Standard error payload."""

    error: str
    code: str
    detail: Optional[str] = None
    timestamp: Optional[str] = None
