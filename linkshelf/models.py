"""
Data models for link ingestion and storage
"""
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


NO_TITLE = "제목 없음"
DEFAULT_THUMBNAIL = "https://via.placeholder.com/300x200?text=No+Image"


@dataclass(frozen=True)
class CanonicalUrl:
    """Validated URL: `url` is the fetch target, `key` the per-owner dedup key"""
    url: str
    key: str

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class PageMetadata:
    """Title, description and thumbnail shown for a link"""
    title: str = NO_TITLE
    description: str = ""
    thumbnail: str = DEFAULT_THUMBNAIL

    @classmethod
    def placeholder(cls) -> "PageMetadata":
        """Metadata used when the page could not be fetched or parsed."""
        return cls()


@dataclass(frozen=True)
class ExtractedPage:
    """Classification text and display metadata parsed from one document"""
    text: str
    metadata: PageMetadata


class IngestionStage(Enum):
    """Stages of a single link submission"""
    VALIDATING = "validating"
    FETCHING = "fetching"
    EXTRACTING = "extracting"
    CLASSIFYING = "classifying"
    PERSISTING = "persisting"
    DONE = "done"
    REJECTED_INPUT = "rejected_input"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class Owner:
    """Authenticated user submitting or querying links"""
    id: int
    nickname: str = ""
    image_uri: Optional[str] = None


class OwnerSummary(BaseModel):
    """Owner fields embedded in a link response."""

    id: int
    nickname: str = ""
    image_uri: Optional[str] = None

    @classmethod
    def from_owner(cls, owner: Owner) -> "OwnerSummary":
        return cls(id=owner.id, nickname=owner.nickname, image_uri=owner.image_uri)


class LinkRecord(BaseModel):
    """A persisted link owned by a single user."""

    id: int
    url: str
    category: str
    title: str = NO_TITLE
    description: str = ""
    thumbnail: str = DEFAULT_THUMBNAIL
    created_at: datetime = Field(default_factory=datetime.now)
    updated_at: datetime = Field(default_factory=datetime.now)
    owner: Optional[OwnerSummary] = None

    def to_response(self) -> Dict[str, Any]:
        """Convert to the API response shape."""
        return {
            "id": self.id,
            "url": self.url,
            "category": self.category,
            "title": self.title,
            "description": self.description,
            "thumbnail": self.thumbnail,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
            "user": {
                "id": self.owner.id,
                "nickName": self.owner.nickname,
                "imageUri": self.owner.image_uri,
            } if self.owner else None,
        }


@dataclass
class IngestionResult:
    """Outcome of LinkService.ingest()"""
    record: LinkRecord
    stage: IngestionStage = IngestionStage.DONE
    reason: Optional[str] = None

    @property
    def degraded(self) -> bool:
        return self.stage == IngestionStage.DEGRADED
