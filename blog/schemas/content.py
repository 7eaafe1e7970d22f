# blog/schemas/content.py

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator
from typing import Optional, List
from uuid import UUID
from datetime import datetime, timezone


def _to_utc_z(v: Optional[datetime]) -> Optional[str]:
    # Naive timestamps (e.g. from SQLite) are taken as UTC
    if v is None:
        return None
    if v.tzinfo is None:
        v = v.replace(tzinfo=timezone.utc)
    v = v.astimezone(timezone.utc)
    return v.isoformat(timespec="seconds").replace("+00:00", "Z")


class _Record(BaseModel):
    """
    Base for rows read from the store.
    Records are immutable once fetched; the cache hands the same values to every page.
    """
    model_config = ConfigDict(frozen=True, extra="ignore")

    @field_serializer("created_at", "published_at", check_fields=False)
    def _ser_timestamps(self, v: Optional[datetime]) -> Optional[str]:
        return _to_utc_z(v)


class Post(_Record):
    id: UUID
    slug: str
    title: str
    content: str
    excerpt: Optional[str] = None
    published_at: Optional[datetime] = None
    view_count: int = 0
    created_at: datetime


class Project(_Record):
    id: UUID
    title: str
    description: Optional[str] = None
    tech_stack: List[str] = Field(default_factory=list)
    github_url: Optional[str] = None
    demo_url: Optional[str] = None
    image_url: Optional[str] = None
    featured: bool = False
    created_at: datetime

    @field_validator("tech_stack", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v


class Research(_Record):
    id: UUID
    title: str
    description: Optional[str] = None
    tech_stack: List[str] = Field(default_factory=list)
    github_url: Optional[str] = None
    category: Optional[str] = None
    created_at: datetime

    @field_validator("tech_stack", mode="before")
    @classmethod
    def _none_as_empty(cls, v):
        return [] if v is None else v


# Admin write payloads. Shape checks live in admin_payloads.json; these models
# only coerce types (e.g. datetime-local strings) before the row hits the store.

class PostWrite(BaseModel):
    slug: Optional[str] = Field(None, description="URL identifier; generated when empty on create")
    title: Optional[str] = None
    content: Optional[str] = None
    excerpt: Optional[str] = None
    published_at: Optional[datetime] = Field(None, description="Publish time; null keeps the post a draft")


class ProjectWrite(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tech_stack: Optional[List[str]] = None
    github_url: Optional[str] = None
    demo_url: Optional[str] = None
    image_url: Optional[str] = None
    featured: Optional[bool] = None


class ResearchWrite(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    tech_stack: Optional[List[str]] = None
    github_url: Optional[str] = None
    category: Optional[str] = None


RECORD_MODELS = {
    "posts": Post,
    "projects": Project,
    "researches": Research,
}

WRITE_MODELS = {
    "posts": PostWrite,
    "projects": ProjectWrite,
    "researches": ResearchWrite,
}
