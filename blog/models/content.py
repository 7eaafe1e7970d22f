# models/content.py

import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Text, Integer, Boolean, DateTime, JSON, Uuid, CheckConstraint, false
from blog.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Post(Base):
    __tablename__ = "posts"
    __table_args__ = (
        CheckConstraint("length(slug) > 0", name="posts_slug_not_empty"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)

    # URL identifier, unique across all posts
    slug = Column(String(200), nullable=False, unique=True)

    title = Column(String(300), nullable=False)

    # Markdown-like body: '# ', '## ', '### ' headings, one paragraph per line
    content = Column(Text, nullable=False)

    excerpt = Column(Text, nullable=True)

    # NULL means draft; public pages only show rows with a publish date
    published_at = Column(DateTime(timezone=True), nullable=True, index=True)

    view_count = Column(Integer, nullable=False, default=0, server_default="0")

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class Project(Base):
    __tablename__ = "projects"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=True)

    # List of technology names, e.g. ["Python", "FastAPI"]
    tech_stack = Column(JSON, nullable=False, default=list)

    github_url = Column(String(500), nullable=True)
    demo_url = Column(String(500), nullable=True)
    image_url = Column(String(500), nullable=True)

    featured = Column(Boolean, nullable=False, default=False, server_default=false())

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


class Research(Base):
    __tablename__ = "researches"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    title = Column(String(300), nullable=False)
    description = Column(Text, nullable=True)
    tech_stack = Column(JSON, nullable=False, default=list)
    github_url = Column(String(500), nullable=True)

    # Free-form grouping label shown as a badge (e.g. "LLM", "Agents")
    category = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)


TABLES = {
    "posts": Post.__table__,
    "projects": Project.__table__,
    "researches": Research.__table__,
}
