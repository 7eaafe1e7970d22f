# blog/rendering.py
"""Text helpers shared by the page templates: keywords, body blocks, dates and head metadata."""

import re
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from blog.config import AUTHOR_NAME, SITE_NAME, SITE_URL
from blog.schemas.content import Post

SITE_KEYWORDS = ["기술 블로그", "Agentic Engineer", "AI", "개발"]
DESCRIPTION_CHARS = 160

_NON_WORD = re.compile(r"[^\w\s가-힣]", re.ASCII)
_HEADINGS = (("### ", "h3"), ("## ", "h2"), ("# ", "h1"))


def extract_keywords(content: str, limit: int = 5) -> List[str]:
    """Most frequent words longer than two characters, ties kept in first-seen order."""
    words = [w for w in _NON_WORD.sub(" ", content.lower()).split() if len(w) > 2]
    return [word for word, _ in Counter(words).most_common(limit)]


def split_blocks(content: str) -> List[Tuple[str, str]]:
    """
    Split a post body into (tag, text) blocks, one per non-blank line.
    '# ', '## ' and '### ' prefixes become headings; everything else is a paragraph.
    """
    blocks = []
    for line in content.split("\n"):
        if not line.strip():
            continue
        for prefix, tag in _HEADINGS:
            if line.startswith(prefix):
                blocks.append((tag, line[len(prefix):]))
                break
        else:
            blocks.append(("p", line))
    return blocks


def korean_date(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    return f"{value.year}년 {value.month}월 {value.day}일"


def thousands(value: int) -> str:
    return f"{value:,}"


def iso_utc(value: Optional[datetime]) -> str:
    if value is None:
        return ""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def post_description(post: Post) -> str:
    return post.excerpt or post.content[:DESCRIPTION_CHARS]


def og_image_url(title: str) -> str:
    return f"{SITE_URL}/api/og?title={quote(title, safe='')}"


def post_metadata(post: Post) -> Dict[str, Any]:
    """Head tags and JSON-LD for a post detail page."""
    url = f"{SITE_URL}/blog/{post.slug}"
    description = post_description(post)
    image = og_image_url(post.title)
    published = iso_utc(post.published_at) or None
    return {
        "title": post.title,
        "description": description,
        "keywords": ", ".join(SITE_KEYWORDS + extract_keywords(post.content)),
        "canonical": url,
        "og": {
            "title": post.title,
            "description": description,
            "type": "article",
            "url": url,
            "site_name": SITE_NAME,
            "published_time": published,
            "image": {"url": image, "width": 1200, "height": 630, "alt": post.title},
        },
        "twitter": {
            "card": "summary_large_image",
            "title": post.title,
            "description": description,
            "image": image,
        },
        "structured_data": {
            "@context": "https://schema.org",
            "@type": "BlogPosting",
            "headline": post.title,
            "description": description,
            "datePublished": published,
            "dateModified": published,
            "url": url,
            "image": image,
            "author": {"@type": "Person", "name": AUTHOR_NAME},
        },
    }
