# tests/test_rendering.py

import uuid
from datetime import datetime, timezone

from blog import rendering
from blog.config import SITE_URL
from blog.schemas.content import Post


def _post(**fields):
    data = {
        "id": uuid.uuid4(),
        "slug": "agents-101",
        "title": "Agents 101",
        "content": "agents agents agents tools tools memory a an",
        "published_at": datetime(2026, 3, 9, 12, 0, tzinfo=timezone.utc),
        "created_at": datetime(2026, 3, 9, tzinfo=timezone.utc),
    }
    data.update(fields)
    return Post(**data)


def test_extract_keywords_by_frequency_skipping_short_words():
    assert rendering.extract_keywords("agents, agents! tools; memory a an") == ["agents", "tools", "memory"]


def test_extract_keywords_keeps_korean_words_and_limit():
    words = rendering.extract_keywords("에이전트 에이전트 시스템 alpha beta gamma delta", limit=2)
    assert words == ["에이전트", "시스템"]


def test_split_blocks_headings_and_paragraphs():
    content = "# Title\n\n## Section\n### Sub\nplain line\n   \n#no-space heading"
    assert rendering.split_blocks(content) == [
        ("h1", "Title"),
        ("h2", "Section"),
        ("h3", "Sub"),
        ("p", "plain line"),
        ("p", "#no-space heading"),
    ]


def test_korean_date():
    assert rendering.korean_date(datetime(2026, 1, 5)) == "2026년 1월 5일"
    assert rendering.korean_date(None) == ""


def test_thousands():
    assert rendering.thousands(42) == "42"
    assert rendering.thousands(1234567) == "1,234,567"


def test_iso_utc_treats_naive_as_utc():
    assert rendering.iso_utc(datetime(2026, 1, 1, 9, 0)) == "2026-01-01T09:00:00Z"
    assert rendering.iso_utc(None) == ""


def test_post_description_prefers_excerpt():
    assert rendering.post_description(_post(excerpt="Short")) == "Short"
    long_body = "x" * 500
    assert rendering.post_description(_post(content=long_body)) == "x" * 160


def test_post_metadata():
    meta = rendering.post_metadata(_post())
    url = f"{SITE_URL}/blog/agents-101"
    assert meta["title"] == "Agents 101"
    assert meta["canonical"] == url
    assert meta["keywords"].startswith(", ".join(rendering.SITE_KEYWORDS))
    assert meta["keywords"].endswith("agents, tools, memory")
    assert meta["og"]["type"] == "article"
    assert meta["og"]["image"]["url"] == f"{SITE_URL}/api/og?title=Agents%20101"
    assert meta["og"]["published_time"] == "2026-03-09T12:00:00Z"
    assert meta["twitter"]["card"] == "summary_large_image"
    assert meta["structured_data"]["@type"] == "BlogPosting"
    assert meta["structured_data"]["datePublished"] == "2026-03-09T12:00:00Z"


def test_post_metadata_for_unpublished_post_has_no_dates():
    meta = rendering.post_metadata(_post(published_at=None))
    assert meta["og"]["published_time"] is None
    assert meta["structured_data"]["datePublished"] is None


def test_extract_keywords_drops_non_hangul_unicode_letters():
    # Only ASCII word characters and Hangul count as keyword letters
    assert rendering.extract_keywords("日本語 日本語 café café python") == ["caf", "python"]
