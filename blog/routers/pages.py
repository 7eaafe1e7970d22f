# blog/routers/pages.py

import logging
from typing import List
from xml.etree import ElementTree as ET
from email.utils import format_datetime
from datetime import timezone

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, Response

from blog import rendering
from blog.config import SITE_DESCRIPTION, SITE_NAME, SITE_URL
from blog.dependencies import get_content_cache, get_store
from blog.errors import FetchError
from blog.schemas.content import Post
from blog.services import content_service
from blog.services.content_cache import ContentCache
from blog.services.store import DataStore
from blog.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(tags=["pages"])

HOME_POSTS_LIMIT = 5
RSS_ITEMS_LIMIT = 20

SKILLS = {
    "Languages": ["TypeScript", "Python", "Go", "Rust"],
    "Frontend": ["React", "Next.js", "Tailwind CSS"],
    "Backend": ["Node.js", "FastAPI", "PostgreSQL"],
    "AI/ML": ["LangChain", "OpenAI API", "Claude API"],
    "Infra": ["Docker", "AWS", "Vercel"],
}


def _or_empty(fetch, what: str) -> List:
    # A failed read shows an empty section rather than stale content
    try:
        return fetch()
    except FetchError as ex:
        logger.error("pages: failed to load %s: %s", what, ex)
        return []


@router.get("/", response_class=HTMLResponse)
def home(
    request: Request,
    cache: ContentCache = Depends(get_content_cache),
    store: DataStore = Depends(get_store),
):
    posts = _or_empty(lambda: cache.get_posts(limit=HOME_POSTS_LIMIT), "latest posts")
    projects = _or_empty(lambda: content_service.list_featured_projects(store), "featured projects")
    return templates.TemplateResponse(
        request, "index.html", {"posts": posts, "projects": projects, "active": "/"}
    )


@router.get("/blog", response_class=HTMLResponse)
def blog_index(request: Request, cache: ContentCache = Depends(get_content_cache)):
    posts = _or_empty(cache.get_posts, "posts")
    return templates.TemplateResponse(
        request, "blog_index.html", {"posts": posts, "page_title": "Blog", "active": "/blog"}
    )


@router.get("/rss.xml")
def rss_feed(cache: ContentCache = Depends(get_content_cache)):
    """RSS 2.0 feed of the latest published posts."""
    posts = _or_empty(lambda: cache.get_posts(limit=RSS_ITEMS_LIMIT), "rss posts")
    return Response(content=build_rss(posts), media_type="application/rss+xml")


@router.get("/blog/{slug}", response_class=HTMLResponse)
def blog_post(
    slug: str,
    request: Request,
    background_tasks: BackgroundTasks,
    cache: ContentCache = Depends(get_content_cache),
    store: DataStore = Depends(get_store),
):
    try:
        post = cache.get_post_by_slug(slug)
    except FetchError as ex:
        logger.error("pages: failed to load post %s: %s", slug, ex)
        post = None
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")

    # Detached: the page never waits on (or fails because of) the counter
    background_tasks.add_task(content_service.increment_view_count, store, slug)

    return templates.TemplateResponse(
        request,
        "post_detail.html",
        {
            "post": post,
            "blocks": rendering.split_blocks(post.content),
            "meta": rendering.post_metadata(post),
            "active": "/blog",
        },
    )


@router.get("/portfolio", response_class=HTMLResponse)
def portfolio(request: Request, store: DataStore = Depends(get_store)):
    projects = _or_empty(lambda: content_service.list_projects(store), "projects")
    return templates.TemplateResponse(
        request, "portfolio.html", {"projects": projects, "page_title": "Portfolio", "active": "/portfolio"}
    )


@router.get("/research", response_class=HTMLResponse)
def research(request: Request, store: DataStore = Depends(get_store)):
    researches = _or_empty(lambda: content_service.list_researches(store), "researches")
    return templates.TemplateResponse(
        request, "research.html", {"researches": researches, "page_title": "Research", "active": "/research"}
    )


@router.get("/about", response_class=HTMLResponse)
def about(request: Request):
    return templates.TemplateResponse(
        request, "about.html", {"skills": SKILLS, "page_title": "About", "active": "/about"}
    )


def build_rss(posts: List[Post]) -> bytes:
    rss = ET.Element("rss", version="2.0")
    channel = ET.SubElement(rss, "channel")
    ET.SubElement(channel, "title").text = SITE_NAME
    ET.SubElement(channel, "link").text = SITE_URL
    ET.SubElement(channel, "description").text = SITE_DESCRIPTION
    for post in posts:
        item = ET.SubElement(channel, "item")
        link = f"{SITE_URL}/blog/{post.slug}"
        ET.SubElement(item, "title").text = post.title
        ET.SubElement(item, "link").text = link
        ET.SubElement(item, "guid").text = link
        ET.SubElement(item, "description").text = rendering.post_description(post)
        if post.published_at is not None:
            published = post.published_at
            if published.tzinfo is None:
                published = published.replace(tzinfo=timezone.utc)
            ET.SubElement(item, "pubDate").text = format_datetime(published)
    return ET.tostring(rss, encoding="utf-8", xml_declaration=True)
