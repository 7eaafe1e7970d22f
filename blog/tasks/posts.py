# blog/tasks/posts.py
"""Markdown post scaffolding and import."""

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from blog.config import PACKAGE_DIR

TEMPLATES_DIR = PACKAGE_DIR / "post_templates"

TEMPLATES = {
    "blog-post": "blog-post.md",
    "tutorial": "tutorial.md",
    "postmortem": "postmortem.md",
    "library-review": "library-review.md",
    "technical-deep-dive": "technical-deep-dive.md",
    "quick-tips": "quick-tips.md",
    "project-showcase": "project-showcase.md",
    "api-tutorial": "api-tutorial.md",
}

TITLE_PLACEHOLDERS = ("[Post Title]", "[Title]", "[Project Name]", "[API Tutorial Title]")
DATE_PLACEHOLDER = "YYYY-MM-DD"

_FRONTMATTER_LINE = re.compile(r"^([^:]+):\s*(.*)$")
_SLUG_INVALID = re.compile(r"[^a-z0-9가-힣\s-]")


class UnknownTemplateError(KeyError):
    pass


def render_template(template_name: str, title: str, today: Optional[date] = None) -> str:
    try:
        filename = TEMPLATES[template_name]
    except KeyError:
        raise UnknownTemplateError(template_name) from None
    content = (TEMPLATES_DIR / filename).read_text(encoding="utf-8")
    for placeholder in TITLE_PLACEHOLDERS:
        content = content.replace(placeholder, title)
    return content.replace(DATE_PLACEHOLDER, (today or date.today()).isoformat())


def create_post_file(template_name: str, slug: str, title: str, output_dir: Path, today: Optional[date] = None) -> Path:
    """Raises FileExistsError rather than overwriting an existing draft."""
    output_path = Path(output_dir) / f"{slug}.md"
    if output_path.exists():
        raise FileExistsError(output_path)
    content = render_template(template_name, title, today)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
    return output_path


def parse_frontmatter(content: str) -> Tuple[Dict[str, str], str]:
    """
    Split a markdown file into ({key: value}, body).
    Frontmatter is the `key: value` block between a leading '---' line and the next '---'.
    Leading blank lines of the body are dropped.
    """
    lines = content.split("\n")
    frontmatter: Dict[str, str] = {}
    body_from = 0
    if lines and lines[0].strip() == "---":
        for i in range(1, len(lines)):
            if lines[i].strip() == "---":
                body_from = i + 1
                break
            match = _FRONTMATTER_LINE.match(lines[i])
            if match:
                frontmatter[match.group(1).strip()] = match.group(2).strip()
        else:
            # Unterminated block: treat the whole file as body
            frontmatter, body_from = {}, 0

    body_lines = lines[body_from:]
    while body_lines and not body_lines[0].strip():
        body_lines.pop(0)
    return frontmatter, "\n".join(body_lines)


def slugify(title: str) -> str:
    slug = _SLUG_INVALID.sub("-", title.lower())
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")


def parse_published(value: Optional[str]) -> Optional[datetime]:
    """'YYYY-MM-DD' or a full ISO timestamp; empty means draft."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def extract_post_data(content: str) -> Dict[str, Any]:
    frontmatter, body = parse_frontmatter(content)
    title = frontmatter.get("title") or frontmatter.get("[Post Title]")
    slug = frontmatter.get("slug") or (slugify(title) if title else None)
    return {
        "slug": slug,
        "title": title,
        "excerpt": frontmatter.get("excerpt") or frontmatter.get("Summary (Excerpt)") or None,
        "content": body,
        "published_at": parse_published(frontmatter.get("published")),
    }
