# tests/test_tasks.py

import json
from datetime import date, datetime, timezone

import pytest

from blog.tasks import backend_qa, backup, bundle_size, posts


# -- backup --

def test_backup_writes_non_empty_tables_and_metadata(store, make_post, tmp_path):
    make_post("one")
    make_post("two", published_at=None)
    store.insert("researches", {"title": "R"})

    out = backup.backup_database(store, tmp_path / "backups", now=datetime(2026, 1, 2, 3, 4, 5))

    assert out.name == "backup-2026-01-02_03-04-05"
    saved = json.loads((out / "posts.json").read_text(encoding="utf-8"))
    assert sorted(p["slug"] for p in saved) == ["one", "two"]
    assert not (out / "projects.json").exists()
    assert (out / "researches.json").exists()

    metadata = json.loads((out / "metadata.json").read_text(encoding="utf-8"))
    assert metadata["tables"] == ["posts", "projects", "researches"]
    assert metadata["counts"] == {"posts": 2, "projects": 0, "researches": 1}
    assert metadata["timestamp"].endswith("Z")


def test_backup_timestamp_format():
    assert backup.backup_timestamp(datetime(2026, 12, 31, 23, 59, 1)) == "2026-12-31_23-59-01"


# -- bundle size --

def test_analyze_bundles_sorts_and_flags_large_assets(tmp_path):
    (tmp_path / "js").mkdir()
    (tmp_path / "js" / "big.js").write_bytes(b"a" * 3000)
    (tmp_path / "small.css").write_bytes(b"body{}")
    (tmp_path / "readme.txt").write_bytes(b"x" * 10000)

    report = bundle_size.analyze_bundles(tmp_path, threshold_kb=2)

    assert [a.name for a in report.assets] == ["js/big.js", "small.css"]
    assert report.total_files == 2
    assert report.total_size == 3006
    assert report.large_count == 1
    assert report.assets[0].is_large is True
    # Repetitive content compresses well
    assert report.assets[0].gzip_size < report.assets[0].size


def test_analyze_bundles_keeps_top_twenty(tmp_path):
    for i in range(25):
        (tmp_path / f"chunk-{i:02d}.js").write_bytes(b"x" * (i + 1))
    report = bundle_size.analyze_bundles(tmp_path, threshold_kb=200)
    assert len(report.assets) == 20
    assert report.total_files == 25
    assert report.assets[0].name == "chunk-24.js"


def test_analyze_bundles_missing_directory(tmp_path):
    with pytest.raises(FileNotFoundError):
        bundle_size.analyze_bundles(tmp_path / "nope", threshold_kb=200)


def test_format_size():
    assert bundle_size.format_size(512) == "512.00 B"
    assert bundle_size.format_size(2048) == "2.00 KB"
    assert bundle_size.format_size(3 * 1024 * 1024) == "3.00 MB"


# -- post scaffolding --

def test_render_template_substitutes_title_and_date():
    content = posts.render_template("blog-post", "My First Post", today=date(2026, 4, 1))
    assert "title: My First Post" in content
    assert "# My First Post" in content
    assert "published: 2026-04-01" in content
    assert "[Post Title]" not in content
    assert "YYYY-MM-DD" not in content


@pytest.mark.parametrize("name", list(posts.TEMPLATES))
def test_every_template_substitutes_its_placeholders(name):
    content = posts.render_template(name, "Replaced", today=date(2026, 4, 1))
    for placeholder in posts.TITLE_PLACEHOLDERS:
        assert placeholder not in content
    assert "Replaced" in content


def test_unknown_template():
    with pytest.raises(posts.UnknownTemplateError):
        posts.render_template("poem", "t")


def test_create_post_file_refuses_overwrite(tmp_path):
    path = posts.create_post_file("tutorial", "my-tutorial", "How To", tmp_path)
    assert path == tmp_path / "my-tutorial.md"
    assert path.read_text(encoding="utf-8").startswith("---")
    with pytest.raises(FileExistsError):
        posts.create_post_file("tutorial", "my-tutorial", "Other", tmp_path)


def test_parse_frontmatter():
    meta, body = posts.parse_frontmatter("---\ntitle: Hello: World\nslug:\n---\n\n# Body\ntext")
    assert meta == {"title": "Hello: World", "slug": ""}
    assert body == "# Body\ntext"


def test_parse_frontmatter_without_block():
    meta, body = posts.parse_frontmatter("# Just a body")
    assert meta == {}
    assert body == "# Just a body"


def test_slugify():
    assert posts.slugify("Hello World!") == "hello-world"
    assert posts.slugify("  FastAPI  &  SQLAlchemy ") == "fastapi-sqlalchemy"
    assert posts.slugify("에이전트 설계") == "에이전트-설계"


def test_extract_post_data_derives_slug_and_date():
    data = posts.extract_post_data("---\ntitle: Hello World\nslug:\nexcerpt: Short\npublished: 2026-04-01\n---\nBody")
    assert data["slug"] == "hello-world"
    assert data["title"] == "Hello World"
    assert data["excerpt"] == "Short"
    assert data["content"] == "Body"
    assert data["published_at"] == datetime(2026, 4, 1)


def test_extract_post_data_draft_and_explicit_slug():
    data = posts.extract_post_data("---\ntitle: T\nslug: custom\npublished:\n---\nBody")
    assert data["slug"] == "custom"
    assert data["published_at"] is None
    assert data["excerpt"] is None


def test_parse_published_accepts_zulu_timestamps():
    assert posts.parse_published("2026-04-01T09:00:00Z") == datetime(2026, 4, 1, 9, tzinfo=timezone.utc)


# -- backend QA --

def test_qa_passes_on_a_healthy_database(store, make_post):
    make_post("existing")
    results = backend_qa.run_qa(store)

    assert results.failed == []
    names = [r["name"] for r in results.passed]
    assert "Empty slug validation" in names
    assert "Duplicate key handling" in names
    assert "View count increment" in names
    # Throwaway rows are cleaned up
    assert [p["slug"] for p in store.select("posts")] == ["existing"]


def test_qa_report_shape(store, tmp_path):
    results = backend_qa.run_qa(store)
    path = backend_qa.write_report(results, tmp_path / "memory" / "backend-qa.json")
    report = json.loads(path.read_text(encoding="utf-8"))
    assert report["totalTests"] == report["passed"] + report["failed"]
    assert report["failed"] == 0
    assert set(report["details"]) == {"passed", "failed", "warnings"}


def test_qa_records_store_failures(tmp_path):
    from sqlalchemy import create_engine
    from blog.services.store import SqlDataStore

    bare = SqlDataStore(create_engine(f"sqlite:///{tmp_path / 'empty.db'}"))
    results = backend_qa.run_qa(bare)
    assert results.failed
    assert "check_connection" in [r["name"] for r in results.failed]
