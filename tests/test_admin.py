# tests/test_admin.py

from uuid import uuid4

from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from blog.dependencies import ADMIN_COOKIE
from blog.main import create_app
from blog.services.cache_backends import InProcessLRUCache
from blog.services.store import SqlDataStore


def _new_post(idx: int = 0, **overrides):
    payload = {
        "slug": f"admin-post-{idx}",
        "title": f"Admin Post {idx}",
        "content": f"Body {idx}",
        "excerpt": None,
        "published_at": "2026-01-20T10:00:00Z",
    }
    payload.update(overrides)
    return payload


def test_admin_page_shows_login_form_until_logged_in(client):
    res = client.get("/admin")
    assert res.status_code == 200
    assert 'id="login-form"' in res.text


def test_wrong_password_is_401(client):
    res = client.post("/admin/login", json={"password": "nope"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Wrong password"
    assert ADMIN_COOKIE not in client.cookies


def test_login_sets_cookie_and_shows_dashboard(admin_client):
    assert ADMIN_COOKIE in admin_client.cookies
    res = admin_client.get("/admin?tab=projects")
    assert res.status_code == 200
    assert 'data-table="projects"' in res.text


def test_unknown_tab_is_404(admin_client):
    assert admin_client.get("/admin?tab=comments").status_code == 404


def test_empty_admin_password_disables_login(store):
    app = create_app(store=store, cache=InProcessLRUCache(capacity=8), admin_password="")
    with TestClient(app) as c:
        assert c.post("/admin/login", json={"password": ""}).status_code == 401


def test_logout_clears_cookie(admin_client):
    assert admin_client.post("/admin/logout").status_code == 200
    assert admin_client.get("/admin/api/posts").status_code == 401


def test_api_requires_login(client, make_post):
    post = make_post("protected")
    assert client.get("/admin/api/posts").status_code == 401
    assert client.post("/admin/api/posts", json=_new_post()).status_code == 401
    assert client.put(f"/admin/api/posts/{post['id']}", json={"title": "x"}).status_code == 401
    assert client.delete(f"/admin/api/posts/{post['id']}").status_code == 401


def test_forged_cookie_is_rejected(client):
    client.cookies.set(ADMIN_COOKIE, "not-the-digest")
    assert client.get("/admin/api/posts").status_code == 401


def test_post_crud_round_trip(admin_client):
    res = admin_client.post("/admin/api/posts", json=_new_post(1))
    assert res.status_code == 200
    created = res.json()
    assert created["slug"] == "admin-post-1"
    assert created["view_count"] == 0
    assert created["published_at"] == "2026-01-20T10:00:00Z"
    assert created["created_at"].endswith("Z")

    listed = admin_client.get("/admin/api/posts").json()
    assert [p["id"] for p in listed] == [created["id"]]

    res = admin_client.put(f"/admin/api/posts/{created['id']}", json={"title": "Renamed", "published_at": None})
    assert res.status_code == 200
    assert res.json()["title"] == "Renamed"
    assert res.json()["published_at"] is None

    res = admin_client.delete(f"/admin/api/posts/{created['id']}")
    assert res.status_code == 200
    assert res.json() == {"status": "deleted", "id": created["id"]}
    assert admin_client.get("/admin/api/posts").json() == []


def test_admin_list_includes_drafts(admin_client, make_post):
    make_post("draft", published_at=None)
    make_post("live")
    slugs = {p["slug"] for p in admin_client.get("/admin/api/posts").json()}
    assert slugs == {"draft", "live"}


def test_empty_slug_gets_generated(admin_client):
    res = admin_client.post("/admin/api/posts", json=_new_post(slug=""))
    assert res.status_code == 200
    assert res.json()["slug"].startswith("post-")


def test_create_missing_required_fields_is_400(admin_client):
    res = admin_client.post("/admin/api/posts", json={"slug": "no-title"})
    assert res.status_code == 400
    errors = res.json()["validationErrors"]
    assert any("title" in e for e in errors)
    assert any("content" in e for e in errors)


def test_unknown_field_is_400(admin_client):
    res = admin_client.post("/admin/api/posts", json=_new_post(view_count=100))
    assert res.status_code == 400
    assert "validationErrors" in res.json()


def test_wrong_type_is_400(admin_client):
    res = admin_client.post("/admin/api/projects", json={"title": "P", "tech_stack": "Python"})
    assert res.status_code == 400


def test_bad_timestamp_is_400(admin_client):
    res = admin_client.post("/admin/api/posts", json=_new_post(published_at="not-a-date"))
    assert res.status_code == 400
    assert res.json()["validationErrors"][0].startswith("published_at")


def test_invalid_json_is_400(admin_client):
    res = admin_client.post(
        "/admin/api/posts", content="{not json", headers={"Content-Type": "application/json"}
    )
    assert res.status_code == 400


def test_duplicate_slug_is_400(admin_client):
    assert admin_client.post("/admin/api/posts", json=_new_post(7)).status_code == 200
    res = admin_client.post("/admin/api/posts", json=_new_post(7))
    assert res.status_code == 400
    assert len(res.json()["validationErrors"]) == 1


def test_missing_row_is_404(admin_client):
    assert admin_client.put(f"/admin/api/posts/{uuid4()}", json={"title": "x"}).status_code == 404
    assert admin_client.delete(f"/admin/api/posts/{uuid4()}").status_code == 404


def test_unknown_table_is_404(admin_client):
    assert admin_client.get("/admin/api/comments").status_code == 404
    assert admin_client.post("/admin/api/comments", json={}).status_code == 404


def test_project_and_research_crud(admin_client):
    res = admin_client.post("/admin/api/projects", json={
        "title": "Blog Engine",
        "tech_stack": ["Python", "FastAPI"],
        "featured": True,
    })
    assert res.status_code == 200
    project = res.json()
    assert project["tech_stack"] == ["Python", "FastAPI"]
    assert project["featured"] is True

    res = admin_client.put(f"/admin/api/projects/{project['id']}", json={"tech_stack": None, "featured": None})
    assert res.status_code == 200
    assert res.json()["tech_stack"] == []
    assert res.json()["featured"] is False

    res = admin_client.post("/admin/api/researches", json={"title": "Agents", "category": "LLM"})
    assert res.status_code == 200
    assert res.json()["category"] == "LLM"
    assert res.json()["tech_stack"] == []


def test_post_writes_clear_the_page_cache(admin_client):
    # Prime the cached list, then publish through the admin API
    assert "fresh-from-admin" not in admin_client.get("/blog").text
    res = admin_client.post("/admin/api/posts", json=_new_post(slug="fresh-from-admin"))
    assert res.status_code == 200
    assert "/blog/fresh-from-admin" in admin_client.get("/blog").text

    post_id = res.json()["id"]
    admin_client.put(f"/admin/api/posts/{post_id}", json={"title": "Edited Title"})
    assert "Edited Title" in admin_client.get("/blog/fresh-from-admin").text

    admin_client.delete(f"/admin/api/posts/{post_id}")
    assert admin_client.get("/blog/fresh-from-admin").status_code == 404

def test_store_errors_return_503_with_message(tmp_path):
    # Database file without the schema: every store call fails
    store = SqlDataStore(create_engine(f"sqlite:///{tmp_path / 'broken.db'}"))
    app = create_app(store=store, cache=InProcessLRUCache(capacity=8), admin_password="secret")
    with TestClient(app) as c:
        assert c.post("/admin/login", json={"password": "secret"}).status_code == 200

        res = c.get("/admin")
        assert res.status_code == 503
        assert 'class="form-error store-error"' in res.text

        for res in (
            c.get("/admin/api/posts"),
            c.post("/admin/api/posts", json={"title": "t", "content": "c"}),
            c.put(f"/admin/api/posts/{uuid4()}", json={"title": "t"}),
            c.delete(f"/admin/api/posts/{uuid4()}"),
        ):
            assert res.status_code == 503
            assert "posts" in res.json()["detail"]
