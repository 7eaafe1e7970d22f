# blog/routers/admin.py

import logging
import time
import json
from typing import Any, Dict, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import HTMLResponse, JSONResponse
from jsonschema import Draft7Validator
from pydantic import ValidationError as PayloadError

from blog.config import PACKAGE_DIR
from blog.dependencies import (
    ADMIN_COOKIE,
    admin_token,
    check_admin_password,
    get_content_cache,
    get_store,
    is_admin,
    require_admin,
)
from blog.errors import ConstraintError, FetchError
from blog.models.content import TABLES
from blog.schemas.content import RECORD_MODELS, WRITE_MODELS
from blog.services import content_service
from blog.services.content_cache import ContentCache
from blog.services.store import DataStore
from blog.templating import templates

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])

# Load and prepare payload schemas once at import time
schema_path = PACKAGE_DIR / "schemas" / "admin_payloads.json"
with schema_path.open("r", encoding="utf-8") as f:
    admin_schema = json.load(f)


def _validator(table: str, creating: bool) -> Draft7Validator:
    schema = dict(admin_schema["definitions"][table])
    schema["definitions"] = admin_schema["definitions"]
    if creating:
        schema["required"] = admin_schema["required_on_create"][table]
    return Draft7Validator(schema)


create_validators = {t: _validator(t, creating=True) for t in TABLES}
update_validators = {t: _validator(t, creating=False) for t in TABLES}


def _bad_request(errors) -> JSONResponse:
    return JSONResponse(status_code=400, content={"validationErrors": list(errors)})


def _store_unavailable(ex: FetchError) -> JSONResponse:
    logger.error("admin: store error: %s", ex)
    return JSONResponse(status_code=503, content={"detail": str(ex)})


def _check_table(table: str) -> None:
    if table not in TABLES:
        raise HTTPException(status_code=404, detail="Unknown table")


async def _read_payload(request: Request, table: str, creating: bool):
    """
    Parse and validate a write payload.
    Returns (row values, None) on success or (None, 400 response) on failure.
    """
    try:
        payload = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid JSON format")

    validator = (create_validators if creating else update_validators)[table]
    validation_errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    if validation_errors:
        return None, _bad_request(e.message for e in validation_errors)

    # Schema passed; pydantic coerces types (datetime-local strings, etc.)
    try:
        values = WRITE_MODELS[table](**payload).model_dump(exclude_unset=True)
    except PayloadError as ex:
        return None, _bad_request(f"{'.'.join(map(str, err['loc']))}: {err['msg']}" for err in ex.errors())

    if table == "posts" and creating and not values.get("slug"):
        values["slug"] = f"post-{int(time.time() * 1000)}"
    if "tech_stack" in values and values["tech_stack"] is None:
        values["tech_stack"] = []
    if "featured" in values and values["featured"] is None:
        values["featured"] = False
    return values, None


def _after_write(table: str, cache: ContentCache) -> None:
    # Post edits must be visible on the next page render
    if table == "posts":
        cache.clear_cache()


@router.get("", response_class=HTMLResponse)
def admin_page(request: Request, tab: str = "posts", store: DataStore = Depends(get_store)):
    """
    GET /admin
    Login form until the shared password has been entered, then the dashboard
    with one tab per table.
    """
    if not is_admin(request):
        return templates.TemplateResponse(request, "admin_login.html", {"page_title": "Admin"})
    _check_table(tab)
    error = None
    try:
        rows = content_service.list_rows(store, tab)
    except FetchError as ex:
        logger.error("admin: failed to load %s: %s", tab, ex)
        rows, error = [], str(ex)
    return templates.TemplateResponse(
        request,
        "admin.html",
        {"page_title": "Admin", "tab": tab, "tabs": list(TABLES), "rows": rows, "error": error},
        status_code=503 if error else 200,
    )


@router.post("/login")
async def login(request: Request):
    try:
        payload = await request.json()
    except Exception:
        raise HTTPException(status_code=400, detail="Invalid JSON format")
    password = payload.get("password") if isinstance(payload, dict) else None
    if not isinstance(password, str) or not check_admin_password(request, password):
        logger.warning("admin: failed login attempt")
        raise HTTPException(status_code=401, detail="Wrong password")

    response = JSONResponse({"status": "ok"})
    response.set_cookie(ADMIN_COOKIE, admin_token(password), httponly=True, samesite="strict")
    return response


@router.post("/logout")
def logout():
    response = JSONResponse({"status": "ok"})
    response.delete_cookie(ADMIN_COOKIE)
    return response


@router.get("/api/{table}", dependencies=[Depends(require_admin)])
def list_table(table: str, store: DataStore = Depends(get_store)):
    _check_table(table)
    try:
        return content_service.list_rows(store, table)
    except FetchError as ex:
        return _store_unavailable(ex)


@router.post("/api/{table}", dependencies=[Depends(require_admin)])
async def create_row(
    table: str,
    request: Request,
    store: DataStore = Depends(get_store),
    cache: ContentCache = Depends(get_content_cache),
):
    """
    POST /admin/api/{table}
    Status codes:
      - 200: created, returns the stored row
      - 400: payload failed schema validation or the store rejected it (validationErrors list)
      - 401: not logged in
      - 404: unknown table
      - 503: the store could not be reached ({"detail": message})
    """
    _check_table(table)
    values, error = await _read_payload(request, table, creating=True)
    if error is not None:
        return error
    try:
        row = store.insert(table, values)
    except ConstraintError as ex:
        return _bad_request([str(ex)])
    except FetchError as ex:
        return _store_unavailable(ex)
    _after_write(table, cache)
    logger.info("admin: created %s row %s", table, row["id"])
    return RECORD_MODELS[table].model_validate(row).model_dump(mode="json")


@router.put("/api/{table}/{row_id}", dependencies=[Depends(require_admin)])
async def update_row(
    table: str,
    row_id: UUID,
    request: Request,
    store: DataStore = Depends(get_store),
    cache: ContentCache = Depends(get_content_cache),
):
    _check_table(table)
    values, error = await _read_payload(request, table, creating=False)
    if error is not None:
        return error
    try:
        row: Optional[Dict[str, Any]] = store.update(table, row_id, values)
    except ConstraintError as ex:
        return _bad_request([str(ex)])
    except FetchError as ex:
        return _store_unavailable(ex)
    if row is None:
        raise HTTPException(status_code=404, detail="Row not found")
    _after_write(table, cache)
    logger.info("admin: updated %s row %s", table, row_id)
    return RECORD_MODELS[table].model_validate(row).model_dump(mode="json")


@router.delete("/api/{table}/{row_id}", dependencies=[Depends(require_admin)])
def delete_row(
    table: str,
    row_id: UUID,
    store: DataStore = Depends(get_store),
    cache: ContentCache = Depends(get_content_cache),
):
    _check_table(table)
    try:
        deleted = store.delete(table, row_id)
    except FetchError as ex:
        return _store_unavailable(ex)
    if not deleted:
        raise HTTPException(status_code=404, detail="Row not found")
    _after_write(table, cache)
    logger.info("admin: deleted %s row %s", table, row_id)
    return {"status": "deleted", "id": str(row_id)}
