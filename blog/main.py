# blog/main.py

from contextlib import asynccontextmanager
import logging
from typing import Optional
from fastapi import FastAPI, Request
from fastapi.staticfiles import StaticFiles
from blog.config import ADMIN_PASSWORD, CACHE_TTL_SECONDS, LOG_LEVEL, STATIC_DIR
from blog.database import engine
from blog.errors import FetchError
from blog.routers import admin, pages
from blog.services.cache import Cache
from blog.services.cache_factory import create_cache
from blog.services.content_cache import ContentCache
from blog.services.store import DataStore, SqlDataStore

logging.basicConfig(level=LOG_LEVEL)
logger = logging.getLogger(__name__)


def create_app(
    store: Optional[DataStore] = None,
    cache: Optional[Cache] = None,
    admin_password: str = ADMIN_PASSWORD,
    cache_ttl_seconds: int = CACHE_TTL_SECONDS,
) -> FastAPI:
    """
    Build the site. The store and cache are explicit objects on app.state so
    each app (and each test) owns its own cache instead of sharing a global one.
    """
    store = store if store is not None else SqlDataStore(engine)
    cache = cache if cache is not None else create_cache()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting blog (cache=%s, ttl=%ss)", type(cache).__name__, cache_ttl_seconds)
        # Entries survive shutdown: a redis cache is shared by every worker
        yield
        logger.info("Blog stopped.")

    app = FastAPI(lifespan=lifespan)
    app.state.store = store
    app.state.content_cache = ContentCache(store, cache, ttl_seconds=cache_ttl_seconds)
    app.state.admin_password = admin_password

    app.mount("/static", StaticFiles(directory=str(STATIC_DIR)), name="static")
    app.include_router(pages.router)
    app.include_router(admin.router)

    @app.get("/health")
    def health_check(request: Request):
        try:
            request.app.state.store.ping()
            return {"status": "ok", "db": "connected"}
        except FetchError as e:
            return {"status": "error", "db": str(e)}

    return app


app = create_app()
