"""FastAPI 应用工厂"""

from __future__ import annotations

import time
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import AsyncIterator, Callable

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, RedirectResponse

from .. import __version__
from ..common.browser import create_browser_session
from ..common.constants import API_VERSION, SERVICE_NAME
from ..common.exceptions import ValidationError, ZhihuFeedError
from ..common.logger import get_logger
from ..scraper.collector import FeedCollector
from ..storage import FeedStore, InMemoryFeedStore
from .routers import feeditems, status

logger = get_logger(__name__)

FEED_ITEMS_PATH = f"/apis/{API_VERSION}/feeditems"

Lifespan = Callable[[FastAPI], AbstractAsyncContextManager[None]]


def error_response(exc: ZhihuFeedError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "error": {"code": exc.code, "message": exc.message, "details": exc.details},
            "timestamp": int(time.time() * 1000),
        },
    )


@asynccontextmanager
async def browser_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """在应用生命周期内打开浏览器会话并挂载采集器"""
    async with create_browser_session() as session:
        app.state.collector = FeedCollector(session.feed_page())
        logger.info("Feed collector ready")
        try:
            yield
        finally:
            app.state.collector = None
            logger.info("Shutting down browser session...")


def create_app(
    store: FeedStore | None = None,
    collector: FeedCollector | None = None,
    lifespan: Lifespan | None = None,
) -> FastAPI:
    """创建 API 应用

    Args:
        store: Feed 存储，默认内存存储
        collector: 采集器；为空时列表接口只返回已有数据
        lifespan: 生命周期钩子（如 ``browser_lifespan``）
    """
    app = FastAPI(title=SERVICE_NAME, version=__version__, lifespan=lifespan)
    app.state.store = store or InMemoryFeedStore()
    app.state.collector = collector
    app.state.started_at = time.monotonic()

    app.include_router(feeditems.router)
    app.include_router(status.router)

    @app.exception_handler(ZhihuFeedError)
    async def handle_app_error(request: Request, exc: ZhihuFeedError):
        logger.error("Request error: %s %s -> %s", request.method, request.url.path, exc)
        return error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        details = [{"loc": list(err["loc"]), "msg": err["msg"]} for err in exc.errors()]
        return error_response(ValidationError("Invalid request parameters", details=details))

    @app.get("/api/feed", include_in_schema=False)
    async def legacy_feed():
        return RedirectResponse(FEED_ITEMS_PATH, status_code=301)

    @app.get("/")
    async def index():
        return {
            "name": SERVICE_NAME,
            "version": __version__,
            "endpoints": {
                "feed": {
                    f"GET {FEED_ITEMS_PATH}": "List feed items (auto-scrapes when needed)",
                    f"GET {FEED_ITEMS_PATH}/{{name}}": "Get single feed item",
                    f"DELETE {FEED_ITEMS_PATH}": "Clear feed storage",
                    f"POST /apis/{API_VERSION}/scrapejobs": "Run a scrape job",
                },
                "status": {"GET /api/status": "Health check"},
            },
        }

    return app
