"""FeedItem / ScrapeJob 资源路由"""

from __future__ import annotations

from uuid import uuid4

from fastapi import APIRouter, Query, Request
from fastapi.responses import JSONResponse

from ...common.config import config
from ...common.constants import API_VERSION
from ...common.exceptions import BrowserError, ScrapeError
from ...common.logger import get_logger
from ...common.types import FeedType, QueryOptions
from ..resources import (
    FeedItemList,
    FeedItemResource,
    JobPhase,
    ObjectMeta,
    ScrapeJobRequest,
    ScrapeJobResource,
    ScrapeJobStatus,
    feed_item_to_resource,
    feed_items_to_list,
    not_found_status,
    utc_now_iso,
)
from .status import api_response

logger = get_logger(__name__)

router = APIRouter(prefix=f"/apis/{API_VERSION}", tags=["feeditems"])


@router.get("/feeditems", response_model=FeedItemList, response_model_exclude_none=True)
async def list_feed_items(
    request: Request,
    limit: int = Query(20, ge=1, le=200),
    offset: int = Query(0, ge=0),
    feed_type: FeedType | None = Query(None, alias="type"),
):
    """列出条目；存量不足 ``offset + limit`` 时先自动补抓"""
    store = request.app.state.store
    collector = request.app.state.collector

    total = await store.count()
    needed = offset + limit
    if total < needed and collector is not None:
        to_scrape = max(needed - total, config.scraper.auto_scrape_min_items)
        logger.info("Auto-scraping %d items (have %d, need %d)", to_scrape, total, needed)
        try:
            new_items = await collector.scrape_feed(max_items=to_scrape)
            await store.save(new_items)
            logger.info("Auto-scrape completed: %d items", len(new_items))
        except ScrapeError as e:
            # 补抓失败时继续返回已有数据
            logger.error("Auto-scrape failed: %s", e)

    items = await store.query(QueryOptions(limit=limit, offset=offset, type=feed_type))
    filtered_total = await store.count(feed_type)
    return feed_items_to_list(items, filtered_total, offset)


@router.get(
    "/feeditems/{name}",
    response_model=FeedItemResource,
    response_model_exclude_none=True,
)
async def get_feed_item(request: Request, name: str):
    item = await request.app.state.store.get_by_id(name)
    if item is None:
        status = not_found_status("FeedItem", name)
        return JSONResponse(
            status_code=404,
            content=status.model_dump(mode="json", by_alias=True, exclude_none=True),
        )
    return feed_item_to_resource(item)


@router.delete("/feeditems")
async def clear_feed_items(request: Request):
    """清空存储与采集器的去重缓存"""
    await request.app.state.store.clear()
    collector = request.app.state.collector
    if collector is not None:
        collector.clear_seen_ids()
    return api_response({"message": "Feed storage cleared"})


@router.post(
    "/scrapejobs",
    status_code=201,
    response_model=ScrapeJobResource,
    response_model_exclude_none=True,
)
async def create_scrape_job(request: Request, body: ScrapeJobRequest):
    """同步执行一次抓取，返回完成后的 ScrapeJob"""
    store = request.app.state.store
    collector = request.app.state.collector
    if collector is None:
        raise BrowserError("Browser not initialized")

    spec = body.spec
    started = utc_now_iso()
    job = ScrapeJobResource(
        metadata=ObjectMeta(name=f"scrape-{uuid4().hex[:8]}", creation_timestamp=started),
        spec=spec,
        status=ScrapeJobStatus(phase=JobPhase.RUNNING, start_time=started),
    )

    if spec.clear_cache:
        await store.clear()
        collector.clear_seen_ids()

    try:
        items = await collector.scrape_feed(max_items=spec.max_items, timeout_ms=spec.timeout)
    except ScrapeError as e:
        logger.error("Scrape job %s failed: %s", job.metadata.name, e)
        job.status.phase = JobPhase.FAILED
        job.status.message = str(e)
    else:
        await store.save(items)
        job.status.phase = JobPhase.SUCCEEDED
        job.status.items_scraped = len(items)
        job.status.message = f"Scraped {len(items)} items"

    job.status.completion_time = utc_now_iso()
    return job
