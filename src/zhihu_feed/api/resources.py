"""Kubernetes 风格资源定义与转换"""

from __future__ import annotations

import re
from datetime import datetime, timezone
from enum import Enum

from pydantic import Field

from ..common.constants import API_GROUP, API_VERSION
from ..common.types import Author, CamelModel, FeedItem, FeedType, Stats

_LABEL_UNSAFE_RE = re.compile(r"[^a-z0-9-]", re.IGNORECASE)

TYPE_LABEL = f"{API_GROUP}/type"
AUTHOR_LABEL = f"{API_GROUP}/author"
URL_ANNOTATION = f"{API_GROUP}/url"


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class ObjectMeta(CamelModel):
    name: str
    namespace: str | None = None
    uid: str | None = None
    creation_timestamp: str
    labels: dict[str, str] = Field(default_factory=dict)
    annotations: dict[str, str] = Field(default_factory=dict)


# ============================================================================
# FeedItem
# ============================================================================


class FeedItemSpec(CamelModel):
    title: str
    excerpt: str
    url: str
    author: Author
    tags: list[str] = Field(default_factory=list)


class FeedItemStatus(CamelModel):
    type: FeedType
    stats: Stats


class FeedItemResource(CamelModel):
    kind: str = "FeedItem"
    api_version: str = API_VERSION
    metadata: ObjectMeta
    spec: FeedItemSpec
    status: FeedItemStatus


class ListMeta(CamelModel):
    continue_: str | None = Field(default=None, alias="continue")
    remaining_item_count: int = 0


class FeedItemList(CamelModel):
    kind: str = "FeedItemList"
    api_version: str = API_VERSION
    metadata: ListMeta = Field(default_factory=ListMeta)
    items: list[FeedItemResource] = Field(default_factory=list)


# ============================================================================
# ScrapeJob
# ============================================================================


class JobPhase(str, Enum):
    PENDING = "Pending"
    RUNNING = "Running"
    SUCCEEDED = "Succeeded"
    FAILED = "Failed"


class ScrapeJobSpec(CamelModel):
    max_items: int | None = Field(default=None, ge=1, le=1000)
    timeout: int | None = Field(default=None, ge=1000, description="毫秒")
    clear_cache: bool = False


class ScrapeJobStatus(CamelModel):
    phase: JobPhase = JobPhase.PENDING
    items_scraped: int | None = None
    start_time: str | None = None
    completion_time: str | None = None
    message: str | None = None


class ScrapeJobResource(CamelModel):
    kind: str = "ScrapeJob"
    api_version: str = API_VERSION
    metadata: ObjectMeta
    spec: ScrapeJobSpec = Field(default_factory=ScrapeJobSpec)
    status: ScrapeJobStatus = Field(default_factory=ScrapeJobStatus)


class ScrapeJobRequest(CamelModel):
    """创建 ScrapeJob 的请求体，只关心 spec"""

    spec: ScrapeJobSpec = Field(default_factory=ScrapeJobSpec)


# ============================================================================
# Status
# ============================================================================


class Condition(CamelModel):
    type: str
    status: str = "True"
    last_transition_time: str = Field(default_factory=utc_now_iso)
    reason: str
    message: str


class StatusDetails(CamelModel):
    conditions: list[Condition] = Field(default_factory=list)


class StatusResource(CamelModel):
    kind: str = "Status"
    api_version: str = "v1"
    metadata: ObjectMeta
    status: StatusDetails


# ============================================================================
# 转换
# ============================================================================


def author_label(name: str) -> str:
    return _LABEL_UNSAFE_RE.sub("-", name).lower()


def feed_item_to_resource(item: FeedItem) -> FeedItemResource:
    return FeedItemResource(
        metadata=ObjectMeta(
            name=item.id,
            creation_timestamp=item.created_at,
            labels={
                TYPE_LABEL: item.type.value,
                AUTHOR_LABEL: author_label(item.author.name),
            },
            annotations={URL_ANNOTATION: item.url},
        ),
        spec=FeedItemSpec(
            title=item.title,
            excerpt=item.excerpt,
            url=item.url,
            author=item.author,
            tags=item.tags,
        ),
        status=FeedItemStatus(type=item.type, stats=item.stats),
    )


def feed_items_to_list(items: list[FeedItem], total: int, offset: int) -> FeedItemList:
    """转换为列表资源

    ``remainingItemCount`` 为 ``offset + len(items)`` 之后还剩的条目数。
    """
    consumed = offset + len(items)
    remaining = total - consumed if consumed < total else 0
    return FeedItemList(
        metadata=ListMeta(remaining_item_count=remaining),
        items=[feed_item_to_resource(item) for item in items],
    )


def not_found_status(kind: str, name: str) -> StatusResource:
    return StatusResource(
        metadata=ObjectMeta(name="", creation_timestamp=utc_now_iso()),
        status=StatusDetails(
            conditions=[
                Condition(
                    type="NotFound",
                    reason="ResourceNotFound",
                    message=f'{kind} "{name}" not found',
                )
            ]
        ),
    )
