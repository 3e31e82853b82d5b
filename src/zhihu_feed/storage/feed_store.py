"""Feed 存储"""

from __future__ import annotations

import abc

from ..common.logger import get_logger
from ..common.types import FeedItem, FeedType, QueryOptions

logger = get_logger(__name__)


class FeedStore(abc.ABC):
    """Feed 存储抽象"""

    @abc.abstractmethod
    async def save(self, items: list[FeedItem]) -> None:
        """保存条目，同 ID 覆盖"""

    @abc.abstractmethod
    async def query(self, options: QueryOptions | None = None) -> list[FeedItem]:
        """按类型过滤并分页"""

    @abc.abstractmethod
    async def get_by_id(self, item_id: str) -> FeedItem | None:
        """按 ID 获取"""

    @abc.abstractmethod
    async def count(self, feed_type: FeedType | None = None) -> int:
        """条目数量，可按类型过滤"""

    @abc.abstractmethod
    async def clear(self) -> None:
        """清空存储"""


class InMemoryFeedStore(FeedStore):
    """进程内存储，按首次保存顺序返回"""

    def __init__(self) -> None:
        self._feeds: dict[str, FeedItem] = {}

    async def save(self, items: list[FeedItem]) -> None:
        for item in items:
            self._feeds[item.id] = item
        logger.debug("Saved %d items to memory store", len(items))

    async def query(self, options: QueryOptions | None = None) -> list[FeedItem]:
        options = options or QueryOptions()
        items = list(self._feeds.values())

        if options.type:
            items = [item for item in items if item.type == options.type]

        start = options.offset
        end = start + options.limit if options.limit is not None else None
        return items[start:end]

    async def get_by_id(self, item_id: str) -> FeedItem | None:
        return self._feeds.get(item_id)

    async def count(self, feed_type: FeedType | None = None) -> int:
        if feed_type is None:
            return len(self._feeds)
        return sum(1 for item in self._feeds.values() if item.type == feed_type)

    async def clear(self) -> None:
        self._feeds.clear()
        logger.debug("Cleared memory store")
