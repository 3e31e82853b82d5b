"""Feed 采集器

驱动页面滚动加载，反复解析当前 HTML，累积去重后的条目，
直到达到目标数量、超时或滚动到底。
"""

from __future__ import annotations

import asyncio
import time
from typing import Callable

from ..common.config import ScraperConfig, config
from ..common.constants import FEED_CONTAINER_TIMEOUT_MS, ZHIHU_FEED_URL
from ..common.exceptions import FeedContainerNotFoundError, NavigationTimeoutError, ScrapeError
from ..common.logger import get_logger
from ..common.types import FeedItem
from ..common.utils.delay import random_jitter
from . import selectors as S
from .page import FeedPage
from .parser import FeedParser, feed_parser

logger = get_logger(__name__)

JitterFn = Callable[[float, float], float]


class FeedCollector:
    """知乎首页 Feed 采集器

    一个实例独占一个页面。``seen_ids`` 在多次 ``scrape_feed`` 调用之间保留，
    只有 ``clear_seen_ids`` 会重置。抓取失败时本次见到的 ID 不会被记入。
    """

    def __init__(
        self,
        page: FeedPage,
        parser: FeedParser | None = None,
        jitter: JitterFn | None = None,
        scraper_config: ScraperConfig | None = None,
        feed_url: str = ZHIHU_FEED_URL,
    ):
        """初始化

        Args:
            page: 页面能力对象
            parser: Feed 解析器，默认使用全局解析器
            jitter: 防检测随机延迟函数 ``(min_s, max_s) -> seconds``
            scraper_config: 抓取配置，默认从全局配置读取
            feed_url: Feed 页面地址
        """
        self.page = page
        self.parser = parser or feed_parser
        self.jitter = jitter or random_jitter
        self.settings = scraper_config or config.scraper
        self.feed_url = feed_url

        self._seen_ids: set[str] = set()
        self._lock = asyncio.Lock()

    @property
    def seen_count(self) -> int:
        return len(self._seen_ids)

    def clear_seen_ids(self) -> None:
        self._seen_ids.clear()
        logger.debug("Cleared seen IDs cache")

    async def scrape_feed(
        self,
        max_items: int | None = None,
        timeout_ms: int | None = None,
        scroll_interval_ms: int | None = None,
    ) -> list[FeedItem]:
        """抓取 Feed

        Args:
            max_items: 目标条目数
            timeout_ms: 循环总超时（毫秒），同时作为导航超时
            scroll_interval_ms: 每次滚动后的等待时间（毫秒）

        Returns:
            首次出现顺序的新条目，最多 max_items 条

        Raises:
            ScrapeError: 导航失败、Feed 容器未出现或循环中出现未预期的错误
        """
        if max_items is None:
            max_items = self.settings.max_feed_items
        if timeout_ms is None:
            timeout_ms = self.settings.scrape_timeout_ms
        if scroll_interval_ms is None:
            scroll_interval_ms = self.settings.scroll_interval_ms

        async with self._lock:
            try:
                return await self._scrape(max_items, timeout_ms, scroll_interval_ms)
            except ScrapeError:
                raise
            except Exception as e:
                logger.error("Error during feed scraping: %s", e)
                raise ScrapeError("Failed to scrape feed", details=str(e)) from e

    async def _scrape(
        self, max_items: int, timeout_ms: int, scroll_interval_ms: int
    ) -> list[FeedItem]:
        logger.info("Starting feed scrape (max items: %d)", max_items)
        await self._open_feed(timeout_ms)

        collected: list[FeedItem] = []
        # 本次新见到的 ID，成功返回时才并入会话级集合
        run_ids: set[str] = set()
        start = time.monotonic()

        while len(collected) < max_items:
            elapsed_ms = (time.monotonic() - start) * 1000
            if elapsed_ms > timeout_ms:
                logger.warning("Scrape timeout reached after %dms", timeout_ms)
                break

            html = await self.page.get_full_html()
            parsed = self.parser.parse(html)

            new_count = 0
            for item in parsed:
                if len(collected) >= max_items:
                    break
                if item.id in self._seen_ids or item.id in run_ids:
                    continue
                run_ids.add(item.id)
                collected.append(item)
                new_count += 1

            logger.info(
                "Parsed %d items, %d new. Total: %d/%d",
                len(parsed),
                new_count,
                len(collected),
                max_items,
            )

            if len(collected) >= max_items:
                break

            if not await self._scroll_and_wait(scroll_interval_ms):
                logger.info("Reached end of feed or no more new content")
                break

            delay = self.jitter(
                self.settings.min_request_delay_ms / 1000,
                self.settings.max_request_delay_ms / 1000,
            )
            if delay > 0:
                await asyncio.sleep(delay)

        self._seen_ids.update(run_ids)
        logger.info("Scrape completed. Collected %d items.", len(collected))
        return collected[:max_items]

    async def _open_feed(self, timeout_ms: int) -> None:
        try:
            await self.page.navigate(self.feed_url, wait_until="networkidle", timeout_ms=timeout_ms)
        except NavigationTimeoutError as e:
            # networkidle 超时不算失败，以容器是否出现为准
            logger.warning("%s, continuing to wait for feed container", e)

        try:
            await self.page.wait_for_selector(S.FEED_CONTAINER, FEED_CONTAINER_TIMEOUT_MS)
        except Exception as e:
            logger.error("Feed container not found")
            raise FeedContainerNotFoundError(S.FEED_CONTAINER, FEED_CONTAINER_TIMEOUT_MS) from e
        logger.debug("Feed container loaded")

    async def _scroll_and_wait(self, interval_ms: int) -> bool:
        """滚动到底部并判断是否加载了新内容

        高度未增长时再等待一个间隔复查，仍未增长视为到底。
        任何异常都按"未增长"处理。
        """
        interval = interval_ms / 1000
        try:
            previous_height = await self.page.evaluate_scroll_height()
            await self.page.scroll_to_bottom()
            await asyncio.sleep(interval)

            new_height = await self.page.evaluate_scroll_height()
            if new_height > previous_height:
                logger.debug("Page height increased: %d -> %d", previous_height, new_height)
                return True

            await asyncio.sleep(interval)
            final_height = await self.page.evaluate_scroll_height()
            return final_height > previous_height
        except Exception as e:
            logger.warning("Error during scroll: %s", e)
            return False
