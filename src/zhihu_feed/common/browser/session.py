"""浏览器会话管理"""

from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncGenerator

from playwright.async_api import Browser, BrowserContext, Page, Playwright, async_playwright
from playwright.async_api import Error as PlaywrightError
from playwright.async_api import TimeoutError as PlaywrightTimeoutError
from playwright_stealth import Stealth

from ..config import RetryConfig, config
from ..exceptions import (
    BrowserError,
    ElementNotFoundError,
    NavigationTimeoutError,
    PageLoadError,
    ScrollProbeError,
)
from ..logger import get_logger
from ..utils.retry import retry_with_backoff

logger = get_logger(__name__)

DEFAULT_LAUNCH_ARGS = [
    "--no-sandbox",
    "--disable-setuid-sandbox",
    "--disable-dev-shm-usage",
    "--disable-blink-features=AutomationControlled",
]

_SCROLL_HEIGHT_JS = "document.body.scrollHeight"
_SCROLL_TO_BOTTOM_JS = "window.scrollTo(0, document.body.scrollHeight)"


class PlaywrightFeedPage:
    """把 Playwright Page 适配为采集器使用的页面接口

    导航超时抛出 NavigationTimeoutError，其他导航错误抛出 PageLoadError
    （按重试配置退避重试）。
    """

    def __init__(self, page: Page, retry_config: RetryConfig | None = None):
        self._page = page
        self._retry = retry_config or config.retry

    async def navigate(self, url: str, wait_until: str = "networkidle", timeout_ms: int = 30000) -> None:
        async def _goto() -> None:
            try:
                await self._page.goto(url, wait_until=wait_until, timeout=timeout_ms)
            except PlaywrightTimeoutError as e:
                raise NavigationTimeoutError(url, timeout_ms) from e
            except PlaywrightError as e:
                raise PageLoadError(url, details=str(e)) from e

        await retry_with_backoff(
            _goto,
            max_retries=self._retry.max_retries,
            initial_delay=self._retry.retry_delay_ms / 1000,
            max_delay=self._retry.max_retry_delay_ms / 1000,
            retry_on=(PageLoadError,),
        )

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        try:
            await self._page.wait_for_selector(selector, state="visible", timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise ElementNotFoundError(selector) from e

    async def get_full_html(self) -> str:
        return await self._page.content()

    async def evaluate_scroll_height(self) -> int:
        try:
            return int(await self._page.evaluate(_SCROLL_HEIGHT_JS))
        except PlaywrightError as e:
            raise ScrollProbeError(f"读取页面高度失败: {e}") from e

    async def scroll_to_bottom(self) -> None:
        try:
            await self._page.evaluate(_SCROLL_TO_BOTTOM_JS)
        except PlaywrightError as e:
            raise ScrollProbeError(f"滚动失败: {e}") from e


class BrowserSession:
    """浏览器会话管理器

    启动带 stealth 的 Chromium，存在登录态文件时自动加载。
    """

    def __init__(
        self,
        headless: bool | None = None,
        viewport_width: int | None = None,
        viewport_height: int | None = None,
        auth_file: str | None = None,
    ):
        self.headless = headless if headless is not None else config.browser.headless
        self.viewport_width = viewport_width or config.browser.viewport_width
        self.viewport_height = viewport_height or config.browser.viewport_height
        self.auth_file = auth_file if auth_file is not None else config.browser.auth_file

        self._stealth_context: Any = None
        self._playwright: Playwright | None = None
        self._browser: Browser | None = None
        self._context: BrowserContext | None = None
        self._page: Page | None = None

    @property
    def page(self) -> Page | None:
        return self._page

    @property
    def is_started(self) -> bool:
        return self._page is not None

    def context_options(self) -> dict[str, Any]:
        """构建 new_context 参数"""
        options: dict[str, Any] = {
            "viewport": {"width": self.viewport_width, "height": self.viewport_height},
            "user_agent": config.browser.user_agent,
            "locale": config.browser.locale,
            "timezone_id": config.browser.timezone_id,
        }
        if self.auth_file and Path(self.auth_file).exists():
            logger.debug("Loading storage state: %s", self.auth_file)
            options["storage_state"] = self.auth_file
        else:
            logger.warning("No storage state at %s, the feed may require login", self.auth_file)
        return options

    async def start(self) -> Page:
        """启动浏览器并返回 Page"""
        logger.info("Initializing browser (headless=%s)...", self.headless)
        try:
            self._stealth_context = Stealth().use_async(async_playwright())
            self._playwright = await self._stealth_context.__aenter__()
            self._browser = await self._playwright.chromium.launch(
                headless=self.headless,
                args=DEFAULT_LAUNCH_ARGS,
            )
            self._context = await self._browser.new_context(**self.context_options())
            self._page = await self._context.new_page()
            self._page.set_default_timeout(config.browser.timeout_ms)
        except Exception as e:
            logger.error("Failed to initialize browser: %s", e)
            await self.stop()
            raise BrowserError("Failed to initialize browser", details=str(e)) from e

        logger.info("Browser initialized successfully")
        return self._page

    def feed_page(self) -> PlaywrightFeedPage:
        """返回采集器使用的页面适配器"""
        if not self._page:
            raise BrowserError("Browser not initialized. Call start() first.")
        return PlaywrightFeedPage(self._page)

    async def stop(self) -> None:
        """关闭浏览器会话"""
        for name in ("_page", "_context", "_browser"):
            resource = getattr(self, name)
            if resource is None:
                continue
            try:
                await resource.close()
            except Exception as e:
                logger.debug("Error closing %s: %s", name.lstrip("_"), e)
            setattr(self, name, None)

        if self._stealth_context is not None:
            try:
                await self._stealth_context.__aexit__(None, None, None)
            except Exception as e:
                logger.debug("Error stopping playwright: %s", e)
        self._stealth_context = None
        self._playwright = None


@asynccontextmanager
async def create_browser_session(
    headless: bool | None = None,
    viewport_width: int | None = None,
    viewport_height: int | None = None,
    auth_file: str | None = None,
) -> AsyncGenerator[BrowserSession, None]:
    """创建浏览器会话的上下文管理器"""
    session = BrowserSession(
        headless=headless,
        viewport_width=viewport_width,
        viewport_height=viewport_height,
        auth_file=auth_file,
    )
    try:
        await session.start()
        yield session
    finally:
        await session.stop()
