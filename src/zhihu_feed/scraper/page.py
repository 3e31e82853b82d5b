"""采集器依赖的页面能力接口"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class FeedPage(Protocol):
    """采集器驱动的页面

    实现方在超时与其他导航错误时应抛出可区分的异常：
    ``NavigationTimeoutError`` / ``PageLoadError``。
    """

    async def navigate(self, url: str, wait_until: str = "networkidle", timeout_ms: int = 30000) -> None:
        """导航到 url 并等待加载条件"""
        ...

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        """等待元素可见，超时抛出 ElementNotFoundError"""
        ...

    async def get_full_html(self) -> str:
        """返回当前渲染后的完整 HTML"""
        ...

    async def evaluate_scroll_height(self) -> int:
        """返回当前文档高度"""
        ...

    async def scroll_to_bottom(self) -> None:
        """滚动到页面底部"""
        ...
