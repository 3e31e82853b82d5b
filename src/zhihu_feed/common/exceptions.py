"""自定义异常类

定义项目中使用的所有自定义异常，用于更精细的错误处理。
每个异常携带 ``code`` 与 ``status_code``，API 层据此生成错误响应。
"""

from __future__ import annotations

from typing import Any


class ZhihuFeedError(Exception):
    """基础异常类

    所有自定义异常的基类。
    """

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str, details: Any = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(ZhihuFeedError):
    """请求参数验证失败"""

    code = "INVALID_REQUEST"
    status_code = 400


class BrowserError(ZhihuFeedError):
    """浏览器相关错误的基类"""

    code = "BROWSER_ERROR"


class PageLoadError(BrowserError):
    """页面加载失败

    导航出错（非超时）时抛出。
    """

    def __init__(self, url: str, message: str = "页面加载失败", details: Any = None):
        super().__init__(f"{message}: {url}", details)
        self.url = url


class NavigationTimeoutError(BrowserError):
    """导航超时

    与 PageLoadError 区分，调用方可以选择容忍超时。
    """

    code = "TIMEOUT"
    status_code = 504

    def __init__(self, url: str, timeout_ms: int):
        super().__init__(f"页面加载超时 ({timeout_ms}ms): {url}")
        self.url = url
        self.timeout_ms = timeout_ms


class ElementNotFoundError(BrowserError):
    """元素未找到错误

    当等待的元素在超时时间内没有出现时抛出。
    """

    def __init__(self, selector: str, message: str = "元素未找到"):
        super().__init__(f"{message}: {selector}")
        self.selector = selector


class ScrollProbeError(BrowserError):
    """滚动或页面高度探测失败"""


class ScrapeError(ZhihuFeedError):
    """Feed 抓取失败

    一次抓取要么返回结果，要么只抛出一个 ScrapeError；
    底层原因通过 ``raise ... from`` 挂在 ``__cause__`` 上。
    """

    code = "SCRAPE_ERROR"


class FeedContainerNotFoundError(ScrapeError):
    """Feed 容器未出现"""

    def __init__(self, selector: str, timeout_ms: int):
        super().__init__(f"Feed 容器未在 {timeout_ms}ms 内出现: {selector}")
        self.selector = selector
        self.timeout_ms = timeout_ms


class ParseSkip(ZhihuFeedError):
    """单个 Feed 元素无法解析，跳过

    只在解析器内部使用，不会向外传播。
    """

    def __init__(self, reason: str, index: int | None = None):
        super().__init__(reason)
        self.reason = reason
        self.index = index
