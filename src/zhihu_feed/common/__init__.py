"""Common模块 - 公共工具和基础设施

该模块提供：
- 全局配置管理
- 类型定义
- 日志系统
- 异常类
- 常量定义
"""

from .config import Config, config
from .constants import API_VERSION, ZHIHU_FEED_URL, ZHIHU_ORIGIN
from .exceptions import (
    BrowserError,
    ElementNotFoundError,
    FeedContainerNotFoundError,
    NavigationTimeoutError,
    PageLoadError,
    ParseSkip,
    ScrapeError,
    ScrollProbeError,
    ValidationError,
    ZhihuFeedError,
)
from .logger import console, get_logger
from .types import Author, FeedItem, FeedType, QueryOptions, Stats

__all__ = [
    # 配置
    "config",
    "Config",
    # 日志
    "get_logger",
    "console",
    # 异常
    "ZhihuFeedError",
    "BrowserError",
    "PageLoadError",
    "NavigationTimeoutError",
    "ElementNotFoundError",
    "ScrollProbeError",
    "ScrapeError",
    "FeedContainerNotFoundError",
    "ParseSkip",
    "ValidationError",
    # 常量
    "ZHIHU_ORIGIN",
    "ZHIHU_FEED_URL",
    "API_VERSION",
    # 类型
    "Author",
    "FeedItem",
    "FeedType",
    "QueryOptions",
    "Stats",
]
