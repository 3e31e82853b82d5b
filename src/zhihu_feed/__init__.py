"""zhihu-feed - 知乎首页 Feed 抓取与 K8s 风格 API"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

__version__ = "0.1.0"

if TYPE_CHECKING:
    from .scraper.collector import FeedCollector as FeedCollector
    from .scraper.parser import FeedParser as FeedParser
    from .scraper.parser import parse_feed_html as parse_feed_html

__all__ = [
    "__version__",
    "FeedCollector",
    "FeedParser",
    "parse_feed_html",
]


def __getattr__(name: str) -> Any:
    """Lazy exports to avoid importing heavy runtime dependencies at package import time."""
    if name == "FeedCollector":
        from .scraper.collector import FeedCollector

        return FeedCollector
    if name in {"FeedParser", "parse_feed_html"}:
        from .scraper.parser import FeedParser, parse_feed_html

        return FeedParser if name == "FeedParser" else parse_feed_html
    raise AttributeError(f"module 'zhihu_feed' has no attribute '{name}'")
