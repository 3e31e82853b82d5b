"""Feed 抓取：解析器与滚动采集器"""

from .collector import FeedCollector
from .page import FeedPage
from .parser import FeedParser, RawFeedItem, feed_parser, parse_feed_html

__all__ = [
    "FeedCollector",
    "FeedPage",
    "FeedParser",
    "RawFeedItem",
    "feed_parser",
    "parse_feed_html",
]
