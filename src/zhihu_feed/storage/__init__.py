"""Feed 存储"""

from .feed_store import FeedStore, InMemoryFeedStore

__all__ = ["FeedStore", "InMemoryFeedStore"]
