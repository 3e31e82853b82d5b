"""浏览器会话与页面适配"""

from .session import BrowserSession, PlaywrightFeedPage, create_browser_session

__all__ = ["BrowserSession", "PlaywrightFeedPage", "create_browser_session"]
