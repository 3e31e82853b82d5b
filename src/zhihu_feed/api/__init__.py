"""REST API"""

from .app import browser_lifespan, create_app

__all__ = ["browser_lifespan", "create_app"]
