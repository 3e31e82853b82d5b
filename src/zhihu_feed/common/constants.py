"""常量定义"""

from __future__ import annotations

ZHIHU_ORIGIN = "https://www.zhihu.com"
ZHIHU_FEED_URL = f"{ZHIHU_ORIGIN}/"

# Feed 容器等待时间（毫秒）
FEED_CONTAINER_TIMEOUT_MS = 10_000

# 摘要截断长度与省略标记
EXCERPT_MAX_LENGTH = 200
EXCERPT_ELLIPSIS = "..."

# 字段缺失时的占位值
DEFAULT_TITLE = "Untitled"
DEFAULT_AUTHOR_NAME = "Anonymous"

# K8s 风格资源
API_GROUP = "zhihu.scraper.io"
API_VERSION = f"{API_GROUP}/v1"

SERVICE_NAME = "Zhihu Feed Scraper API"
