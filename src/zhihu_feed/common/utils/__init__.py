"""通用工具函数"""

from .counts import extract_comment_count, parse_count
from .delay import get_random_delay, no_jitter, random_jitter
from .retry import retry_with_backoff

__all__ = [
    "extract_comment_count",
    "parse_count",
    "get_random_delay",
    "no_jitter",
    "random_jitter",
    "retry_with_backoff",
]
