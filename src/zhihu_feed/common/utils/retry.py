"""指数退避重试"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from ..logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


async def retry_with_backoff(
    fn: Callable[[], Awaitable[T]],
    max_retries: int = 3,
    initial_delay: float = 1.0,
    max_delay: float = 10.0,
    factor: float = 2.0,
    retry_on: tuple[type[BaseException], ...] = (Exception,),
    on_retry: Callable[[BaseException, int], None] | None = None,
) -> T:
    """执行协程函数，失败时按指数退避重试

    Args:
        fn: 无参协程函数
        max_retries: 最大重试次数（不含首次调用）
        initial_delay: 首次重试前的等待（秒）
        max_delay: 单次等待上限（秒）
        factor: 退避因子
        retry_on: 需要重试的异常类型，其他异常直接抛出
        on_retry: 每次重试前的回调 ``(error, attempt)``

    Returns:
        fn 的返回值

    Raises:
        最后一次尝试的异常
    """
    attempt = 0
    while True:
        try:
            return await fn()
        except retry_on as e:
            if attempt >= max_retries:
                raise

            delay = min(initial_delay * (factor ** attempt), max_delay)
            attempt += 1
            logger.warning(
                "Retry attempt %d/%d after %.2fs. Error: %s", attempt, max_retries, delay, e
            )
            if on_retry:
                on_retry(e, attempt)
            await asyncio.sleep(delay)
