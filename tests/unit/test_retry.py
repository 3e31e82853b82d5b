"""重试与延迟工具单元测试"""

from unittest.mock import AsyncMock, patch

import pytest

from zhihu_feed.common.utils.delay import get_random_delay, no_jitter, random_jitter
from zhihu_feed.common.utils.retry import retry_with_backoff


class TestRetryWithBackoff:
    """retry_with_backoff 测试"""

    @pytest.mark.asyncio
    async def test_success_without_retry(self):
        fn = AsyncMock(return_value="ok")
        assert await retry_with_backoff(fn, initial_delay=0) == "ok"
        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_succeeds_after_failures(self):
        fn = AsyncMock(side_effect=[ValueError("1"), ValueError("2"), "ok"])
        attempts = []

        result = await retry_with_backoff(
            fn,
            max_retries=3,
            initial_delay=0,
            on_retry=lambda error, attempt: attempts.append(attempt),
        )

        assert result == "ok"
        assert attempts == [1, 2]

    @pytest.mark.asyncio
    async def test_raises_after_max_retries(self):
        fn = AsyncMock(side_effect=ValueError("always"))

        with pytest.raises(ValueError, match="always"):
            await retry_with_backoff(fn, max_retries=2, initial_delay=0)

        assert fn.await_count == 3

    @pytest.mark.asyncio
    async def test_other_exceptions_not_retried(self):
        fn = AsyncMock(side_effect=KeyError("k"))

        with pytest.raises(KeyError):
            await retry_with_backoff(fn, retry_on=(ValueError,), initial_delay=0)

        assert fn.await_count == 1

    @pytest.mark.asyncio
    async def test_exponential_delays_capped(self):
        fn = AsyncMock(side_effect=ValueError("x"))
        sleep = AsyncMock()

        with patch("zhihu_feed.common.utils.retry.asyncio.sleep", sleep):
            with pytest.raises(ValueError):
                await retry_with_backoff(
                    fn, max_retries=4, initial_delay=1.0, max_delay=3.0, factor=2.0
                )

        delays = [c.args[0] for c in sleep.await_args_list]
        assert delays == [1.0, 2.0, 3.0, 3.0]


class TestDelay:
    """随机延迟测试"""

    def test_random_delay_range(self):
        for _ in range(50):
            delay = get_random_delay(0.5, 0.2)
            assert 0.5 <= delay <= 0.7

    def test_random_jitter_range(self):
        for _ in range(50):
            assert 1.0 <= random_jitter(1.0, 3.0) <= 3.0

    def test_random_jitter_degenerate_range(self):
        assert random_jitter(2.0, 1.0) == 2.0
        assert random_jitter(-1.0, -1.0) == 0.0

    def test_no_jitter(self):
        assert no_jitter(1.0, 3.0) == 0.0
