"""内存存储单元测试"""

import pytest
import pytest_asyncio

from zhihu_feed.common.types import Author, FeedItem, FeedType, QueryOptions
from zhihu_feed.storage import InMemoryFeedStore


def make_item(item_id: str, feed_type: FeedType = FeedType.ANSWER, title: str = "标题") -> FeedItem:
    return FeedItem(
        id=item_id,
        type=feed_type,
        title=title,
        author=Author(name="作者"),
        created_at="2024-01-01T00:00:00Z",
    )


@pytest_asyncio.fixture
async def store():
    store = InMemoryFeedStore()
    await store.save(
        [
            make_item("1"),
            make_item("2", FeedType.ARTICLE),
            make_item("3"),
            make_item("4", FeedType.PIN),
            make_item("5"),
        ]
    )
    return store


class TestInMemoryFeedStore:
    """InMemoryFeedStore 测试"""

    @pytest.mark.asyncio
    async def test_query_all_in_insertion_order(self, store):
        items = await store.query()
        assert [i.id for i in items] == ["1", "2", "3", "4", "5"]

    @pytest.mark.asyncio
    async def test_pagination(self, store):
        items = await store.query(QueryOptions(limit=2, offset=1))
        assert [i.id for i in items] == ["2", "3"]

    @pytest.mark.asyncio
    async def test_offset_past_end(self, store):
        assert await store.query(QueryOptions(limit=10, offset=10)) == []

    @pytest.mark.asyncio
    async def test_type_filter(self, store):
        items = await store.query(QueryOptions(type=FeedType.ANSWER, offset=1))
        assert [i.id for i in items] == ["3", "5"]

    @pytest.mark.asyncio
    async def test_count(self, store):
        assert await store.count() == 5
        assert await store.count(FeedType.ANSWER) == 3
        assert await store.count(FeedType.ZVIDEO) == 0

    @pytest.mark.asyncio
    async def test_save_overwrites_same_id(self, store):
        await store.save([make_item("2", FeedType.ARTICLE, title="新标题")])

        assert await store.count() == 5
        assert (await store.get_by_id("2")).title == "新标题"
        assert [i.id for i in await store.query()] == ["1", "2", "3", "4", "5"]

    @pytest.mark.asyncio
    async def test_get_by_id_missing(self, store):
        assert await store.get_by_id("missing") is None

    @pytest.mark.asyncio
    async def test_clear(self, store):
        await store.clear()
        assert await store.count() == 0
        assert await store.query() == []
