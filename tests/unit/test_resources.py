"""资源转换单元测试"""

from zhihu_feed.api.resources import (
    FeedItemList,
    ScrapeJobSpec,
    author_label,
    feed_item_to_resource,
    feed_items_to_list,
    not_found_status,
)
from zhihu_feed.common.types import Author, FeedItem, FeedType, Stats


def make_item(item_id: str = "456") -> FeedItem:
    return FeedItem(
        id=item_id,
        type=FeedType.ARTICLE,
        title="标题",
        excerpt="摘要",
        author=Author(name="Li Lei_007", url="https://www.zhihu.com/people/lilei"),
        stats=Stats(vote_count=12000, comment_count=3),
        url="https://zhuanlan.zhihu.com/p/456",
        created_at="2024-03-01T08:00:00+08:00",
        tags=["科技"],
    )


class TestFeedItemResource:
    """FeedItem 资源转换"""

    def test_envelope(self):
        data = feed_item_to_resource(make_item()).model_dump(
            mode="json", by_alias=True, exclude_none=True
        )

        assert data["kind"] == "FeedItem"
        assert data["apiVersion"] == "zhihu.scraper.io/v1"
        assert data["metadata"]["name"] == "456"
        assert data["metadata"]["creationTimestamp"] == "2024-03-01T08:00:00+08:00"
        assert data["metadata"]["labels"] == {
            "zhihu.scraper.io/type": "article",
            "zhihu.scraper.io/author": "li-lei-007",
        }
        assert data["metadata"]["annotations"] == {
            "zhihu.scraper.io/url": "https://zhuanlan.zhihu.com/p/456"
        }
        assert data["spec"]["title"] == "标题"
        assert data["spec"]["tags"] == ["科技"]
        assert data["status"] == {
            "type": "article",
            "stats": {"voteCount": 12000, "commentCount": 3},
        }

    def test_author_label(self):
        assert author_label("Anonymous") == "anonymous"
        assert author_label("张三") == "--"
        assert author_label("a.b c") == "a-b-c"


class TestFeedItemList:
    """列表资源与剩余数量"""

    def test_remaining_count(self):
        result = feed_items_to_list([make_item("1"), make_item("2")], total=10, offset=3)
        assert isinstance(result, FeedItemList)
        assert result.metadata.remaining_item_count == 5
        assert [r.metadata.name for r in result.items] == ["1", "2"]

    def test_remaining_never_negative(self):
        result = feed_items_to_list([make_item()], total=1, offset=5)
        assert result.metadata.remaining_item_count == 0

    def test_continue_alias(self):
        data = feed_items_to_list([], total=0, offset=0).model_dump(by_alias=True)
        assert "continue" in data["metadata"]
        assert data["kind"] == "FeedItemList"


class TestStatusResource:
    def test_not_found(self):
        data = not_found_status("FeedItem", "999").model_dump(by_alias=True)

        assert data["kind"] == "Status"
        assert data["apiVersion"] == "v1"
        condition = data["status"]["conditions"][0]
        assert condition["type"] == "NotFound"
        assert condition["reason"] == "ResourceNotFound"
        assert condition["message"] == 'FeedItem "999" not found'


class TestScrapeJobSpec:
    def test_camel_case_input(self):
        spec = ScrapeJobSpec.model_validate({"maxItems": 5, "clearCache": True})
        assert spec.max_items == 5
        assert spec.clear_cache is True
        assert spec.timeout is None
