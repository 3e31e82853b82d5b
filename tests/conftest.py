"""pytest 全局配置和 fixtures

提供测试所需的基础设施、HTML 构造器和 Stub 页面。
"""

from __future__ import annotations

import json
import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# 添加项目路径
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from zhihu_feed.common.config import RetryConfig, ScraperConfig  # noqa: E402


# ============================================================================
# HTML 构造
# ============================================================================


def feed_item_html(
    item_id: str,
    title: str | None = None,
    *,
    item_class: str = "ContentItem AnswerItem",
    id_attr: str = "data-zop",
    excerpt: str = "摘要内容",
    author: str = "张三",
    author_href: str = "/people/zhang-san",
    votes: str = "赞同 1.2 万",
    comments: str = "856 条评论",
    href: str | None = None,
    datetime_attr: str = "2024-03-01T08:00:00+08:00",
    tags: tuple[str, ...] = (),
    inner: str = "",
) -> str:
    """构造一个知乎风格的 Feed 条目元素"""
    if id_attr == "data-zop":
        zop = json.dumps({"itemId": item_id, "type": "answer"})
        id_markup = f"data-zop='{zop}'"
    elif id_attr == "data-id":
        id_markup = f'data-id="{item_id}"'
    else:
        id_markup = ""

    title = title if title is not None else f"问题 {item_id}"
    href = href if href is not None else f"/question/{item_id}/answer/{item_id}"
    tag_markup = "".join(f'<span class="Tag-content">{t}</span>' for t in tags)
    time_markup = (
        f'<div class="ContentItem-time"><time datetime="{datetime_attr}">发布于 2024-03-01</time></div>'
        if datetime_attr
        else ""
    )

    return f"""
    <div class="{item_class}" {id_markup}>
      <h2 class="ContentItem-title"><a href="{href}">{title}</a></h2>
      <div class="AuthorInfo">
        <span class="AuthorInfo-name"><a href="{author_href}">{author}</a></span>
      </div>
      <div class="RichContent-inner">{excerpt}</div>
      {time_markup}
      <div class="Topics">{tag_markup}</div>
      <div class="ContentItem-actions">
        <button class="VoteButton--up">{votes}</button>
        <button>{comments}</button>
      </div>
      {inner}
    </div>
    """


def feed_page_html(*items: str) -> str:
    """把条目包进 Feed 容器"""
    return (
        "<html><head><title>首页 - 知乎</title></head><body>"
        '<div class="Topstory-mainColumn">' + "".join(items) + "</div>"
        "</body></html>"
    )


def snapshot(*ids: str) -> str:
    return feed_page_html(*(feed_item_html(i) for i in ids))


# ============================================================================
# Stub 页面
# ============================================================================


class StubFeedPage:
    """脚本化的 FeedPage

    第 N 次滚动之后 ``get_full_html`` 返回 ``snapshots[N]``（越界取最后一个）。
    页面高度在前 ``grow_scrolls`` 次滚动中每次增长 500；也可以用 ``heights``
    直接给出每次高度探测的返回值（用尽后重复最后一个）。
    """

    def __init__(
        self,
        snapshots: list[str],
        grow_scrolls: int | None = None,
        heights: list[int] | None = None,
        nav_error: Exception | None = None,
        container_error: Exception | None = None,
        scroll_error: Exception | None = None,
        html_error: Exception | None = None,
    ):
        self.snapshots = list(snapshots)
        self.grow_scrolls = len(snapshots) - 1 if grow_scrolls is None else grow_scrolls
        self.heights = list(heights) if heights else None
        self.nav_error = nav_error
        self.container_error = container_error
        self.scroll_error = scroll_error
        self.html_error = html_error

        self.navigations: list[tuple[str, str, int]] = []
        self.html_calls = 0
        self.height_calls = 0
        self.scrolls = 0

    async def navigate(self, url: str, wait_until: str = "networkidle", timeout_ms: int = 30000) -> None:
        self.navigations.append((url, wait_until, timeout_ms))
        if self.nav_error:
            raise self.nav_error

    async def wait_for_selector(self, selector: str, timeout_ms: int) -> None:
        if self.container_error:
            raise self.container_error

    async def get_full_html(self) -> str:
        self.html_calls += 1
        if self.html_error:
            raise self.html_error
        return self.snapshots[min(self.scrolls, len(self.snapshots) - 1)]

    async def evaluate_scroll_height(self) -> int:
        self.height_calls += 1
        if self.scroll_error:
            raise self.scroll_error
        if self.heights is not None:
            index = min(self.height_calls - 1, len(self.heights) - 1)
            return self.heights[index]
        return 1000 + 500 * min(self.scrolls, self.grow_scrolls)

    async def scroll_to_bottom(self) -> None:
        self.scrolls += 1


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def fast_settings():
    """毫秒级间隔、无请求延迟的抓取配置"""
    return ScraperConfig(
        max_feed_items=100,
        scrape_timeout_ms=5000,
        scroll_interval_ms=10,
        min_request_delay_ms=0,
        max_request_delay_ms=0,
        auto_scrape_min_items=10,
    )


@pytest.fixture
def fast_retry():
    return RetryConfig(max_retries=2, retry_delay_ms=1, max_retry_delay_ms=1)


@pytest.fixture
def mock_page():
    """模拟 Playwright Page 对象"""
    page = AsyncMock()
    page.url = "https://www.zhihu.com/"
    page.goto = AsyncMock()
    page.wait_for_selector = AsyncMock()
    page.content = AsyncMock(return_value=snapshot("1"))
    page.evaluate = AsyncMock(return_value=1000)
    page.set_default_timeout = MagicMock()
    return page


@pytest.fixture
def temp_output_dir(tmp_path):
    """创建临时输出目录"""
    output_dir = tmp_path / "output"
    output_dir.mkdir(parents=True, exist_ok=True)
    return output_dir
