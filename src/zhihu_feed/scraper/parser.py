"""Feed 解析器

输入一份完整的页面 HTML，输出归一化后的 FeedItem 列表。
解析过程分两步：先从 DOM 元素中抽取原始字段（RawFeedItem），
再把原始字段解释为领域值（FeedItem）。
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from functools import lru_cache
from urllib.parse import urljoin, urlparse

from lxml import html as lxml_html
from lxml.cssselect import CSSSelector
from lxml.etree import ParserError, _Element

from ..common.constants import (
    DEFAULT_AUTHOR_NAME,
    DEFAULT_TITLE,
    EXCERPT_ELLIPSIS,
    EXCERPT_MAX_LENGTH,
    ZHIHU_ORIGIN,
)
from ..common.exceptions import ParseSkip
from ..common.logger import get_logger
from ..common.types import Author, FeedItem, FeedType, Stats
from ..common.utils.counts import extract_comment_count, parse_count
from . import selectors as S

logger = get_logger(__name__)

_URL_ID_RE = re.compile(r"/(\d+)")
_UTF8_PARSER = lxml_html.HTMLParser(encoding="utf-8")


@dataclass
class RawFeedItem:
    """从单个 DOM 元素中直接抽取的原始字段"""

    zop_id: str = ""
    data_id: str = ""
    class_list: str = ""
    title: str = ""
    excerpt: str = ""
    author_name: str = ""
    author_link: str = ""
    author_avatar: str = ""
    vote_text: str = ""
    content_url: str = ""
    time_attr: str = ""
    time_text: str = ""
    tags: list[str] = field(default_factory=list)
    comment_buttons: list[str] = field(default_factory=list)


# ============================================================================
# DOM 工具
# ============================================================================


@lru_cache(maxsize=None)
def _compile(selector: str) -> CSSSelector:
    return CSSSelector(selector, translator="html")


def _select(element: _Element, selector: str) -> list[_Element]:
    """在 element 的后代中查找（不含自身）"""
    return [el for el in _compile(selector)(element) if el is not element]


def _text(element: _Element) -> str:
    return (element.text_content() or "").strip()


def _first_text(element: _Element, selectors: tuple[str, ...]) -> str:
    for selector in selectors:
        for match in _select(element, selector):
            value = _text(match)
            if value:
                return value
    return ""


def _first_attr(element: _Element, selectors: tuple[str, ...], attr: str) -> str:
    for selector in selectors:
        for match in _select(element, selector):
            value = (match.get(attr) or "").strip()
            if value:
                return value
    return ""


def _load_tree(html: str) -> _Element | None:
    if not html or not html.strip():
        return None
    # 带 XML 编码声明的 str 会被 lxml 拒绝，统一按 UTF-8 字节解析
    data = html.encode("utf-8")
    try:
        return lxml_html.fromstring(data, parser=_UTF8_PARSER)
    except (ParserError, ValueError):
        try:
            return lxml_html.fragment_fromstring(data, create_parent="div", parser=_UTF8_PARSER)
        except (ParserError, ValueError):
            return None


def select_top_level_items(root: _Element) -> list[_Element]:
    """选出所有顶层条目元素（文档顺序）

    一个候选元素若有祖先也在候选集合中，则视为嵌套条目被排除。
    """
    candidates = _compile(S.FEED_ITEM)(root)
    candidate_set = set(candidates)
    top_level = [
        el
        for el in candidates
        if not any(ancestor in candidate_set for ancestor in el.iterancestors())
    ]
    logger.debug(
        "Found %d elements, %d top-level items after filtering nested ones",
        len(candidates),
        len(top_level),
    )
    return top_level


# ============================================================================
# 字段归一化
# ============================================================================


def absolutize_url(href: str) -> str:
    """相对链接补全为知乎站点的绝对链接，已有协议的链接保持不变"""
    href = (href or "").strip()
    if not href:
        return ""
    if urlparse(href).scheme:
        return href
    return urljoin(f"{ZHIHU_ORIGIN}/", href)


def truncate_excerpt(text: str, max_length: int = EXCERPT_MAX_LENGTH) -> str:
    text = (text or "").strip()
    if len(text) > max_length:
        return text[:max_length] + EXCERPT_ELLIPSIS
    return text


def infer_type(class_list: str) -> FeedType:
    """根据 class 列表推断内容类型，默认 answer"""
    if not class_list:
        return FeedType.ANSWER
    for markers, type_name in S.TYPE_MARKERS:
        if any(marker in class_list for marker in markers):
            return FeedType(type_name)
    return FeedType.ANSWER


def _zop_item_id(zop: str) -> str:
    # data-zop 通常是 JSON：{"itemId": 123, "type": "answer", ...}
    try:
        data = json.loads(zop)
    except ValueError:
        return zop
    if isinstance(data, dict) and data.get("itemId") not in (None, ""):
        return str(data["itemId"])
    return zop


def resolve_id(raw: RawFeedItem) -> str | None:
    """按优先级解析条目 ID：data-zop > data-id > 内容链接中的数字"""
    if raw.zop_id:
        return _zop_item_id(raw.zop_id)
    if raw.data_id:
        return raw.data_id
    if raw.content_url:
        match = _URL_ID_RE.search(raw.content_url)
        if match:
            return match.group(1)
    return None


# ============================================================================
# 解析器
# ============================================================================


class FeedParser:
    """无状态的 Feed 解析器"""

    def parse(self, html: str) -> list[FeedItem]:
        """解析 HTML 快照

        Args:
            html: 完整页面 HTML

        Returns:
            按首次出现顺序排列、ID 去重后的 FeedItem 列表
        """
        root = _load_tree(html)
        if root is None:
            logger.debug("Empty or unparsable HTML, no items")
            return []

        elements = select_top_level_items(root)
        total = len(elements)
        results: list[FeedItem] = []
        seen_ids: set[str] = set()

        for i, element in enumerate(elements):
            position = f"[{i + 1}/{total}]"
            try:
                raw = self.extract_raw(element)
                item = self.build_item(raw, i)
            except ParseSkip as skip:
                logger.debug("✗ %s skipped (%s)", position, skip.reason)
                continue
            except Exception as e:
                logger.warning("✗ %s parse failed: %s", position, e)
                continue

            if item.id in seen_ids:
                logger.debug("✗ %s duplicate ID: %s", position, item.id)
                continue

            seen_ids.add(item.id)
            results.append(item)
            logger.debug(
                "✓ %s %s (id=%s, type=%s, author=%s)",
                position,
                item.title[:60],
                item.id,
                item.type.value,
                item.author.name,
            )

        logger.info("Parsed %d unique items from %d elements", len(results), total)
        return results

    def extract_raw(self, element: _Element) -> RawFeedItem:
        """从 DOM 元素中抽取原始字段"""
        return RawFeedItem(
            zop_id=(element.get(S.ATTR_ZOP) or "").strip(),
            data_id=(element.get(S.ATTR_DATA_ID) or "").strip(),
            class_list=element.get("class") or "",
            title=_first_text(element, S.TITLE),
            excerpt=_first_text(element, S.EXCERPT),
            author_name=_first_text(element, S.AUTHOR_NAME),
            author_link=_first_attr(element, S.AUTHOR_LINK, "href"),
            author_avatar=_first_attr(element, S.AUTHOR_AVATAR, "src"),
            vote_text=_first_text(element, S.VOTE_COUNT),
            content_url=_first_attr(element, S.CONTENT_URL, "href"),
            time_attr=_first_attr(element, S.TIME_ATTR, "datetime"),
            time_text=_first_text(element, S.TIME_TEXT),
            tags=[t for t in (_text(el) for el in _select(element, S.TAGS)) if t],
            comment_buttons=[_text(el) for el in _select(element, S.COMMENT_BUTTONS)],
        )

    def build_item(self, raw: RawFeedItem, index: int = 0) -> FeedItem:
        """将原始字段解释为 FeedItem

        Raises:
            ParseSkip: 无法解析出 ID
        """
        item_id = resolve_id(raw)
        if not item_id:
            raise ParseSkip(
                f"no ID (zop={raw.zop_id!r}, data-id={raw.data_id!r}, url={raw.content_url!r})",
                index,
            )

        created_at = (
            raw.time_attr or raw.time_text or datetime.now(timezone.utc).isoformat()
        )

        return FeedItem(
            id=item_id,
            type=infer_type(raw.class_list),
            title=raw.title or DEFAULT_TITLE,
            excerpt=truncate_excerpt(raw.excerpt),
            author=Author(
                name=raw.author_name or DEFAULT_AUTHOR_NAME,
                url=absolutize_url(raw.author_link),
                avatar=raw.author_avatar,
            ),
            stats=Stats(
                vote_count=parse_count(raw.vote_text),
                comment_count=extract_comment_count(raw.comment_buttons),
            ),
            url=absolutize_url(raw.content_url),
            created_at=created_at,
            tags=raw.tags,
        )


feed_parser = FeedParser()


def parse_feed_html(html: str) -> list[FeedItem]:
    """使用默认解析器解析 HTML"""
    return feed_parser.parse(html)
