"""知乎 Feed 页面的 CSS 选择器

知乎同时存在多套页面皮肤，单个字段按顺序尝试多个选择器，
第一个取到非空值的选择器生效。
"""

from __future__ import annotations

FEED_CONTAINER = ".Topstory-mainColumn, .TopstoryMain"

# 条目选择器集合（用于嵌套排除，二者任一命中即视为条目）
FEED_ITEM = ".ContentItem, .TopstoryItem"

# ===== 单值字段：(selector, ...) 按优先级排列 =====
TITLE = (".ContentItem-title", "h2")
EXCERPT = (".RichContent-inner", ".ContentItem-more", ".RichText")
AUTHOR_NAME = (".AuthorInfo-name", ".UserLink-link")
AUTHOR_LINK = (".AuthorInfo-name a", ".UserLink-link", ".UserLink")
AUTHOR_AVATAR = (".AuthorInfo-avatar img", ".Avatar")
VOTE_COUNT = (".VoteButton--up",)
CONTENT_URL = (".ContentItem-title a", ".TitleLink")
TIME_ATTR = (".ContentItem-time time", ".ContentItem-time", "time")
TIME_TEXT = (".ContentItem-time", "time")

# ===== 多值字段：全部命中元素按文档顺序 =====
TAGS = ".Tag-content, .TopicTag"
COMMENT_BUTTONS = '[aria-label*="评论"], .ContentItem-actions button'

# ===== 条目属性 =====
ATTR_ZOP = "data-zop"
ATTR_DATA_ID = "data-id"

# class 子串 -> 类型，按优先级检查
TYPE_MARKERS = (
    (("Article",), "article"),
    (("Video", "Zvideo"), "zvideo"),
    (("Pin",), "pin"),
)
