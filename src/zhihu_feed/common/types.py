"""核心数据类型定义"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """对外序列化使用 camelCase 字段名"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ============================================================================
# Feed 条目
# ============================================================================


class FeedType(str, Enum):
    """内容类型枚举"""

    ANSWER = "answer"
    ARTICLE = "article"
    ZVIDEO = "zvideo"
    PIN = "pin"


class Author(CamelModel):
    """作者信息"""

    name: str
    url: str = ""
    avatar: str = ""


class Stats(CamelModel):
    """互动数据"""

    vote_count: int = Field(default=0, ge=0, description="赞同数")
    comment_count: int = Field(default=0, ge=0, description="评论数")


class FeedItem(CamelModel):
    """归一化后的 Feed 条目"""

    id: str = Field(..., min_length=1, description="稳定标识，单次会话内唯一")
    type: FeedType = Field(default=FeedType.ANSWER)
    title: str
    excerpt: str = ""
    author: Author
    stats: Stats = Field(default_factory=Stats)
    url: str = ""
    created_at: str = Field(..., description="ISO-8601 风格时间字符串")
    tags: list[str] = Field(default_factory=list)


# ============================================================================
# 查询参数
# ============================================================================


class QueryOptions(BaseModel):
    """存储查询参数"""

    limit: int | None = Field(default=None, ge=0)
    offset: int = Field(default=0, ge=0)
    type: FeedType | None = None
