"""本地化计数文本解析

知乎的计数文本形如 ``赞同 1.2 万``、``3k``、``856 条评论``。
"""

from __future__ import annotations

import re
from decimal import ROUND_FLOOR, Decimal, localcontext
from typing import Iterable

_COUNT_RE = re.compile(r"(\d+\.?\d*)\s*([万千kKwW]?)")

_UNIT_MULTIPLIERS = {
    "万": 10_000,
    "w": 10_000,
    "W": 10_000,
    "千": 1_000,
    "k": 1_000,
    "K": 1_000,
}

COMMENT_MARKERS = ("评论", "comment")


def parse_count(text: str | None) -> int:
    """将计数文本解析为整数

    取第一个 ``数字 + 可选单位`` 的匹配；无匹配返回 0。
    使用 Decimal 计算，保证 ``1.15万`` 这类值向下取整时精确。

    Examples:
        >>> parse_count("1.2万")
        12000
        >>> parse_count("3k")
        3000
        >>> parse_count("abc")
        0
    """
    if not text:
        return 0

    match = _COUNT_RE.search(text.replace(",", ""))
    if not match:
        return 0

    digits = match.group(1)
    multiplier = _UNIT_MULTIPLIERS.get(match.group(2), 1)
    with localcontext() as ctx:
        # 精度足够容纳全部有效数字，乘法不会先舍入
        ctx.prec = max(ctx.prec, len(digits) + 8)
        value = Decimal(digits) * multiplier
        return int(value.to_integral_value(rounding=ROUND_FLOOR))


def extract_comment_count(button_texts: Iterable[str]) -> int:
    """从操作按钮文本中找出评论数

    第一个包含评论标记的文本会被解析，没有则返回 0。
    """
    for text in button_texts:
        lowered = text.lower()
        if any(marker in lowered for marker in COMMENT_MARKERS):
            return parse_count(text)
    return 0
