"""统一日志系统

所有模块日志器都挂在 ``zhihu_feed`` 包日志器之下。Rich 处理器只在包日志器上
配置一次，模块日志器通过传播输出；文件日志同样挂在包日志器上，覆盖整条抓取链路。
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "zhihu_feed"

# 全局控制台实例
console = Console()

# 日志级别映射
LOG_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(lineno)d | %(message)s"


def get_log_level() -> int:
    """从环境变量 ``LOG_LEVEL`` 获取控制台日志级别"""
    level_str = os.getenv("LOG_LEVEL", "INFO").upper()
    return LOG_LEVEL_MAP.get(level_str, logging.INFO)


def _to_level(level: int | str) -> int:
    if isinstance(level, str):
        return LOG_LEVEL_MAP.get(level.upper(), logging.INFO)
    return level


def _rich_handler(logger: logging.Logger) -> RichHandler | None:
    for handler in logger.handlers:
        if isinstance(handler, RichHandler):
            return handler
    return None


def _sync_level(root: logging.Logger) -> None:
    # 包日志器取所有处理器中最低的级别，各处理器自行过滤
    levels = [h.level for h in root.handlers if h.level != logging.NOTSET]
    root.setLevel(min(levels) if levels else logging.INFO)


def _package_logger() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if _rich_handler(root) is not None:
        return root

    rich_handler = RichHandler(
        console=console,
        show_time=True,
        show_path=False,
        rich_tracebacks=True,
        tracebacks_show_locals=os.getenv("LOG_SHOW_LOCALS", "false").lower() == "true",
        markup=False,
        log_time_format="[%X]",
    )
    rich_handler.setLevel(get_log_level())
    root.addHandler(rich_handler)
    root.propagate = False
    _sync_level(root)
    return root


def get_logger(name: str) -> logging.Logger:
    """获取模块日志器

    Args:
        name: 日志器名称，通常使用 __name__；包外名称会挂到 ``zhihu_feed`` 下

    Example:
        >>> from zhihu_feed.common.logger import get_logger
        >>> logger = get_logger(__name__)
        >>> logger.info("开始抓取 Feed")
    """
    root = _package_logger()
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_log_level(level: int | str) -> None:
    """调整控制台日志级别（如 CLI 的 --verbose）"""
    root = _package_logger()
    rich_handler = _rich_handler(root)
    if rich_handler is not None:
        rich_handler.setLevel(_to_level(level))
    _sync_level(root)


def setup_file_logging(log_file: str | Path, level: int | str = logging.DEBUG) -> logging.FileHandler:
    """为包日志器添加文件输出

    文件级别可以低于控制台级别，例如控制台 INFO、文件 DEBUG。

    Returns:
        新增的文件处理器，调用方可在结束时移除
    """
    path = Path(log_file)
    path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(path, encoding="utf-8")
    file_handler.setLevel(_to_level(level))
    file_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))

    root = _package_logger()
    root.addHandler(file_handler)
    _sync_level(root)
    return file_handler


def remove_file_logging(handler: logging.Handler) -> None:
    root = _package_logger()
    root.removeHandler(handler)
    handler.close()
    _sync_level(root)
