"""CLI 入口"""

from __future__ import annotations

import asyncio
import json
import threading
from pathlib import Path

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .common.browser import create_browser_session
from .common.config import config
from .common.exceptions import ZhihuFeedError
from .common.logger import get_logger, set_log_level, setup_file_logging
from .common.types import FeedItem
from .scraper.collector import FeedCollector
from .scraper.parser import parse_feed_html

# 日志器
logger = get_logger(__name__)

app = typer.Typer(
    name="zhihu-feed",
    help="知乎首页 Feed 抓取工具",
    add_completion=False,
)
console = Console()


def run_async_safely(coro):
    """在 CLI 同步上下文中安全执行协程"""
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(coro)

    # 已有运行中的事件循环（如在 notebook 中调用），改在新线程里执行
    result_holder: dict[str, object] = {}

    def _runner() -> None:
        try:
            result_holder["result"] = asyncio.run(coro)
        except BaseException as e:
            result_holder["error"] = e

    thread = threading.Thread(target=_runner, daemon=True)
    thread.start()
    thread.join()
    if "error" in result_holder:
        raise result_holder["error"]  # type: ignore[misc]
    return result_holder.get("result")


def _items_table(items: list[FeedItem]) -> Table:
    table = Table(title=f"Feed ({len(items)} items)")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("类型")
    table.add_column("标题", overflow="fold")
    table.add_column("作者")
    table.add_column("赞同", justify="right")
    table.add_column("评论", justify="right")
    for item in items:
        table.add_row(
            item.id,
            item.type.value,
            item.title,
            item.author.name,
            str(item.stats.vote_count),
            str(item.stats.comment_count),
        )
    return table


def _write_items(items: list[FeedItem], output: Path) -> None:
    output.parent.mkdir(parents=True, exist_ok=True)
    payload = [item.model_dump(mode="json", by_alias=True) for item in items]
    output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
    console.print(f"[green]已写入 {len(items)} 条 -> {output}[/green]")


async def _scrape_once(
    max_items: int,
    timeout_ms: int,
    scroll_interval_ms: int,
    headless: bool | None,
) -> list[FeedItem]:
    async with create_browser_session(headless=headless) as session:
        collector = FeedCollector(session.feed_page())
        return await collector.scrape_feed(
            max_items=max_items,
            timeout_ms=timeout_ms,
            scroll_interval_ms=scroll_interval_ms,
        )


@app.command()
def scrape(
    max_items: int = typer.Option(
        config.scraper.max_feed_items, "--max-items", "-n", min=1, help="目标条目数"
    ),
    timeout: int = typer.Option(
        config.scraper.scrape_timeout_ms, "--timeout", help="总超时（毫秒）"
    ),
    scroll_interval: int = typer.Option(
        config.scraper.scroll_interval_ms, "--scroll-interval", help="滚动等待（毫秒）"
    ),
    output: Path | None = typer.Option(None, "--output", "-o", help="JSON 输出文件"),
    headless: bool | None = typer.Option(None, "--headless/--no-headless", help="无头模式"),
    log_file: Path | None = typer.Option(None, "--log-file", help="额外写入抓取日志的文件"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="输出 DEBUG 日志"),
) -> None:
    """打开浏览器抓取一次首页 Feed"""
    if verbose:
        set_log_level("DEBUG")
    if log_file:
        setup_file_logging(log_file)
    console.print(
        Panel(
            f"目标条目: {max_items}\n超时: {timeout}ms\n滚动间隔: {scroll_interval}ms",
            title="知乎 Feed 抓取",
            style="cyan",
        )
    )
    try:
        items = run_async_safely(_scrape_once(max_items, timeout, scroll_interval, headless))
    except KeyboardInterrupt:
        console.print("[yellow]用户中断[/yellow]")
        raise typer.Exit(130)
    except ZhihuFeedError as e:
        console.print(Panel(f"[red]{e}[/red]", title="抓取失败", style="red"))
        raise typer.Exit(code=1) from e

    console.print(_items_table(items))
    if output:
        _write_items(items, output)


@app.command()
def parse(
    html_file: Path = typer.Argument(..., exists=True, dir_okay=False, help="保存的页面 HTML"),
    output: Path | None = typer.Option(None, "--output", "-o", help="JSON 输出文件"),
) -> None:
    """离线解析保存的 HTML 快照"""
    items = parse_feed_html(html_file.read_text(encoding="utf-8"))
    console.print(_items_table(items))
    if output:
        _write_items(items, output)


@app.command()
def serve(
    host: str = typer.Option(config.server.host, "--host", help="监听地址"),
    port: int = typer.Option(config.server.port, "--port", help="监听端口"),
) -> None:
    """启动 API 服务（生命周期内持有一个浏览器会话）"""
    import uvicorn

    from .api import browser_lifespan, create_app

    config.ensure_dirs()
    setup_file_logging(Path(config.server.log_dir) / "zhihu-feed.log", level="INFO")
    api = create_app(lifespan=browser_lifespan)
    logger.info("API server listening on http://%s:%d", host, port)
    uvicorn.run(api, host=host, port=port)


def main() -> None:
    app()


if __name__ == "__main__":
    main()
