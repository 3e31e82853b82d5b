"""配置管理"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import BaseModel, Field

# 加载 .env 文件
load_dotenv()


class BrowserConfig(BaseModel):
    """浏览器配置"""

    headless: bool = Field(default_factory=lambda: os.getenv("HEADLESS", "false").lower() == "true")
    viewport_width: int = Field(default_factory=lambda: int(os.getenv("BROWSER_WIDTH", "1920")))
    viewport_height: int = Field(default_factory=lambda: int(os.getenv("BROWSER_HEIGHT", "1080")))
    user_agent: str = Field(
        default_factory=lambda: os.getenv(
            "USER_AGENT",
            "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
            "(KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36",
        )
    )
    locale: str = Field(default_factory=lambda: os.getenv("BROWSER_LOCALE", "zh-CN"))
    timezone_id: str = Field(default_factory=lambda: os.getenv("BROWSER_TIMEZONE", "Asia/Shanghai"))
    timeout_ms: int = Field(default_factory=lambda: int(os.getenv("STEP_TIMEOUT_MS", "30000")))
    # Playwright storage_state 文件（登录态），存在时自动加载
    auth_file: str = Field(default_factory=lambda: os.getenv("AUTH_FILE", ".auth/zhihu.json"))


class ScraperConfig(BaseModel):
    """Feed 抓取配置

    所有时间单位均为毫秒。
    """

    # 单次抓取的最大条目数
    max_feed_items: int = Field(default_factory=lambda: int(os.getenv("MAX_FEED_ITEMS", "100")))
    # 单次抓取的总超时
    scrape_timeout_ms: int = Field(default_factory=lambda: int(os.getenv("SCRAPE_TIMEOUT", "30000")))
    # 每次滚动后等待新内容的时间
    scroll_interval_ms: int = Field(default_factory=lambda: int(os.getenv("SCROLL_INTERVAL", "2000")))

    # ===== 请求间隔配置（反爬虫） =====
    min_request_delay_ms: int = Field(
        default_factory=lambda: int(os.getenv("MIN_REQUEST_DELAY", "1000"))
    )
    max_request_delay_ms: int = Field(
        default_factory=lambda: int(os.getenv("MAX_REQUEST_DELAY", "3000"))
    )

    # 读接口自动补抓时的最小条目数
    auto_scrape_min_items: int = Field(
        default_factory=lambda: int(os.getenv("AUTO_SCRAPE_MIN_ITEMS", "10"))
    )


class RetryConfig(BaseModel):
    """重试配置（指数退避）"""

    max_retries: int = Field(default_factory=lambda: int(os.getenv("MAX_RETRIES", "3")))
    retry_delay_ms: int = Field(default_factory=lambda: int(os.getenv("RETRY_DELAY", "1000")))
    max_retry_delay_ms: int = Field(
        default_factory=lambda: int(os.getenv("MAX_RETRY_DELAY", "10000"))
    )


class ServerConfig(BaseModel):
    """API 服务配置"""

    host: str = Field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = Field(default_factory=lambda: int(os.getenv("PORT", "3000")))
    log_dir: str = Field(default_factory=lambda: os.getenv("LOG_DIR", "./logs"))


class Config(BaseModel):
    """全局配置"""

    browser: BrowserConfig = Field(default_factory=BrowserConfig)
    scraper: ScraperConfig = Field(default_factory=ScraperConfig)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)

    @classmethod
    def load(cls) -> "Config":
        """加载配置"""
        return cls()

    def ensure_dirs(self) -> None:
        """确保日志与登录态目录存在"""
        Path(self.server.log_dir).mkdir(parents=True, exist_ok=True)
        Path(self.browser.auth_file).parent.mkdir(parents=True, exist_ok=True)


# 全局配置实例
config = Config.load()
