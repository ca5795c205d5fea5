"""Configuration from environment variables (.env)."""

import os
from pathlib import Path
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()


@dataclass
class Config:
    project_root: Path
    logs_dir: Path
    searxng_url: str
    search_locale: str
    search_result_count: int
    search_timeout_seconds: float
    telegram_channel: str
    telegram_preview_url: str
    telegram_page_size: int
    telegram_timeout_seconds: float
    cache_ttl_seconds: int
    min_text_length: int
    search_backends: list[str]  # Backend names to query, in priority order (empty = all defaults)

    @classmethod
    def load(cls) -> "Config":
        project_root = Path(__file__).parent.parent.parent
        return cls(
            project_root=project_root,
            logs_dir=Path(os.getenv("DISCOVERY_LOGS_DIR", str(project_root / "logs"))),
            searxng_url=os.getenv("SEARXNG_URL", ""),
            search_locale=os.getenv("SEARCH_LOCALE", "ru-RU"),
            search_result_count=int(os.getenv("SEARCH_RESULT_COUNT", "10")),
            search_timeout_seconds=float(os.getenv("SEARCH_TIMEOUT_SECONDS", "10")),
            telegram_channel=os.getenv("TELEGRAM_CHANNEL", "javascript_jobs").strip().lstrip("@"),
            telegram_preview_url=os.getenv("TELEGRAM_PREVIEW_URL", "https://t.me/s"),
            telegram_page_size=int(os.getenv("TELEGRAM_PAGE_SIZE", "10")),
            telegram_timeout_seconds=float(os.getenv("TELEGRAM_TIMEOUT_SECONDS", "10")),
            cache_ttl_seconds=int(os.getenv("DISCOVERY_CACHE_TTL_SECONDS", "3600")),
            min_text_length=int(os.getenv("DISCOVERY_MIN_TEXT_LENGTH", "44")),
            search_backends=[b.strip() for b in os.getenv("SEARCH_BACKENDS", "").split(",") if b.strip()],
        )

    def validate(self) -> list[str]:
        errors = []
        if not self.searxng_url:
            errors.append("SEARXNG_URL is not set: web candidate search is unavailable")
        if not self.telegram_channel:
            errors.append("TELEGRAM_CHANNEL is not set: channel candidate search is unavailable")
        if self.telegram_page_size <= 0:
            errors.append(f"TELEGRAM_PAGE_SIZE must be positive, got {self.telegram_page_size}")
        if self.min_text_length <= 0:
            errors.append(f"DISCOVERY_MIN_TEXT_LENGTH must be positive, got {self.min_text_length}")
        return errors


config = Config.load()
