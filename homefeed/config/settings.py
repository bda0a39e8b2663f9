from dotenv import load_dotenv
from pydantic import BaseModel, Field
import os

load_dotenv()

DEFAULT_ENDPOINT = "https://feeds.getiantem.org/{locale}/feed.json"
DEFAULT_LOCALES = ["en_US", "fa_IR", "fa", "zh_CN"]


def _to_int(v: str | None, default: int) -> int:
    if v is None or not v.strip():
        return default
    return int(v.strip())

def _to_list(v: str | None, default: list[str]) -> list[str]:
    # locale tags are case sensitive, so no lowercasing here
    if v is None or not v.strip():
        return list(default)
    return [x.strip() for x in v.split(",") if x.strip()]

def _to_optional_float(v: str | None) -> float | None:
    if v is None or not v.strip():
        return None
    return float(v.strip())



class Settings(BaseModel):
    # the feed endpoint where recent content is published to,
    # mostly a compendium of RSS feeds
    feed_endpoint: str = Field(default=DEFAULT_ENDPOINT)
    default_locale: str = Field(default="en_US")
    supported_locales: list[str] = Field(default_factory=lambda: list(DEFAULT_LOCALES))

    description_max_chars: int = Field(default=150, ge=0)
    http_timeout: float | None = Field(default=None)  # None = wait forever
    proxy_addr: str = Field(default="")

    log_level: str = Field(default="INFO")
    log_file: str = Field(default="logs/homefeed.log")

    def feed_url(self, locale: str) -> str:
        return self.feed_endpoint.format(locale=locale)


_settings: Settings | None = None

def get_settings() -> Settings:
    global _settings
    if _settings is not None:
        return _settings

    _settings = Settings(
        feed_endpoint=os.getenv("FEED_ENDPOINT", DEFAULT_ENDPOINT),
        default_locale=os.getenv("FEED_DEFAULT_LOCALE", "en_US"),
        supported_locales=_to_list(os.getenv("FEED_SUPPORTED_LOCALES"), DEFAULT_LOCALES),
        description_max_chars=_to_int(os.getenv("FEED_DESCRIPTION_MAX_CHARS"), 150),
        http_timeout=_to_optional_float(os.getenv("FEED_HTTP_TIMEOUT")),
        proxy_addr=os.getenv("FEED_PROXY_ADDR", ""),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE", "logs/homefeed.log"),
    )
    return _settings
