"""Application configuration helpers.

Credentials for the ranking provider are only ever read from the environment:
DataForSEO bills every query, so `DATAFORSEO_LOGIN` / `DATAFORSEO_PASSWORD`
must never be hardcoded.
"""

import logging
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv

from gridscan.core.models import ScanOptions

logger = logging.getLogger(__name__)


class ConfigError(RuntimeError):
    """Raised when a configuration value cannot be parsed."""


@dataclass(frozen=True)
class Settings:
    dataforseo_login: str
    dataforseo_password: str
    dataforseo_base_url: str = "https://api.dataforseo.com"
    request_timeout: float = 30.0
    max_retries: int = 0
    scan_concurrency: int = 3
    scan_delay_ms: int = 100
    scan_depth: int = 20
    unit_cost: float = 0.002
    worker_port: int = 9000

    def scan_options(self, grid_size: int = 5, radius_miles: float = 5.0) -> ScanOptions:
        return ScanOptions(
            grid_size=grid_size,
            radius_miles=radius_miles,
            delay_ms=self.scan_delay_ms,
            concurrency=self.scan_concurrency,
            depth=self.scan_depth,
            unit_cost=self.unit_cost,
        )


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from exc


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise ConfigError(f"{name} must be numeric, got {raw!r}") from exc


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from environment variables with sensible defaults."""
    load_dotenv()

    login = os.getenv("DATAFORSEO_LOGIN", "")
    password = os.getenv("DATAFORSEO_PASSWORD", "")
    base_url: Optional[str] = os.getenv("DATAFORSEO_BASE_URL") or None

    if not login or not password:
        logger.warning("DataForSEO credentials not configured; ranking queries will fail.")

    concurrency = _get_int("SCAN_CONCURRENCY", 3)
    if concurrency < 1:
        raise ConfigError("SCAN_CONCURRENCY must be at least 1")

    return Settings(
        dataforseo_login=login,
        dataforseo_password=password,
        dataforseo_base_url=(base_url or "https://api.dataforseo.com").rstrip("/"),
        request_timeout=_get_float("DATAFORSEO_TIMEOUT", 30.0),
        max_retries=_get_int("DATAFORSEO_MAX_RETRIES", 0),
        scan_concurrency=concurrency,
        scan_delay_ms=_get_int("SCAN_DELAY_MS", 100),
        scan_depth=_get_int("SCAN_DEPTH", 20),
        unit_cost=_get_float("SCAN_UNIT_COST", 0.002),
        worker_port=_get_int("WORKER_PORT", 9000),
    )
