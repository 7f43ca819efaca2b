"""Client utilities for the DataForSEO Google Maps SERP API."""

import logging
import threading
from typing import Any, Dict, List, Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from gridscan.core.config import Settings, get_settings
from gridscan.core.models import RankItem
from gridscan.etl.location import normalize_location
from gridscan.etl.transform import to_rank_items

logger = logging.getLogger(__name__)
_SESSION = requests.Session()
_SESSION_LOCK = threading.Lock()
_session_configured = False
_MAPS_LIVE_PATH = "/v3/serp/google/maps/live/advanced"

STATUS_OK = 20000
NO_RESULTS_MESSAGE = "No Search Results."
LOOKUP_DEPTH = 20


class DataForSEOError(RuntimeError):
    """Raised when DataForSEO returns a non-successful response."""


def configure_session(max_retries: int) -> None:
    """Mount transport-level retries for 5xx responses on the shared session.

    Only the first call mounts adapters; later calls leave the session untouched
    so scans already running keep their connection pools.
    """
    global _session_configured
    with _SESSION_LOCK:
        if _session_configured:
            return
        retries = Retry(
            total=max_retries,
            backoff_factor=1,
            status_forcelist=(500, 502, 503, 504),
            allowed_methods=("POST",),
            raise_on_status=False,
        )
        _SESSION.mount("http://", HTTPAdapter(max_retries=retries))
        _SESSION.mount("https://", HTTPAdapter(max_retries=retries))
        _session_configured = True
        logger.info("Mounted DataForSEO retry adapters (max_retries=%d)", max_retries)


def build_task(keyword: str, depth: int, **location: str) -> Dict[str, Any]:
    if not keyword or not keyword.strip():
        raise ValueError("Keyword must be provided for DataForSEO lookups.")
    return {
        "keyword": keyword.strip(),
        **location,
        "language_code": "en",
        "device": "desktop",
        "os": "windows",
        "depth": depth,
    }


def maps_live_advanced(task: Dict[str, Any], settings: Optional[Settings] = None) -> List[Dict[str, Any]]:
    """POST one Maps task and return the raw items of its first result.

    A task reporting "No Search Results." is a valid empty answer, not an error.
    """
    settings = settings or get_settings()
    response = _SESSION.post(
        f"{settings.dataforseo_base_url}{_MAPS_LIVE_PATH}",
        json=[task],
        auth=(settings.dataforseo_login, settings.dataforseo_password),
        timeout=settings.request_timeout,
    )
    response.raise_for_status()
    payload = response.json()

    if payload.get("status_code") != STATUS_OK:
        logger.error(
            "maps_live_advanced failed: status=%s, message=%s",
            payload.get("status_code"),
            payload.get("status_message"),
        )
        raise DataForSEOError(f"DataForSEO API error: {payload.get('status_message')}")

    tasks = payload.get("tasks") or []
    first_task = tasks[0] if tasks else {}
    if first_task.get("status_code") != STATUS_OK:
        if first_task.get("status_message") == NO_RESULTS_MESSAGE:
            return []
        logger.error(
            "maps_live_advanced task failed: status=%s, message=%s",
            first_task.get("status_code"),
            first_task.get("status_message"),
        )
        raise DataForSEOError(f"Task error: {first_task.get('status_message')}")

    results = first_task.get("result") or []
    first_result = results[0] if results else {}
    return (first_result or {}).get("items") or []


def query_maps_point(
    keyword: str,
    lat: float,
    lng: float,
    depth: int = 20,
    *,
    settings: Optional[Settings] = None,
) -> List[RankItem]:
    """Query the Maps SERP for a single coordinate, best result first."""
    task = build_task(keyword, depth, location_coordinate=f"{lat:.6f},{lng:.6f},15")
    items = maps_live_advanced(task, settings=settings)
    return to_rank_items(items)


def find_business(
    keyword: str,
    business_name: str,
    location: str,
    *,
    settings: Optional[Settings] = None,
) -> Optional[RankItem]:
    """Search a business by name near a city/ZIP and return its first organic listing."""
    normalized_search = business_name.lower().strip()
    if not normalized_search:
        return None

    resolved_location = normalize_location(location)
    logger.info("Looking up business=%s location=%s", business_name, resolved_location)

    task = build_task(f"{keyword} {business_name}", LOOKUP_DEPTH, location_name=resolved_location)
    items = to_rank_items(maps_live_advanced(task, settings=settings))

    for item in items:
        if not item.is_paid and normalized_search in item.title.lower():
            return item
    return None
