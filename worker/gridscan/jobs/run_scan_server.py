"""HTTP entrypoint that runs local rank grid scans (Cloud Run friendly)."""

from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional, Tuple

from flask import Flask, jsonify, request

from gridscan.core.config import ConfigError, get_settings
from gridscan.core.lookup import BusinessNotFoundError, ScanRequestError
from gridscan.jobs.run_scan import run_scan_job

# ---------- Logging ----------
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger(__name__)

# ---------- App ----------
app = Flask(__name__)

GRID_SIZE_RANGE = (3, 9)
RADIUS_MILES_RANGE = (1, 25)

# ---------- Routes ----------


@app.get("/")
def root() -> Any:
    """Simple root to avoid 404 on GET /"""
    return "ok", 200


@app.get("/healthz")
def healthcheck() -> Any:
    """Lightweight health endpoint; only reads ENV-based settings."""
    settings = get_settings()
    return (
        jsonify(
            {
                "status": "ok",
                "worker_port_config": getattr(settings, "worker_port", None),
                "revision": os.getenv("K_REVISION", "unknown"),
                "region": os.getenv("X_GOOGLE_RUNTIMEREGION", "unknown"),
            }
        ),
        200,
    )


@app.post("/local-rank")
def local_rank() -> Any:
    """
    Run a grid scan synchronously and return its summary.
    Required JSON fields: keyword, and either lat + lng or businessName + location
    Optional: placeId, gridSize (3-9, default 5), radiusMiles (1-25, default 5)
    """
    payload: Dict[str, Any] = request.get_json(silent=True) or {}
    return _handle_scan(payload)


@app.get("/local-rank")
def local_rank_query() -> Any:
    """Same as POST /local-rank with URL params: keyword, lat, lng, business, location, placeId, grid, radius."""
    args = request.args
    keyword = args.get("keyword")
    if not keyword:
        return jsonify({"error": "keyword is required"}), 400

    payload: Dict[str, Any] = {"keyword": keyword}
    try:
        if args.get("lat") and args.get("lng"):
            payload["lat"] = float(args["lat"])
            payload["lng"] = float(args["lng"])
        if args.get("grid"):
            payload["gridSize"] = int(args["grid"])
        if args.get("radius"):
            payload["radiusMiles"] = float(args["radius"])
    except ValueError:
        return jsonify({"error": "Validation error", "details": ["lat, lng, grid and radius must be numeric"]}), 400

    if args.get("business"):
        payload["businessName"] = args["business"]
    if args.get("location"):
        payload["location"] = args["location"]
    if args.get("placeId"):
        payload["placeId"] = args["placeId"]

    return _handle_scan(payload)


# ---------- Internals ----------


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _optional_string(payload: Dict[str, Any], key: str, errors: List[str]) -> Optional[str]:
    value = payload.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        errors.append(f"{key} must be a string")
        return None
    return value


def _optional_bounded_number(
    payload: Dict[str, Any], key: str, low: float, high: float, errors: List[str]
) -> Optional[float]:
    value = payload.get(key)
    if value is None:
        return None
    if not _is_number(value) or not low <= value <= high:
        errors.append(f"{key} must be a number between {low} and {high}")
        return None
    return float(value)


def validate_scan_payload(payload: Dict[str, Any]) -> Tuple[Dict[str, Any], List[str]]:
    """Validate a /local-rank body and return job kwargs plus any validation errors."""
    errors: List[str] = []

    keyword = payload.get("keyword")
    if not isinstance(keyword, str) or not keyword.strip():
        errors.append("keyword must be a non-empty string")

    lat = _optional_bounded_number(payload, "lat", -90, 90, errors)
    lng = _optional_bounded_number(payload, "lng", -180, 180, errors)

    grid_size = payload.get("gridSize", 5)
    if isinstance(grid_size, float) and grid_size.is_integer():
        grid_size = int(grid_size)
    if not _is_number(grid_size) or not isinstance(grid_size, int) or not (
        GRID_SIZE_RANGE[0] <= grid_size <= GRID_SIZE_RANGE[1]
    ):
        errors.append(f"gridSize must be an integer between {GRID_SIZE_RANGE[0]} and {GRID_SIZE_RANGE[1]}")
        grid_size = 5

    radius_miles = payload.get("radiusMiles", 5)
    if not _is_number(radius_miles) or not RADIUS_MILES_RANGE[0] <= radius_miles <= RADIUS_MILES_RANGE[1]:
        errors.append(
            f"radiusMiles must be a number between {RADIUS_MILES_RANGE[0]} and {RADIUS_MILES_RANGE[1]}"
        )

    job_args = dict(
        keyword=keyword.strip() if isinstance(keyword, str) else "",
        lat=lat,
        lng=lng,
        business_name=_optional_string(payload, "businessName", errors),
        location=_optional_string(payload, "location", errors),
        place_id=_optional_string(payload, "placeId", errors),
        grid_size=grid_size,
        radius_miles=float(radius_miles) if _is_number(radius_miles) else 5.0,
    )
    return job_args, errors


def _handle_scan(payload: Dict[str, Any]) -> Any:
    job_args, errors = validate_scan_payload(payload)
    if errors:
        return jsonify({"error": "Validation error", "details": errors}), 400

    logger.info("Running grid scan: %s", job_args)
    try:
        summary = run_scan_job(**job_args)
    except BusinessNotFoundError as exc:
        return jsonify({"error": "Business not found", "message": str(exc)}), 404
    except ScanRequestError as exc:
        return jsonify({"error": "Invalid request", "message": str(exc)}), 400
    except ConfigError as exc:
        logger.error("Configuration error: %s", exc)
        return jsonify({"error": "Internal server error", "message": str(exc)}), 500
    except Exception as exc:  # noqa: BLE001
        logger.exception("Local rank scan failed: %s", exc)
        return jsonify({"error": "Internal server error", "message": str(exc)}), 500

    return jsonify(summary.to_dict()), 200


def main() -> None:
    """Cloud Run injects PORT; fall back to 8080 for local runs."""
    env_port = os.getenv("PORT")
    logger.info("[BOOT] ENV PORT=%s", env_port)

    port = int(env_port or 8080)
    logger.info("[BOOT] Binding on 0.0.0.0:%d", port)
    app.run(host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
