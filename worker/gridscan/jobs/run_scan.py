"""CLI job that runs a local rank grid scan and prints the summary as JSON."""

import argparse
import json
import logging
import sys
from dataclasses import replace
from functools import partial
from typing import Optional

from gridscan.core.config import ConfigError, get_settings
from gridscan.core.lookup import ScanRequestError, resolve_scan_center
from gridscan.core.models import ScanSummary
from gridscan.core.scanner import run_grid_scan
from gridscan.vendors import dataforseo

logger = logging.getLogger(__name__)


def run_scan_job(
    *,
    keyword: str,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
    business_name: Optional[str] = None,
    location: Optional[str] = None,
    place_id: Optional[str] = None,
    grid_size: int = 5,
    radius_miles: float = 5.0,
    concurrency: Optional[int] = None,
    delay_ms: Optional[int] = None,
) -> ScanSummary:
    settings = get_settings()
    if not settings.dataforseo_login or not settings.dataforseo_password:
        raise ConfigError("DATAFORSEO_LOGIN and DATAFORSEO_PASSWORD are required")
    if settings.max_retries > 0:
        dataforseo.configure_session(settings.max_retries)

    center = resolve_scan_center(
        keyword,
        lat=lat,
        lng=lng,
        business_name=business_name,
        location=location,
        place_id=place_id,
        lookup=partial(dataforseo.find_business, settings=settings),
    )

    options = settings.scan_options(grid_size=grid_size, radius_miles=radius_miles)
    if concurrency is not None:
        options = replace(options, concurrency=concurrency)
    if delay_ms is not None:
        options = replace(options, delay_ms=delay_ms)

    return run_grid_scan(
        keyword,
        center.lat,
        center.lng,
        business_name=center.business_name,
        place_id=center.place_id,
        options=options,
        query_point=partial(dataforseo.query_maps_point, settings=settings),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run a local search visibility grid scan")
    parser.add_argument("--keyword", dest="keyword", required=True, help="Search keyword, e.g. 'pizza'")
    parser.add_argument("--lat", dest="lat", type=float, help="Center latitude")
    parser.add_argument("--lng", dest="lng", type=float, help="Center longitude")
    parser.add_argument("--business", dest="business_name", help="Business name to match")
    parser.add_argument("--location", dest="location", help="City/state or ZIP used for business lookup")
    parser.add_argument("--place-id", dest="place_id", help="Google place id of the business")
    parser.add_argument("--grid", dest="grid_size", type=int, default=5, help="Grid points per side")
    parser.add_argument("--radius", dest="radius_miles", type=float, default=5.0, help="Radius in miles")
    parser.add_argument("--concurrency", dest="concurrency", type=int, help="Parallel workers")
    parser.add_argument("--delay-ms", dest="delay_ms", type=int, help="Pause per worker after each point")
    parser.add_argument("--output", dest="output", help="Write the JSON summary to this file instead of stdout")
    return parser


def main(argv: Optional[list] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        summary = run_scan_job(
            keyword=args.keyword,
            lat=args.lat,
            lng=args.lng,
            business_name=args.business_name,
            location=args.location,
            place_id=args.place_id,
            grid_size=args.grid_size,
            radius_miles=args.radius_miles,
            concurrency=args.concurrency,
            delay_ms=args.delay_ms,
        )
    except (ConfigError, ScanRequestError) as exc:
        logger.error("Scan not started: %s", exc)
        return 2

    body = json.dumps(summary.to_dict(), indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as fh:
            fh.write(body)
        logger.info("Saved scan summary to %s", args.output)
    else:
        sys.stdout.write(body + "\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
