#!/usr/bin/env python3
# scripts/make_loop.py
# -*- coding: utf-8 -*-

"""
Generate one walking loop from an address and print it as JSON.

Examples
--------
    python scripts/make_loop.py --address "Lorient, France" --distance 5 --pretty
    python scripts/make_loop.py --address "Lorient, France" --duration 45 --open
"""

from __future__ import annotations

# --- path bootstrap (must be the first lines of the file) ---
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]  # repo root (one level above /scripts)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# ------------------------------------------------------------

import argparse
import json
import random
from typing import Optional

from makemyloop.app.session import LoopSession
from makemyloop.core.models import LoopUnit
from makemyloop.infra.logging import get_logger, init_logging, log_banner
from makemyloop.loop.export import open_in_navigation
from makemyloop.loop.formatting import format_target
from makemyloop.services.client import LoopServicesClient
from makemyloop.services.common import ServiceConfig

_log = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate a closed walking/running loop from an address."
    )
    parser.add_argument(
          "--address"
        , required=True
        , help="Start address (free text, sent to the geocoder as-is)."
    )

    target = parser.add_mutually_exclusive_group(required=True)
    target.add_argument(
          "--distance"
        , help="Target loop length in km."
    )
    target.add_argument(
          "--duration"
        , help="Target loop duration in minutes (converted at 5 km/h)."
    )

    parser.add_argument(
          "--seed"
        , type=int
        , default=None
        , help="Seed for the random bearing (repeatable loops)."
    )
    parser.add_argument(
          "--max-retries"
        , type=int
        , default=None
        , help="Transport retries per HTTP call. Default: env or 2."
    )
    parser.add_argument(
          "--no-cache"
        , action="store_true"
        , help="Disable the SQLite geocoding cache."
    )
    parser.add_argument(
          "--open"
        , action="store_true"
        , help="Open the loop in Google Maps."
    )
    parser.add_argument(
          "--pretty"
        , action="store_true"
        , help="Pretty-print JSON."
    )
    parser.add_argument(
          "--with-path"
        , action="store_true"
        , help="Include the full loop record (path, anchors) in the JSON output."
    )
    parser.add_argument(
          "--log-level"
        , default="INFO"
        , choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    return parser


def main(
    argv: Optional[list[str]] = None
) -> int:
    args = _build_parser().parse_args(argv)
    init_logging(level=args.log_level)

    if args.distance is not None:
        value, unit = args.distance, LoopUnit.DISTANCE
    else:
        value, unit = args.duration, LoopUnit.DURATION

    log_banner(_log, f"Make My Loop: {args.address!r} {value} {unit.value}")

    cfg_kwargs = {"max_retries": args.max_retries}
    if args.no_cache:
        cfg_kwargs["cache_path"] = None

    with LoopServicesClient(cfg=ServiceConfig(**cfg_kwargs)) as client:
        session = LoopSession(client, rng=random.Random(args.seed))
        outcome = session.generate_loop(value, unit, address=args.address)

    if not outcome.ok:
        payload = {
              "address": args.address
            , "status": "rejected"
            , "message": outcome.status
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2 if args.pretty else None))
        return 1

    loop = outcome.loop
    url = session.navigation_url(loop)
    payload = {
          "id": loop.id
        , "address": loop.address
        , "target": format_target(loop)
        , "actual_distance_km": loop.actual_distance_km
        , "actual_duration_min": loop.actual_duration_min
        , "color": loop.color
        , "summary": outcome.status
        , "path_points": len(loop.path)
        , "bounds": [list(corner) for corner in loop.bounds()]
        , "navigation_url": url
        , "status": "ok"
    }
    if args.with_path:
        payload["loop"] = loop.to_dict()

    if args.pretty:
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print(json.dumps(payload, ensure_ascii=False, separators=(",", ":")))

    if args.open:
        open_in_navigation(loop)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
