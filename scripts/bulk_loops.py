#!/usr/bin/env python3
# scripts/bulk_loops.py
# -*- coding: utf-8 -*-

"""
Bulk loop generator.

Given one address and one target, this script:

  1. Generates `--count` loops in a single session (random bearing each time).
  2. Optionally runs them on a thread pool; loops then land in history in
     completion order, and take their colors from that order.
  3. In sequential mode, stops at the first RateLimited answer.
  4. Writes one CSV row per loop (target, routed distance/duration, color,
     deep link) with pandas, and logs a short summary.
"""

from __future__ import annotations

# ───────────────────── path bootstrap (must be first) ─────────────────────
from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[1]  # repo root (one level above /scripts)
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
# ──────────────────────────────────────────────────────────────────────────

import argparse
import random
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

import pandas as pd

from makemyloop.app.session import GenerationOutcome, LoopSession
from makemyloop.core.models import LoopUnit
from makemyloop.infra.logging import get_logger, init_logging, log_banner
from makemyloop.loop.formatting import format_actual, format_target
from makemyloop.services.client import LoopServicesClient
from makemyloop.services.common import RateLimited, ServiceConfig

_log = get_logger(__name__)


# ───────────────────────────────── parser / CLI ────────────────────────────
def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate many loops around one address and save a CSV summary."
    )
    parser.add_argument("--address", required=True, help="Start address (free text).")
    parser.add_argument("--value", required=True, help="Target value (km or min).")
    parser.add_argument(
          "--unit"
        , default="km"
        , choices=["km", "min"]
        , help="Unit of --value. Default: km"
    )
    parser.add_argument("--count", type=int, default=5, help="Loops to generate. Default: 5")
    parser.add_argument(
          "--workers"
        , type=int
        , default=1
        , help="Concurrent generations. Default: 1 (sequential)"
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the bearings.")
    parser.add_argument(
          "--out"
        , type=Path
        , default=Path("loops.csv")
        , help="CSV output path. Default: loops.csv"
    )
    parser.add_argument(
          "--log-level"
        , default="INFO"
        , choices=["DEBUG", "INFO", "WARNING", "ERROR"]
    )
    return parser


# ───────────────────────────────── helpers ─────────────────────────────────
def _rows(session: LoopSession) -> List[dict]:
    rows = []
    for index, loop in enumerate(session.history):
        rows.append(
            {
                  "index": index
                , "id": loop.id
                , "address": loop.address
                , "target": format_target(loop)
                , "actual": format_actual(loop)
                , "actual_distance_km": loop.actual_distance_km
                , "actual_duration_min": loop.actual_duration_min
                , "color": loop.color
                , "path_points": len(loop.path)
                , "navigation_url": session.navigation_url(loop)
            }
        )
    return rows


def _run(session: LoopSession, args: argparse.Namespace) -> List[GenerationOutcome]:
    def one(_: int) -> GenerationOutcome:
        return session.generate_loop(args.value, args.unit, address=args.address)

    outcomes: List[GenerationOutcome] = []
    if args.workers <= 1:
        for i in range(args.count):
            outcome = one(i)
            outcomes.append(outcome)
            if isinstance(outcome.error, RateLimited):
                _log.error("Rate limit reached after %s loops; stopping.", i + 1)
                break
        return outcomes

    with ThreadPoolExecutor(max_workers=args.workers) as pool:
        outcomes.extend(pool.map(one, range(args.count)))
    return outcomes


# ───────────────────────────────── main ────────────────────────────────────
def main(argv: Optional[list[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    init_logging(level=args.log_level, run_log=True)

    unit = LoopUnit.parse(args.unit)
    log_banner(_log, f"Bulk loops: {args.count} × {args.value} {unit.value} from {args.address!r}")

    with LoopServicesClient(cfg=ServiceConfig()) as client:
        session = LoopSession(client, rng=random.Random(args.seed))
        outcomes = _run(session, args)

    failures = [o.status for o in outcomes if not o.ok]
    for status in sorted(set(failures)):
        _log.warning("%s × %s", failures.count(status), status)

    df = pd.DataFrame(_rows(session))
    if df.empty:
        _log.error("No loop generated; nothing written.")
        return 1

    args.out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(args.out, index=False, float_format="%.2f", encoding="utf-8")

    _log.info(
        "Saved %s loops → %s (distance km: min=%.2f mean=%.2f max=%.2f)",
        len(df),
        args.out,
        df["actual_distance_km"].min(),
        df["actual_distance_km"].mean(),
        df["actual_distance_km"].max(),
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
