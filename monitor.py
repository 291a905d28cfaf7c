#!/usr/bin/env python3
"""
Monitor seat availability for every Wanda cinema in the roster.

Each cinema is polled until all of today's shows are within
STOP_THRESHOLD_SECONDS of starting, then its shows are appended to
result/wanda.<date>.<threshold>.csv exactly once.

Usage:
    python monitor.py 120
"""

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path

from seatwatch import config
from seatwatch.pipeline.io import OutputSink, save_status
from seatwatch.pipeline.metrics import RETIRED
from seatwatch.pipeline.orchestrator import Orchestrator
from seatwatch.pipeline.runlog import RunLog
from seatwatch.pipeline.store import load_roster
from seatwatch.registry import get_fetcher


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Poll Wanda cinema schedules until showtime.")
    parser.add_argument(
        "stop_threshold",
        type=int,
        help="stop polling a show this many seconds before it starts",
    )
    parser.add_argument("--roster", type=Path, default=config.ROSTER_PATH, help="cinema roster file")
    parser.add_argument("--result-dir", type=Path, default=config.RESULT_DIR, help="CSV output directory")
    parser.add_argument("--proxies", type=Path, default=config.PROXIES_PATH, help="JSON list of proxies")
    parser.add_argument("--retries", type=int, default=config.RETRY_BUDGET, help="failed fetches allowed per cinema")
    args = parser.parse_args(argv)
    if args.retries < 1:
        parser.error("--retries must be at least 1")
    return args


def log_summary(log, metrics):
    log("")
    log("=" * 72)
    log("VENUE SUMMARY")
    log("=" * 72)
    log(f"{'Venue':<28} {'Shows':>6} {'Fetches':>8} {'Errors':>7} {'Outcome':>9} {'Time':>9}")
    log("-" * 72)
    for venue_id in sorted(metrics):
        m = metrics[venue_id]
        time_str = f"{m.duration_ms:.0f}ms"
        log(f"{m.name[:28]:<28} {m.show_count:>6} {m.fetches:>8} {m.failures:>7} {m.outcome or '-':>9} {time_str:>9}")
    log("-" * 72)
    total_shows = sum(m.show_count for m in metrics.values())
    total_fetches = sum(m.fetches for m in metrics.values())
    total_errors = sum(m.failures for m in metrics.values())
    log(f"{'TOTAL':<28} {total_shows:>6} {total_fetches:>8} {total_errors:>7}")
    log("=" * 72)


def main(argv=None):
    args = parse_args(argv)
    started = datetime.now()
    day = started.date()

    log = RunLog(config.log_path(args.stop_threshold), retention_days=config.LOG_RETENTION_DAYS)
    log(f"Starting monitor run at {started.isoformat(timespec='seconds')} (stop threshold {args.stop_threshold}s)")

    sink = OutputSink(config.result_path(day, args.stop_threshold, args.result_dir))
    if sink.bootstrap():
        log(f"Created {sink.path}")

    log("Init starts...")
    store = load_roster(args.roster, args.retries)
    log(f"Init completes... {len(store)} cinemas loaded")

    orchestrator = Orchestrator(
        store,
        get_fetcher(args.proxies),
        sink,
        args.stop_threshold,
        day=day,
        log=log,
        retry_budget=args.retries,
    )
    metrics = asyncio.run(orchestrator.run())

    log_summary(log, metrics)

    retired = [m.name for m in metrics.values() if m.outcome == RETIRED]
    if retired:
        log(f"WARNING: Ran out of retries for: {', '.join(retired)}", "ERROR")

    status_path = Path(args.result_dir) / config.STATUS_PATH.name
    save_status(status_path, {
        "last_run": started.isoformat(timespec="seconds"),
        "finished": datetime.now().isoformat(timespec="seconds"),
        "stop_threshold": args.stop_threshold,
        "result_path": str(sink.path),
        "venue_count": len(metrics),
        "retired_count": len(retired),
        "venues": {venue_id: m.to_status() for venue_id, m in metrics.items()},
    })
    log(f"Status saved to {status_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
