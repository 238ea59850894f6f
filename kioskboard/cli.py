# kioskboard/cli.py
"""
Command-line entry point: scrape one kiosk and save its boards as JSON.

Usage:
    kioskboard-scrape <SUITE_ID or FULL_URL>
    kioskboard-scrape <SUITE_ID> --duration 90 --interval 2 --headed
    kioskboard-scrape <URL> --dump-raw debug_kiosk.html --screenshot kiosk.png
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from kioskboard import config
from kioskboard.config import ReconcileConfig
from kioskboard.exceptions import KioskScraperError, ReconcileAborted
from kioskboard.export import JsonFileSink, build_result
from kioskboard.pipeline import scrape_kiosk
from kioskboard.targets import resolve_target

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='kioskboard-scrape',
        description='Scrape a rotating kiosk leaderboard into one JSON document per suite',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  kioskboard-scrape 0f4c2b7e-4f7a-4a55-9d0e-3c1f2a9b8d7e
  kioskboard-scrape https://insider.sternpinball.com/leaderboard/kiosk/<suite> --duration 30
        """
    )

    parser.add_argument('target', help='Suite id or full kiosk URL')

    parser.add_argument(
        '--duration',
        type=float,
        default=config.DEFAULT_DURATION_MS / 1000,
        help='Seconds to keep polling the kiosk (default: %(default)s)'
    )
    parser.add_argument(
        '--interval',
        type=float,
        default=config.DEFAULT_POLL_INTERVAL_MS / 1000,
        help='Seconds between snapshots (default: %(default)s)'
    )
    parser.add_argument(
        '--settle',
        type=float,
        default=config.DEFAULT_SETTLE_MS / 1000,
        help='Pause before the final snapshot, in seconds (default: %(default)s)'
    )
    parser.add_argument(
        '--no-nudge',
        action='store_true',
        help='Do not scroll the page between polls'
    )
    parser.add_argument(
        '--out-dir',
        default=config.OUTPUT_DIR,
        help='Output directory (default: %(default)s)'
    )
    parser.add_argument(
        '--headed',
        action='store_true',
        default=False,
        help='Run in headed mode (visible browser)'
    )
    parser.add_argument(
        '--dump-raw',
        metavar='PATH',
        help='Write the final rendered HTML to PATH for debugging'
    )
    parser.add_argument(
        '--screenshot',
        metavar='PATH',
        help='Save screenshot to specified path'
    )
    parser.add_argument('--verbose', action='store_true', help='Verbose logging')
    return parser


def _reconcile_config(args: argparse.Namespace) -> ReconcileConfig:
    return ReconcileConfig(
        duration_ms=int(args.duration * 1000),
        poll_interval_ms=int(args.interval * 1000),
        settle_ms=int(args.settle * 1000),
        nudge_enabled=not args.no_nudge,
    )


def _print_summary(result) -> None:
    print(f"Games: {len(result.games)} | Rows: {len(result.rows)}")
    for game in result.games:
        top = game.rows[0]
        title = game.title or "(untitled)"
        print(f"  {title}: {len(game.rows)} rows, #1 {top.player} {top.score_formatted}")


def _save_debug_captures(session, args: argparse.Namespace) -> None:
    """Screenshot and HTML dump; a failure here never costs the saved result."""
    captures = (
        (args.screenshot, session.screenshot, "screenshot"),
        (args.dump_raw, session.dump_html, "HTML dump"),
    )
    for path, capture, label in captures:
        if not path:
            continue
        try:
            capture(path)
            print(f"[DEBUG] Saved {label} to {path}")
        except Exception as e:
            print(f"[WARN] Could not save {label}: {e}")
            logger.warning("Could not save %s to %s", label, path, exc_info=True)


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    suite, url = resolve_target(args.target)
    sink = JsonFileSink(args.out_dir)

    print("\n" + "=" * 60)
    print("KIOSKBOARD - Kiosk Leaderboard Scraper")
    print("=" * 60)
    print(f"[TARGET] Suite: {suite}")
    print(f"[BROWSER] Opening browser ({'headed' if args.headed else 'headless'} mode)...")

    # Imported here so --help works without Playwright installed
    from kioskboard.scraper.session import KioskSession

    try:
        with KioskSession(url, headless=not args.headed) as session:
            print(f"[NAVIGATE] {url}")
            print(f"[POLL] Watching kiosk for {args.duration:g}s...")
            result = scrape_kiosk(session.source, suite, url, _reconcile_config(args))

            path = sink.write(result)
            print(f"[SAVE] {path}")
            _save_debug_captures(session, args)

        _print_summary(result)
        return 0

    except ReconcileAborted as e:
        print("\n" + "=" * 60)
        print("✗ ERROR: Scrape aborted")
        print("=" * 60)
        print(str(e))
        if e.partial:
            path = sink.write(build_result(suite, url, e.partial))
            print(f"[SAVE] Partial results written to {path}")
        logger.debug("Aborted run", exc_info=True)
        return 1

    except KioskScraperError as e:
        print("\n" + "=" * 60)
        print("✗ ERROR")
        print("=" * 60)
        print(str(e))
        print("")
        print("The kiosk page could not be loaded. Check the suite id or URL, or retry with --headed.")
        return 1

    except Exception as e:
        print("\n" + "=" * 60)
        print("✗ ERROR")
        print("=" * 60)
        print(str(e))
        logger.debug("Unexpected failure", exc_info=True)
        return 1


def run() -> None:
    sys.exit(main())


if __name__ == '__main__':
    run()
