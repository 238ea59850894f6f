# kioskboard/config.py
"""
Defaults for the kiosk scraper: kiosk address, browser settings, selector
signatures, text patterns and polling windows.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional, Pattern, Tuple

KIOSK_BASE_URL = "https://insider.sternpinball.com/leaderboard/kiosk/{suite}"
OUTPUT_DIR = "public/data"

USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
    "AppleWebKit/537.36 (KHTML, like Gecko) "
    "Chrome/120.0.0.0 Safari/537.36"
)
VIEWPORT = {"width": 1920, "height": 1080}

NAVIGATION_TIMEOUT_MS = 45000
NETWORK_IDLE_TIMEOUT_MS = 15000
NUDGE_PIXELS = 400
NUDGE_PAUSE_MS = 250

DEFAULT_DURATION_MS = 60000
DEFAULT_POLL_INTERVAL_MS = 3000
DEFAULT_SETTLE_MS = 2000
DEFAULT_READY_TIMEOUT_MS = 15000

# Set by the live page source on elements whose computed style hides them
HIDDEN_MARKER_ATTR = "data-kiosk-hidden"


@dataclass(frozen=True)
class ExtractionConfig:
    """Selector signatures and regexes shared by every extraction strategy."""

    # Structured game blocks
    game_selector: str = '[class*="game-leaderboard"]'
    title_selector: str = '[class*="game-title"]'
    art_selector: str = '[class*="game-art"]'
    row_selector: str = '[class*="score-row"]'
    rank_selector: str = '[class*="rank"]'
    player_selector: str = '[class*="player-name"]'
    score_selector: str = '[class*="score-value"]'
    avatar_selector: str = '[class*="avatar"]'

    # Generic tables
    table_selectors: Tuple[str, ...] = ("table", '[role="table"]', '[role="grid"]')
    aria_row_selector: str = '[role="row"]'
    aria_cell_selector: str = '[role="cell"], [role="gridcell"], [role="columnheader"]'

    # Heuristic text scan
    hidden_marker: str = HIDDEN_MARKER_ATTR
    skipped_tags: Tuple[str, ...] = ("script", "style", "noscript", "template", "head", "svg")

    # Text shapes
    numericish: Pattern = re.compile(r"^\D*\d[\d,.\s]*\D*$")
    grouped_digits: Pattern = re.compile(r"\d{1,3}(?:[,.]\d{3})+")
    comma_grouped: Pattern = re.compile(r"\d{1,3}(?:,\d{3})+")
    rank_line: Pattern = re.compile(r"^\d+$")
    long_digit_run: int = 5

    # Image-optimisation proxies that wrap the source URL in a query param
    image_proxy_paths: Tuple[str, ...] = ("/_next/image", "/_vercel/image", "/cdn-cgi/image")
    image_proxy_param: str = "url"

    @property
    def ready_selector(self) -> str:
        """Markup whose appearance means the kiosk has rendered something useful."""
        return f"{self.row_selector}, table tbody tr"


@dataclass(frozen=True)
class ReconcileConfig:
    """Polling window for one reconciliation run."""

    duration_ms: int = DEFAULT_DURATION_MS
    poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS
    settle_ms: int = DEFAULT_SETTLE_MS
    nudge_enabled: bool = True
    # None waits on the extraction config's own markup; "" skips the wait
    ready_selector: Optional[str] = None
    ready_timeout_ms: int = DEFAULT_READY_TIMEOUT_MS


DEFAULT_EXTRACTION = ExtractionConfig()
