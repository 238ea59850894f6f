# kioskboard/scraper/reconciler.py
"""
Merge repeated snapshots of a rotating kiosk into one board per game.

The kiosk shows a varying subset of games and ranks at any instant, so a
single snapshot is never trusted. Boards are keyed by (title, art) and a
stored board is only replaced, wholesale, by one with strictly more rows.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Dict, List, Optional, Tuple

from kioskboard.config import ReconcileConfig
from kioskboard.exceptions import ReconcileAborted
from kioskboard.models import GameBoard, Snapshot
from kioskboard.scraper.chain import ExtractionChain
from kioskboard.scraper.source import PageSource

logger = logging.getLogger(__name__)

AggregateState = Dict[Tuple[str, str], GameBoard]


class SystemClock:
    def monotonic(self) -> float:
        return time.monotonic()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


def merge_snapshot(state: AggregateState, snapshot: Snapshot) -> int:
    """
    Fold one snapshot into the aggregate state.

    A board is stored when its game is new or when it has strictly more rows
    than the stored board. Equal counts keep the earlier board.

    Returns:
        Number of boards added or replaced
    """
    changed = 0
    for board in snapshot:
        current = state.get(board.key)
        if current is None or len(board.rows) > len(current.rows):
            state[board.key] = board
            changed += 1
    return changed


def ordered_boards(state: AggregateState) -> List[GameBoard]:
    return sorted(state.values(), key=lambda board: board.title.casefold())


class SnapshotReconciler:
    def __init__(self, chain: ExtractionChain, config: ReconcileConfig, clock=None):
        self.chain = chain
        self.config = config
        self.clock = clock or SystemClock()
        self.polls = 0

    def reconcile(self, page_source: PageSource, cancel: Optional[threading.Event] = None) -> List[GameBoard]:
        """
        Poll the page for config.duration_ms, then settle and take a final snapshot.

        Args:
            page_source: Source of rendered page state
            cancel: Optional event; once set, polling stops and the boards
                gathered so far are returned

        Returns:
            Best board per game, sorted by title (case-insensitive)

        Raises:
            ReconcileAborted: If the page source fails; carries the partial boards
        """
        state: AggregateState = {}
        self.polls = 0

        try:
            ready_selector = self.config.ready_selector
            if ready_selector is None:
                ready_selector = self.chain.config.ready_selector
            if ready_selector:
                ready = page_source.wait_for(ready_selector, self.config.ready_timeout_ms)
                if not ready:
                    logger.info("Expected markup did not appear, extracting whatever is rendered")

            start = self.clock.monotonic()
            while self.clock.monotonic() - start < self.config.duration_ms / 1000.0:
                if self._cancelled(cancel):
                    logger.info("Reconciliation cancelled after %s poll(s)", self.polls)
                    return ordered_boards(state)
                self._poll(page_source, state)
                if self.config.nudge_enabled:
                    page_source.request_nudge()
                self.clock.sleep(self.config.poll_interval_ms / 1000.0)

            if self._cancelled(cancel):
                return ordered_boards(state)
            self.clock.sleep(self.config.settle_ms / 1000.0)
            self._poll(page_source, state)

        except Exception as exc:
            raise ReconcileAborted(f"Page source failed: {exc}", partial=ordered_boards(state)) from exc

        return ordered_boards(state)

    def _poll(self, page_source: PageSource, state: AggregateState) -> None:
        snapshot = self.chain.snapshot(page_source)
        self.polls += 1
        changed = merge_snapshot(state, snapshot)
        logger.debug(
            "Poll %s: %s board(s) via %s, %s updated, %s game(s) known",
            self.polls,
            len(snapshot),
            self.chain.last_strategy or "none",
            changed,
            len(state),
        )

    @staticmethod
    def _cancelled(cancel: Optional[threading.Event]) -> bool:
        return cancel is not None and cancel.is_set()
