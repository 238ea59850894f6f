# kioskboard/export.py
"""
Result assembly and persistence.

The core hands one ScrapeResult per run to a sink; JsonFileSink writes it to
<out_dir>/<suite>.json.
"""

from __future__ import annotations

import json
import logging
import os
from datetime import datetime, timezone
from typing import Iterable, Optional, Protocol

from kioskboard.config import OUTPUT_DIR
from kioskboard.models import GameBoard, ScrapeResult

logger = logging.getLogger(__name__)


class ResultSink(Protocol):
    def write(self, result: ScrapeResult) -> str:
        ...


def build_result(
    suite: str,
    target: str,
    games: Iterable[GameBoard],
    scraped_at: Optional[datetime] = None,
) -> ScrapeResult:
    stamp = scraped_at or datetime.now(timezone.utc)
    return ScrapeResult(
        suite=suite,
        target=target,
        scraped_at=stamp.isoformat(),
        games=list(games),
    )


class JsonFileSink:
    def __init__(self, out_dir: str = OUTPUT_DIR):
        self.out_dir = out_dir

    def path_for(self, suite: str) -> str:
        return os.path.join(self.out_dir, f"{suite}.json")

    def write(self, result: ScrapeResult) -> str:
        os.makedirs(self.out_dir, exist_ok=True)
        path = self.path_for(result.suite)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(result.to_dict(), f, indent=2, ensure_ascii=False)
        logger.info("Saved %s (%s games, %s rows)", path, len(result.games), len(result.rows))
        return path
