# kioskboard/scraper/chain.py
"""
Ordered extraction strategies.

Strategies are tried in order; the first one producing at least one board
wins. When every strategy comes back empty the snapshot is empty, which is not
an error.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence

from kioskboard.config import DEFAULT_EXTRACTION, ExtractionConfig
from kioskboard.models import Snapshot
from kioskboard.scraper.heuristic import HeuristicTextParser
from kioskboard.scraper.source import PageSource, PageState
from kioskboard.scraper.structured import StructuredParser
from kioskboard.scraper.table import TableParser

logger = logging.getLogger(__name__)


def default_strategies(config: ExtractionConfig = DEFAULT_EXTRACTION) -> List:
    return [
        StructuredParser(config),
        TableParser(config),
        HeuristicTextParser(config),
    ]


class ExtractionChain:
    def __init__(self, strategies: Optional[Sequence] = None, config: ExtractionConfig = DEFAULT_EXTRACTION):
        self.config = config
        self.strategies = list(strategies) if strategies is not None else default_strategies(config)
        self.last_strategy: Optional[str] = None

    def extract(self, page_state: PageState) -> Snapshot:
        for strategy in self.strategies:
            snapshot = strategy.parse(page_state)
            if snapshot:
                self.last_strategy = strategy.name
                logger.debug(
                    "%s strategy produced %s board(s), %s row(s)",
                    strategy.name,
                    len(snapshot),
                    sum(len(board.rows) for board in snapshot),
                )
                return snapshot
            logger.debug("%s strategy found nothing, falling through", strategy.name)
        self.last_strategy = None
        return []

    def snapshot(self, page_source: PageSource) -> Snapshot:
        return self.extract(page_source.current_dom_state())
