# kioskboard/pipeline.py
"""One reconciliation run against a page source, packaged as a ScrapeResult."""

from __future__ import annotations

import threading
from typing import Optional

from kioskboard.config import DEFAULT_EXTRACTION, ExtractionConfig, ReconcileConfig
from kioskboard.export import build_result
from kioskboard.models import ScrapeResult
from kioskboard.scraper.chain import ExtractionChain
from kioskboard.scraper.reconciler import SnapshotReconciler
from kioskboard.scraper.source import PageSource


def scrape_kiosk(
    page_source: PageSource,
    suite: str,
    target: str,
    reconcile_config: Optional[ReconcileConfig] = None,
    extraction_config: ExtractionConfig = DEFAULT_EXTRACTION,
    clock=None,
    cancel: Optional[threading.Event] = None,
) -> ScrapeResult:
    """
    Reconcile the kiosk over the configured window and build the result.

    Raises:
        ReconcileAborted: If the page source fails mid-run (carries partial boards)
    """
    chain = ExtractionChain(config=extraction_config)
    reconciler = SnapshotReconciler(chain, reconcile_config or ReconcileConfig(), clock=clock)
    games = reconciler.reconcile(page_source, cancel=cancel)
    return build_result(suite, target, games)
