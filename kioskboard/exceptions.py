# kioskboard/exceptions.py
"""
Exceptions raised by the kiosk scraper.

Row-level rejections and empty strategies are not errors; only failures of the
page source itself surface here.
"""

from __future__ import annotations

from typing import List


class KioskScraperError(Exception):
    """Base class for fatal scraper failures."""


class KioskUnavailableError(KioskScraperError):
    """Raised when the kiosk page cannot be opened or navigated."""


class ReconcileAborted(KioskScraperError):
    """
    Raised when the page source fails in the middle of a reconciliation run.

    Carries whatever boards were accumulated before the failure so the caller
    can still flush them.
    """

    def __init__(self, message: str, partial: List = None):
        super().__init__(message)
        self.partial = list(partial or [])
