# kioskboard/scraper/source.py
"""
Page sources the extraction core reads from.

The core never drives the browser directly: it asks a page source for the
currently rendered markup, for a bounded wait, and for an optional nudge.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol

from bs4 import BeautifulSoup

logger = logging.getLogger(__name__)


class PageState:
    """Rendered HTML captured at one instant, parsed on first use."""

    def __init__(self, html: str, url: str = ""):
        self.html = html or ""
        self.url = url
        self._soup: Optional[BeautifulSoup] = None

    @property
    def soup(self) -> BeautifulSoup:
        if self._soup is None:
            self._soup = BeautifulSoup(self.html, "html.parser")
        return self._soup


class PageSource(Protocol):
    def current_dom_state(self) -> PageState:
        ...

    def wait_for(self, signal: str, timeout_ms: int) -> bool:
        ...

    def request_nudge(self) -> None:
        ...


class StaticPageSource:
    """Serves the same HTML on every call (saved dumps, fixtures)."""

    def __init__(self, html: str, url: str = ""):
        self._state = PageState(html, url=url)

    def current_dom_state(self) -> PageState:
        return self._state

    def wait_for(self, signal: str, timeout_ms: int) -> bool:
        return bool(self._state.soup.select_one(signal))

    def request_nudge(self) -> None:
        return None


class SequencePageSource:
    """
    Serves a scripted sequence of HTML documents, one per snapshot.

    The last document is repeated once the sequence is exhausted.
    """

    def __init__(self, documents: Iterable[str], url: str = ""):
        self._states: List[PageState] = [PageState(doc, url=url) for doc in documents]
        if not self._states:
            raise ValueError("SequencePageSource needs at least one document")
        self._index = 0
        self.nudges = 0
        self.waits: List[str] = []

    def current_dom_state(self) -> PageState:
        state = self._states[min(self._index, len(self._states) - 1)]
        self._index += 1
        return state

    def wait_for(self, signal: str, timeout_ms: int) -> bool:
        self.waits.append(signal)
        return bool(self._states[0].soup.select_one(signal))

    def request_nudge(self) -> None:
        self.nudges += 1
