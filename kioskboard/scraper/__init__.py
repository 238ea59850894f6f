# kioskboard/scraper/__init__.py
"""
Extraction strategies and snapshot reconciliation for the kiosk page.

The browser session lives in kioskboard.scraper.session and is imported
separately so the parsers can be used on saved HTML without Playwright.
"""

from .validation import validate_row, only_digits, is_numericish
from .source import PageState, PageSource, StaticPageSource, SequencePageSource
from .structured import StructuredParser, parse_css_url, unwrap_image_proxy
from .table import TableParser
from .heuristic import HeuristicTextParser
from .assembler import assemble_board, assemble_snapshot
from .chain import ExtractionChain, default_strategies
from .reconciler import SnapshotReconciler, SystemClock, merge_snapshot

__all__ = [
    'validate_row',
    'only_digits',
    'is_numericish',
    'PageState',
    'PageSource',
    'StaticPageSource',
    'SequencePageSource',
    'StructuredParser',
    'parse_css_url',
    'unwrap_image_proxy',
    'TableParser',
    'HeuristicTextParser',
    'assemble_board',
    'assemble_snapshot',
    'ExtractionChain',
    'default_strategies',
    'SnapshotReconciler',
    'SystemClock',
    'merge_snapshot',
]
