# kioskboard/scraper/heuristic.py
"""
Last-resort strategy: infer rows from visible text alone.

Every visible element is treated as a candidate row. Its text is split into
lines; a pure-digit line is the rank, the last score-shaped line is the score,
and the player sits between them. Elements wrapping rows that were already
found are skipped, and results are deduplicated on (rank, player, score).
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Set, Tuple

from bs4 import NavigableString, Tag
from bs4.element import PreformattedString

from kioskboard.config import DEFAULT_EXTRACTION, HIDDEN_MARKER_ATTR, ExtractionConfig
from kioskboard.models import LeaderboardRow, Snapshot
from kioskboard.scraper.assembler import assemble_board, assemble_snapshot
from kioskboard.scraper.source import PageState
from kioskboard.scraper.structured import css_property
from kioskboard.scraper.validation import validate_row

logger = logging.getLogger(__name__)

_ZERO = re.compile(r"^0*(\.0*)?$")


def is_hidden(element: Tag, marker: str = HIDDEN_MARKER_ATTR) -> bool:
    """
    True when the element itself is not rendered (ancestors are not checked).

    Inline styles are read directly. Stylesheet rules are only visible through
    the marker attribute the live page source stamps on computed-hidden nodes.
    """
    if element.has_attr("hidden") or (marker and element.has_attr(marker)):
        return True
    if (element.get("aria-hidden") or "").strip().lower() == "true":
        return True
    style = element.get("style")
    if not style:
        return False
    display = (css_property(style, "display") or "").lower()
    visibility = (css_property(style, "visibility") or "").lower()
    opacity = (css_property(style, "opacity") or "").strip()
    return (
        display.startswith("none")
        or visibility.startswith(("hidden", "collapse"))
        or bool(opacity and _ZERO.match(opacity))
    )


class HeuristicTextParser:
    name = "heuristic"

    def __init__(self, config: ExtractionConfig = DEFAULT_EXTRACTION):
        self.config = config

    def parse(self, page_state: PageState) -> Snapshot:
        soup = page_state.soup
        root = soup.body or soup

        rows: List[LeaderboardRow] = []
        self._walk(root, set(self.config.skipped_tags), rows, set())

        logger.debug("Heuristic strategy found %s unique rows", len(rows))
        return assemble_snapshot([assemble_board("", None, rows)])

    def looks_like_score(self, line: str) -> bool:
        """Comma-grouped numeral, or an unbroken run of long_digit_run+ digits."""
        if self.config.comma_grouped.search(line):
            return True
        return bool(re.search(r"\d{%d,}" % self.config.long_digit_run, line))

    def _row_from_lines(self, lines: List[str]) -> Optional[LeaderboardRow]:
        if len(lines) < 2:
            return None

        rank_line = self.config.rank_line
        rank_idx = next((i for i, line in enumerate(lines) if rank_line.match(line)), None)
        score_idx = next(
            (i for i in range(len(lines) - 1, -1, -1) if self.looks_like_score(lines[i])),
            None,
        )
        if rank_idx is None or score_idx is None or rank_idx == score_idx:
            return None

        if score_idx - rank_idx >= 2:
            player = " ".join(lines[rank_idx + 1:score_idx])
        else:
            player = next(
                (
                    line
                    for i, line in enumerate(lines)
                    if i not in (rank_idx, score_idx) and not rank_line.match(line)
                ),
                "",
            )
        if not player:
            return None

        return validate_row(lines[rank_idx], player, lines[score_idx], self.config)

    def _walk(
        self,
        element: Tag,
        skipped: Set[str],
        rows: List[LeaderboardRow],
        seen: Set[Tuple[int, str, int]],
    ) -> Tuple[List[str], bool]:
        """
        Collect the visible text lines under element, in document order.

        Each text node counts as one line, which is how the kiosk lays out its
        rank/name/score cells. An element whose descendants already yielded a
        row is a container of rows, not a row, and is not parsed itself.

        Returns:
            (lines, True when a row was found at or below element)
        """
        if element.name in skipped or is_hidden(element, self.config.hidden_marker):
            return [], False

        lines: List[str] = []
        found = False
        for child in element.children:
            if isinstance(child, Tag):
                child_lines, child_found = self._walk(child, skipped, rows, seen)
                lines.extend(child_lines)
                found = found or child_found
            elif isinstance(child, NavigableString) and not isinstance(child, PreformattedString):
                lines.extend(part.strip() for part in child.split("\n") if part.strip())
        if found:
            return lines, True

        row = self._row_from_lines(lines)
        if row is None:
            return lines, False
        if row.dedup_key not in seen:
            seen.add(row.dedup_key)
            rows.append(row)
        return lines, True
