# kioskboard/scraper/table.py
"""
Generic table strategy.

Used when the kiosk's component markup is missing but some table-like
structure is rendered. Column roles are inferred from the cell count.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from kioskboard.config import DEFAULT_EXTRACTION, ExtractionConfig
from kioskboard.models import LeaderboardRow, Snapshot
from kioskboard.scraper.assembler import assemble_board, assemble_snapshot
from kioskboard.scraper.source import PageState
from kioskboard.scraper.validation import collapse_whitespace, validate_row

logger = logging.getLogger(__name__)


def split_lines(text: str) -> List[str]:
    return [line.strip() for line in (text or "").split("\n") if line.strip()]


def infer_columns(cells: List[str]) -> Optional[Tuple[str, str, str]]:
    """
    Map a row's non-empty cell texts to (rank, player, score).

    Cell texts keep their internal line breaks.

    - 3+ cells: first is rank, last is score, the middle ones form the player
    - 2 cells: the second cell is split on line breaks, last segment is score
    - 1 cell: split on line breaks, needs rank/player/score segments

    Returns:
        (rank_text, player_text, score_text), or None when the row cannot be split
    """
    if len(cells) >= 3:
        player = collapse_whitespace(" ".join(cells[1:-1]))
        return (cells[0], player, collapse_whitespace(cells[-1]))

    if len(cells) == 2:
        parts = split_lines(cells[1])
        player = " ".join(parts[:-1]) or cells[1]
        score = parts[-1] if parts else ""
        return (cells[0], player, score)

    if len(cells) == 1:
        parts = split_lines(cells[0])
        if len(parts) < 3:
            return None
        return (parts[0], " ".join(parts[1:-1]), parts[-1])

    return None


class TableParser:
    name = "table"

    def __init__(self, config: ExtractionConfig = DEFAULT_EXTRACTION):
        self.config = config

    def parse(self, page_state: PageState) -> Snapshot:
        data_rows = self._largest_table_rows(page_state)
        if not data_rows:
            return []

        rows: List[LeaderboardRow] = []
        for tr in data_rows:
            columns = infer_columns(self._cell_texts(tr))
            if columns is None:
                continue
            row = validate_row(*columns, config=self.config)
            if row is not None:
                rows.append(row)

        logger.debug("Table strategy kept %s of %s rows", len(rows), len(data_rows))
        return assemble_snapshot([assemble_board("", None, rows)])

    def _largest_table_rows(self, page_state: PageState) -> list:
        """Data rows of the table with the most rows; earliest table wins ties."""
        best: list = []
        for table in page_state.soup.select(", ".join(self.config.table_selectors)):
            data_rows = self._data_rows(table)
            if len(data_rows) > len(best):
                best = data_rows
        return best

    def _data_rows(self, table) -> list:
        if table.name == "table":
            rows = table.select("tbody tr")
            if rows:
                return rows
            return [tr for tr in table.select("tr") if tr.find("td")]
        return table.select(self.config.aria_row_selector)

    def _cell_texts(self, tr) -> List[str]:
        if tr.get("role") == "row":
            cells = tr.select(self.config.aria_cell_selector)
        else:
            cells = tr.find_all(["th", "td"])
        texts = [cell.get_text("\n", strip=True) for cell in cells]
        return [text for text in texts if text]
