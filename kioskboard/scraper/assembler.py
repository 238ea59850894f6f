# kioskboard/scraper/assembler.py
"""Group validated rows into game boards."""

from typing import Iterable, List, Optional

from kioskboard.models import GameBoard, LeaderboardRow, Snapshot


def assemble_board(
    title: Optional[str],
    art: Optional[str],
    rows: Iterable[LeaderboardRow],
) -> Optional[GameBoard]:
    """Sort rows by rank; boards without rows are dropped (None)."""
    ordered = sorted(rows, key=lambda row: row.rank)
    if not ordered:
        return None
    return GameBoard(title=(title or "").strip(), art=art or None, rows=ordered)


def assemble_snapshot(boards: Iterable[Optional[GameBoard]]) -> Snapshot:
    snapshot: List[GameBoard] = []
    for board in boards:
        if board is not None and board.rows:
            snapshot.append(board)
    return snapshot
