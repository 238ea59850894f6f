# kioskboard/models.py
"""
Rows, boards and the final scrape result.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class LeaderboardRow:
    rank: int
    player: str
    score: int
    score_formatted: str
    avatar_bg: Optional[str] = None
    avatar_img: Optional[str] = None

    @property
    def dedup_key(self) -> Tuple[int, str, int]:
        return (self.rank, self.player, self.score)

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "rank": self.rank,
            "player": self.player,
            "score": self.score,
            "score_formatted": self.score_formatted,
        }
        if self.avatar_bg is not None or self.avatar_img is not None:
            out["avatar_bg"] = self.avatar_bg
            out["avatar_img"] = self.avatar_img
        return out


@dataclass
class GameBoard:
    """Ranked rows of one game at one point in observation."""

    title: str
    art: Optional[str] = None
    rows: List[LeaderboardRow] = field(default_factory=list)

    @property
    def key(self) -> Tuple[str, str]:
        """Case-insensitive (title, art) identity used when merging snapshots."""
        return (self.title.casefold(), (self.art or "").casefold())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "game": self.title,
            "art": self.art,
            "rows": [row.to_dict() for row in self.rows],
        }


Snapshot = List[GameBoard]


@dataclass
class ScrapeResult:
    suite: str
    target: str
    scraped_at: str
    games: List[GameBoard] = field(default_factory=list)

    @property
    def rows(self) -> List[LeaderboardRow]:
        return [row for game in self.games for row in game.rows]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "suite": self.suite,
            "target": self.target,
            "scraped_at": self.scraped_at,
            "games": [game.to_dict() for game in self.games],
            "rows": [row.to_dict() for row in self.rows],
        }
