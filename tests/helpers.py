# tests/helpers.py

import os
from typing import Dict, List

from kioskboard.models import GameBoard, LeaderboardRow

FIXTURES = os.path.join(os.path.dirname(__file__), 'fixtures')


def read_fixture(filename: str) -> str:
    with open(os.path.join(FIXTURES, filename), 'r', encoding='utf-8') as f:
        return f.read()


class FakeClock:
    """Clock that only moves when slept on."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_board(title: str, count: int, art: str = None, prefix: str = 'P') -> GameBoard:
    rows = [
        LeaderboardRow(rank=i, player=f'{prefix}{i}', score=1000 * (count - i + 1),
                       score_formatted=f'{1000 * (count - i + 1):,}')
        for i in range(1, count + 1)
    ]
    return GameBoard(title=title, art=art, rows=rows)


def structured_html(games: Dict[str, int], prefix: str = 'P') -> str:
    """Kiosk markup with one game block per title holding `count` valid rows."""
    blocks = []
    for title, count in games.items():
        rows = ''.join(
            f'<li class="score-row"><span class="rank">{i}</span>'
            f'<span class="player-name">{prefix}{i}</span>'
            f'<span class="score-value">{1000 * (count - i + 1):,}</span></li>'
            for i in range(1, count + 1)
        )
        blocks.append(
            f'<section class="game-leaderboard"><h2 class="game-title">{title}</h2>'
            f'<ul>{rows}</ul></section>'
        )
    return f"<html><body>{''.join(blocks)}</body></html>"
