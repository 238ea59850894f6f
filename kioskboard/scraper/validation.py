# kioskboard/scraper/validation.py
"""
Row validation shared by every extraction strategy.

Filters out ticker/promo junk that superficially looks like a leaderboard row
and normalises rank and score to integers.
"""

import re
from typing import Optional

from kioskboard.config import DEFAULT_EXTRACTION, ExtractionConfig
from kioskboard.models import LeaderboardRow

_NON_DIGITS = re.compile(r"[^\d]")
_WHITESPACE = re.compile(r"\s+")


def only_digits(text: Optional[str]) -> str:
    """Drop every non-digit character: '#1' -> '1', '1,234,567' -> '1234567'."""
    return _NON_DIGITS.sub("", text or "")


def collapse_whitespace(text: Optional[str]) -> str:
    return _WHITESPACE.sub(" ", text or "").strip()


def is_numericish(text: Optional[str], config: ExtractionConfig = DEFAULT_EXTRACTION) -> bool:
    """True for score-shaped text such as '1,234,567', '12 345' or 'Score: 900'."""
    return bool(config.numericish.match((text or "").strip()))


def validate_row(
    rank_text: Optional[str],
    player_text: Optional[str],
    score_text: Optional[str],
    config: ExtractionConfig = DEFAULT_EXTRACTION,
) -> Optional[LeaderboardRow]:
    """
    Turn a raw rank/player/score triplet into a LeaderboardRow.

    Rejection rules:
    1. Rank digits must form a positive integer
    2. Score text must be numeric-ish (optional prefix/suffix, digits and
       grouping separators in between)
    3. Player must be non-empty and must not contain a grouped numeral
       (a score or prize amount leaking into the name slot)

    Args:
        rank_text: Raw rank text, e.g. '#1' or '1'
        player_text: Raw player name
        score_text: Raw score as displayed, e.g. '1,234,567'
        config: Extraction patterns

    Returns:
        LeaderboardRow, or None when the triplet is rejected

    Examples:
        >>> validate_row('#1', 'Alice', '1,234,567').score
        1234567
        >>> validate_row('1', 'Cash Prize $1,000', '5,000') is None
        True
    """
    rank_digits = only_digits(rank_text)
    if not rank_digits:
        return None
    rank = int(rank_digits)
    if rank <= 0:
        return None

    score_formatted = (score_text or "").strip()
    if not score_formatted or not is_numericish(score_formatted, config):
        return None
    score = int(only_digits(score_formatted))

    player = collapse_whitespace(player_text)
    if not player:
        return None
    if config.grouped_digits.search(player):
        return None

    return LeaderboardRow(
        rank=rank,
        player=player,
        score=score,
        score_formatted=score_formatted,
    )
