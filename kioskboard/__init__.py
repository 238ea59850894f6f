"""
Kiosk leaderboard scraper.

Extracts rank/player/score rows per game from a rotating kiosk display and
reconciles repeated observations into one board per game.
"""

__version__ = "0.1.0"
