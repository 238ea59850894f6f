# kioskboard/scraper/structured.py
"""
Structured strategy: the kiosk's own component markup.

Each game is rendered as a block with a title header, optional artwork and a
list of score rows, each row holding rank/player/score elements and an avatar.
This is the most reliable strategy and runs first.
"""

from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import List, Optional
from urllib.parse import parse_qs, unquote, urlsplit

from kioskboard.config import DEFAULT_EXTRACTION, ExtractionConfig
from kioskboard.models import GameBoard, LeaderboardRow, Snapshot
from kioskboard.scraper.assembler import assemble_board, assemble_snapshot
from kioskboard.scraper.source import PageState
from kioskboard.scraper.validation import validate_row

logger = logging.getLogger(__name__)

_CSS_URL = re.compile(r"url\(\s*(['\"]?)(.*?)\1\s*\)", re.I)


def css_property(style: Optional[str], name: str) -> Optional[str]:
    """Read one declaration from an inline style attribute."""
    for declaration in (style or "").split(";"):
        key, sep, value = declaration.partition(":")
        if sep and key.strip().lower() == name:
            value = value.strip()
            return value or None
    return None


def parse_css_url(style: Optional[str]) -> Optional[str]:
    """'background-image: url("a.png")' -> 'a.png'."""
    background = css_property(style, "background-image") or css_property(style, "background")
    if not background:
        return None
    match = _CSS_URL.search(background)
    if not match:
        return None
    return match.group(2).strip() or None


def unwrap_image_proxy(src: Optional[str], config: ExtractionConfig = DEFAULT_EXTRACTION) -> Optional[str]:
    """
    Recover the source asset URL from an image-optimisation proxy URL.

    '/_next/image?url=https%3A%2F%2Fcdn.example%2Fa.png&w=64' -> 'https://cdn.example/a.png'
    Anything that is not a proxy URL is returned unchanged.
    """
    if not src:
        return None
    parts = urlsplit(src)
    if not any(parts.path.endswith(path) for path in config.image_proxy_paths):
        return src
    wrapped = parse_qs(parts.query).get(config.image_proxy_param)
    if not wrapped or not wrapped[0]:
        return src
    return unquote(wrapped[0])


def _image_ref(element, config: ExtractionConfig) -> Optional[str]:
    if element is None:
        return None
    from_style = parse_css_url(element.get("style"))
    if from_style:
        return unwrap_image_proxy(from_style, config)
    img = element if element.name == "img" else element.find("img")
    if img is not None and img.get("src"):
        return unwrap_image_proxy(img["src"].strip(), config)
    return None


def _text(element) -> str:
    if element is None:
        return ""
    return element.get_text(" ", strip=True)


class StructuredParser:
    name = "structured"

    def __init__(self, config: ExtractionConfig = DEFAULT_EXTRACTION):
        self.config = config

    def parse(self, page_state: PageState) -> Snapshot:
        containers = self._game_blocks(page_state)
        if not containers:
            return []
        boards: List[Optional[GameBoard]] = []
        for container in containers:
            title = _text(container.select_one(self.config.title_selector))
            art = _image_ref(container.select_one(self.config.art_selector), self.config)
            rows = self._parse_rows(container)
            board = assemble_board(title, art, rows)
            if board is None:
                logger.debug("Game block '%s' has no valid rows, dropping", title)
            boards.append(board)
        return assemble_snapshot(boards)

    def _game_blocks(self, page_state: PageState) -> list:
        """
        Innermost elements matching the game signature that hold score rows.

        The signature is a class substring, so wrappers such as
        'game-leaderboards' match too; a wrapper around several games would
        otherwise pool their rows under the first game's title.
        """
        candidates = [
            element
            for element in page_state.soup.select(self.config.game_selector)
            if element.select_one(self.config.row_selector) is not None
        ]
        outer = set()
        for element in candidates:
            outer.update(id(parent) for parent in element.parents)
        return [element for element in candidates if id(element) not in outer]

    def _parse_rows(self, container) -> List[LeaderboardRow]:
        rows: List[LeaderboardRow] = []
        for element in container.select(self.config.row_selector):
            row = validate_row(
                _text(element.select_one(self.config.rank_selector)),
                _text(element.select_one(self.config.player_selector)),
                _text(element.select_one(self.config.score_selector)),
                self.config,
            )
            if row is None:
                continue
            avatar = element.select_one(self.config.avatar_selector)
            if avatar is not None:
                row = replace(
                    row,
                    avatar_bg=css_property(avatar.get("style"), "background-color"),
                    avatar_img=_image_ref(avatar, self.config),
                )
            rows.append(row)
        return rows
