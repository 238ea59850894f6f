# kioskboard/targets.py
"""Turn a command-line target (suite id or kiosk URL) into (suite, url)."""

import re
from typing import Optional, Tuple
from urllib.parse import urlsplit

from kioskboard.config import KIOSK_BASE_URL

_SUITE_ID = re.compile(r"^[0-9a-fA-F-]{32,40}$")


def is_suite_id(value: str) -> bool:
    return bool(_SUITE_ID.match(value or ""))


def suite_to_url(suite: str) -> str:
    return KIOSK_BASE_URL.format(suite=suite)


def url_to_suite(url: str) -> Optional[str]:
    """Last non-empty path segment of a URL, or None."""
    try:
        parts = urlsplit(url)
    except ValueError:
        return None
    if not parts.scheme or not parts.netloc:
        return None
    segments = [segment for segment in parts.path.split("/") if segment]
    return segments[-1] if segments else None


def resolve_target(arg: str) -> Tuple[str, str]:
    arg = (arg or "").strip()
    if is_suite_id(arg):
        return arg, suite_to_url(arg)
    return url_to_suite(arg) or "unknown", arg
