#!/usr/bin/env python3
# scripts/scrape_kiosk.py
"""
CLI script for scraping a kiosk leaderboard without installing the package.

Usage:
    python scripts/scrape_kiosk.py <SUITE_ID or FULL_URL>
    python scripts/scrape_kiosk.py <SUITE_ID> --duration 30 --headed
"""

import sys
import os

# Add project root to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from kioskboard.cli import run


if __name__ == '__main__':
    run()
