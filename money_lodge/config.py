"""Configuration management for Money Lodge.

This module centralizes all configuration values including paths,
defaults, and environment variable overrides.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List

# Base project root - assumes this file is in money_lodge/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directories
DATA_DIR = Path(os.getenv("MONEY_LODGE_DATA_DIR", _PROJECT_ROOT / "data"))

# Single JSON blob holding every month record
STORE_PATH = Path(
    os.getenv("MONEY_LODGE_STORE_PATH", DATA_DIR / "money_lodge.json")
).resolve()

STORE_SCHEMA_VERSION = 1

MONTH_NAMES: List[str] = [
    'January', 'February', 'March', 'April', 'May', 'June',
    'July', 'August', 'September', 'October', 'November', 'December',
]

DEFAULT_BUDGET_CATEGORIES: List[str] = [
    'Housing',
    'Transportation',
    'Food',
    'Utilities',
    'Entertainment',
    'Savings',
    'Other',
]

# Choices offered for expense entries (free text is still accepted)
EXPENSE_CATEGORIES: List[str] = [
    'Housing',
    'Transportation',
    'Food',
    'Utilities',
    'Entertainment',
    'Healthcare',
    'Other',
]

DEFAULT_SAVINGS_GOAL = 20.0

# Pie chart buckets, in display order
CHART_COLORS: Dict[str, str] = {
    'Expenses': '#FFD700',
    'Bills': '#DAA520',
    'Debt Payments': '#B8860B',
    'Remaining': '#1a1a1a',
}

POSITIVE_COLOR = '#00FF00'
NEGATIVE_COLOR = '#FF0000'
WARNING_COLOR = '#FFA500'

SAVINGS_RATE_TARGET = 20.0
BUDGET_WARNING_PERCENT = 80.0
EMERGENCY_FUND_MONTHS = 6
FREEDOM_MULTIPLIER = 25


def get_store_path() -> str:
    """Get the store path as a string."""
    return str(STORE_PATH)
