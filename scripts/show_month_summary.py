#!/usr/bin/env python3
"""Print the derived metrics for a stored month."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from money_lodge.config import get_store_path
from money_lodge.formatting import format_currency, month_label
from money_lodge.ledger import BudgetLedger
from money_lodge.metrics import calculate_month_metrics
from money_lodge.models import parse_month_key
from money_lodge.storage import MonthlyDataRepository


def main(year: Optional[int], month: Optional[int], path: Optional[str] = None) -> int:
    store = Path(path or get_store_path())
    ledger = BudgetLedger(MonthlyDataRepository(store))

    if year is None or month is None:
        stored = sorted(ledger.months(), key=parse_month_key)
        if not stored:
            print(f"No months stored in {store}")
            return 0
        print(f"Stored months in {store}:")
        for key in stored:
            print(f"  - {key}: {month_label(*parse_month_key(key))}")
        return 0

    if not 0 <= month <= 11:
        print("Month must be a zero-based index between 0 and 11")
        return 1

    metrics = calculate_month_metrics(ledger.get_month(year, month))
    print(month_label(year, month))
    for name, value in metrics.as_dict().items():
        if isinstance(value, bool):
            print(f"  {name}: {value}")
        elif name.endswith(('_rate', '_ratio')) or name == 'savings_goal':
            print(f"  {name}: {value:.1f}%")
        else:
            print(f"  {name}: {format_currency(value)}")

    if metrics.debt_payoffs:
        print("\nDebts:")
        print(metrics.debt_payoff_frame().to_string(index=False))
    print("\nBudget:")
    print(metrics.budget_frame().to_string(index=False))
    return 0


if __name__ == '__main__':
    parser = argparse.ArgumentParser(description='Show derived metrics for a stored month.')
    parser.add_argument('--year', type=int, help='Calendar year, e.g. 2025')
    parser.add_argument('--month', type=int, help='Zero-based month index (0 = January)')
    parser.add_argument('--path', help='Path to the JSON store (defaults to config)')
    args = parser.parse_args()
    raise SystemExit(main(args.year, args.month, args.path))
