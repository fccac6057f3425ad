"""Top-level package for Money Lodge, a monthly budgeting form.

The primary modules are:

* ``models`` – month records and their line entries
* ``metrics`` – derived totals, ratios and chart buckets for a month
* ``storage`` – the JSON store holding every month
* ``ledger`` – add/update/delete operations on a month's entries
* ``visualization`` – functions that generate Plotly figures
* ``dashboard`` – a Streamlit app that ties everything together

To run the dashboard from the command line you can execute:

```bash
streamlit run money_lodge/dashboard.py
```
"""

from .ledger import BudgetLedger
from .metrics import MonthMetrics, calculate_month_metrics
from .models import MonthRecord, month_key
from .storage import MonthlyDataRepository

__all__ = [
    "BudgetLedger",
    "MonthMetrics",
    "MonthRecord",
    "MonthlyDataRepository",
    "calculate_month_metrics",
    "month_key",
]
