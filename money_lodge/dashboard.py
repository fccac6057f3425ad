"""Streamlit app for Money Lodge.

Pick a month and year, fill in income, expenses, debts, bills and
category budgets, and the overview and analytics tabs show what is left
over.  Every edit is written straight to the JSON store through
:class:`~money_lodge.ledger.BudgetLedger`; every rerun recomputes the
metrics from the stored record.

To run the dashboard from the command line::

    streamlit run money_lodge/dashboard.py

or use ``run_dashboard.py`` at the project root.
"""

from __future__ import annotations

import os
import sys
import warnings
from datetime import date
from typing import Any, Dict, List, Sequence, Tuple

import pandas as pd
import streamlit as st

# Conditional imports to support execution both as part of a package
# and directly as a script via ``streamlit run money_lodge/dashboard.py``.
if __package__:
    from . import visualization as viz
    from .config import EXPENSE_CATEGORIES, MONTH_NAMES, SAVINGS_RATE_TARGET
    from .formatting import (
        amount_color,
        escape_dollar_for_markdown,
        format_currency,
        format_percent,
        month_label,
        usage_color,
    )
    from .ledger import BudgetLedger
    from .metrics import MonthMetrics, calculate_month_metrics
    from .models import MonthRecord, month_key
    from .storage import MonthlyDataRepository
else:
    CURRENT_DIR = os.path.dirname(os.path.abspath(__file__))
    PARENT_DIR = os.path.dirname(CURRENT_DIR)
    if PARENT_DIR not in sys.path:
        sys.path.insert(0, PARENT_DIR)
    from money_lodge import visualization as viz  # type: ignore
    from money_lodge.config import EXPENSE_CATEGORIES, MONTH_NAMES, SAVINGS_RATE_TARGET  # type: ignore
    from money_lodge.formatting import (  # type: ignore
        amount_color,
        escape_dollar_for_markdown,
        format_currency,
        format_percent,
        month_label,
        usage_color,
    )
    from money_lodge.ledger import BudgetLedger  # type: ignore
    from money_lodge.metrics import MonthMetrics, calculate_month_metrics  # type: ignore
    from money_lodge.models import MonthRecord, month_key  # type: ignore
    from money_lodge.storage import MonthlyDataRepository  # type: ignore


TABS = ['Overview', 'Income', 'Expenses', 'Debts', 'Bills', 'Budget', 'Analytics']

# (field, label, widget) per entry list
ENTRY_FIELDS: Dict[str, List[Tuple[str, str, str]]] = {
    'income': [
        ('source', 'Source', 'text'),
        ('amount', 'Amount', 'text'),
        ('date', 'Date', 'text'),
    ],
    'expenses': [
        ('description', 'Description', 'text'),
        ('category', 'Category', 'category'),
        ('amount', 'Amount', 'text'),
        ('date', 'Date', 'text'),
    ],
    'debts': [
        ('name', 'Debt Name', 'text'),
        ('balance', 'Balance', 'text'),
        ('interest_rate', 'Interest Rate (%)', 'text'),
        ('monthly_payment', 'Monthly Payment', 'text'),
        ('due_date', 'Due Date', 'text'),
    ],
    'bills': [
        ('name', 'Bill Name', 'text'),
        ('amount', 'Amount', 'text'),
        ('due_date', 'Due Date', 'text'),
        ('recurring', 'Recurring', 'bool'),
    ],
}


def get_ledger() -> BudgetLedger:
    """Ledger bound to the configured store, kept for the session."""
    if 'ledger' not in st.session_state:
        st.session_state.ledger = BudgetLedger(MonthlyDataRepository())
    return st.session_state.ledger


def load_month(ledger: BudgetLedger, year: int, month: int) -> MonthRecord:
    """Load the month, surfacing storage problems as Streamlit warnings."""
    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter('always')
        record = ledger.get_month(year, month)
    for item in caught:
        st.warning(f"⚠️ {item.message}")
    return record


def breakdown_rows(metrics: MonthMetrics) -> List[Tuple[str, str]]:
    """Rows of the overview's financial breakdown, already formatted."""
    return [
        ('Total Income', format_currency(metrics.total_income)),
        ('Expenses', format_currency(-metrics.total_expenses)),
        ('Bills', format_currency(-metrics.total_bills)),
        ('Debt Payments', format_currency(-metrics.monthly_debt_payments)),
        ('Remaining', format_currency(metrics.remaining_after_debts)),
    ]


def ratio_rows(metrics: MonthMetrics) -> List[Tuple[str, str, str]]:
    """Analytics tab cards: label, value, caption."""
    verdict = 'Excellent!' if metrics.savings_rate_on_track else f'Aim for {SAVINGS_RATE_TARGET:.0f}%+'
    return [
        ('Savings Rate', format_percent(metrics.savings_rate), verdict),
        ('Expense Ratio', format_percent(metrics.expense_ratio), 'Expenses as a share of income'),
        ('Debt Service Ratio', format_percent(metrics.debt_service_ratio), 'Debt payments as a share of income'),
        ('Emergency Fund Goal', format_currency(metrics.emergency_fund_goal), '6 months of expenses'),
        (
            'Financial Freedom Number',
            format_currency(metrics.financial_freedom_number),
            '25x annual expenses (4% rule)',
        ),
    ]


def savings_lines(metrics: MonthMetrics) -> List[str]:
    """Savings calculator text, with dollar signs escaped for markdown."""
    return [
        f"Recommended Savings ({metrics.savings_goal:g}%): "
        f"{escape_dollar_for_markdown(metrics.savings_amount)}",
        f"After Savings: {escape_dollar_for_markdown(metrics.remaining_after_savings)}",
        f"Debt-to-Income Ratio: {format_percent(metrics.debt_service_ratio)}",
    ]


def entries_frame(entries: Sequence[Any], kind: str) -> pd.DataFrame:
    """Tabular view of one entry list using the display labels."""
    spec = ENTRY_FIELDS[kind]
    return pd.DataFrame(
        [{label: getattr(entry, name) for name, label, _ in spec} for entry in entries],
        columns=[label for _, label, _ in spec],
    )


def widget_value(widget: str, raw: Any) -> Any:
    """Translate a widget's session value back into the stored value."""
    if widget == 'bool':
        return raw == 'Yes'
    return raw


def _on_entry_change(ledger, year, month, kind, entry_id, field, widget, key) -> None:
    ledger.update_entry(year, month, kind, entry_id, field, widget_value(widget, st.session_state[key]))


def _on_budget_change(ledger, year, month, category, field, key) -> None:
    ledger.update_budget_category(year, month, category, field, st.session_state[key])


def _on_savings_goal_change(ledger, year, month, key) -> None:
    ledger.set_savings_goal(year, month, st.session_state[key])


def render_month_selector() -> Tuple[int, int]:
    st.sidebar.header("Month")
    today = date.today()
    month = st.sidebar.selectbox(
        "Select Month",
        options=list(range(12)),
        index=today.month - 1,
        format_func=lambda i: MONTH_NAMES[i],
    )
    year = st.sidebar.number_input("Select Year", value=today.year, step=1, format="%d")
    return int(year), int(month)


def render_entry_list(ledger: BudgetLedger, record: MonthRecord, year: int, month: int, kind: str) -> None:
    spec = ENTRY_FIELDS[kind]
    entries = getattr(record, kind)
    prefix = f"{month_key(year, month)}_{kind}"
    if not entries:
        st.info("Nothing added yet.")
    for entry in entries:
        cols = st.columns(len(spec) + 1)
        for col, (field, label, widget) in zip(cols, spec):
            key = f"{prefix}_{entry.id}_{field}"
            callback_args = (ledger, year, month, kind, entry.id, field, widget, key)
            current = getattr(entry, field)
            with col:
                if widget == 'category':
                    options = [''] + EXPENSE_CATEGORIES
                    if current and current not in options:
                        options.append(current)
                    st.selectbox(
                        label, options, index=options.index(current or ''), key=key,
                        on_change=_on_entry_change, args=callback_args,
                    )
                elif widget == 'bool':
                    st.selectbox(
                        label, ['Yes', 'No'], index=0 if current else 1, key=key,
                        on_change=_on_entry_change, args=callback_args,
                    )
                else:
                    st.text_input(
                        label, value=str(current), key=key,
                        on_change=_on_entry_change, args=callback_args,
                    )
        with cols[-1]:
            if st.button("🗑️ Delete", key=f"{prefix}_{entry.id}_delete"):
                ledger.delete_entry(year, month, kind, entry.id)
                st.rerun()
    if st.button("➕ Add", key=f"{prefix}_add"):
        ledger.add_entry(year, month, kind)
        st.rerun()


def render_overview(ledger: BudgetLedger, metrics: MonthMetrics, year: int, month: int) -> None:
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Income", format_currency(metrics.total_income))
    col2.metric("Total Expenses", format_currency(metrics.total_expenses))
    col3.metric("Net Cash Flow", format_currency(metrics.net_cash_flow))
    col4.metric("Total Debts", format_currency(metrics.total_debts))

    left, right = st.columns(2)
    with left:
        st.subheader("Financial Breakdown")
        st.table(pd.DataFrame(breakdown_rows(metrics), columns=["Item", "Amount"]))
    with right:
        st.subheader("Savings Calculator")
        key = f"{month_key(year, month)}_savings_goal"
        st.number_input(
            "Savings Goal (% of Income)",
            min_value=0.0,
            max_value=100.0,
            value=min(max(metrics.savings_goal, 0.0), 100.0),
            key=key,
            on_change=_on_savings_goal_change,
            args=(ledger, year, month, key),
        )
        for line in savings_lines(metrics):
            st.write(line)


def render_debts(ledger: BudgetLedger, record: MonthRecord, metrics: MonthMetrics, year: int, month: int) -> None:
    render_entry_list(ledger, record, year, month, 'debts')
    if metrics.debt_payoffs:
        st.subheader("Months to Payoff")
        st.dataframe(metrics.debt_payoff_frame(), use_container_width=True)
    col1, col2 = st.columns(2)
    col1.metric("Total Debt", format_currency(metrics.total_debts))
    col2.metric("Monthly Payments", format_currency(metrics.monthly_debt_payments))


def render_budget(ledger: BudgetLedger, metrics: MonthMetrics, year: int, month: int) -> None:
    prefix = f"{month_key(year, month)}_budget"
    for status in metrics.budget_statuses:
        cols = st.columns(5)
        cols[0].write(f"**{status.category}**")
        for col, field in zip(cols[1:3], ('planned', 'actual')):
            key = f"{prefix}_{status.category}_{field}"
            col.number_input(
                field.title(),
                value=float(getattr(status, field)),
                key=key,
                on_change=_on_budget_change,
                args=(ledger, year, month, status.category, field, key),
            )
        cols[3].markdown(
            f"<span style='color:{amount_color(status.difference)}'>"
            f"{escape_dollar_for_markdown(abs(status.difference))} {status.status}</span>",
            unsafe_allow_html=True,
        )
        cols[4].markdown(
            f"<span style='color:{usage_color(status.usage_level)}'>{status.percent_used:.0f}%</span>",
            unsafe_allow_html=True,
        )
    totals = metrics.budget_totals
    col1, col2, col3 = st.columns(3)
    col1.metric("Total Planned", format_currency(totals.planned))
    col2.metric("Total Actual", format_currency(totals.actual))
    col3.metric("Remaining", format_currency(totals.remaining))
    st.plotly_chart(viz.create_budget_comparison_chart(metrics.budget_statuses), use_container_width=True)


def render_analytics(metrics: MonthMetrics) -> None:
    st.subheader("Financial Ratios & Metrics")
    rows = ratio_rows(metrics)
    for col, (label, value, caption) in zip(st.columns(len(rows)), rows):
        col.metric(label, value)
        col.caption(caption)
    st.markdown(
        f"Net cash flow: <span style='color:{amount_color(metrics.net_cash_flow)}'>"
        f"{escape_dollar_for_markdown(metrics.net_cash_flow)}</span>",
        unsafe_allow_html=True,
    )
    st.subheader("Income Distribution")
    st.plotly_chart(viz.create_income_distribution_chart(metrics.chart_slices), use_container_width=True)


def main() -> None:
    """Entry point for the Streamlit app."""
    st.set_page_config(page_title="Money Lodge", page_icon="💰", layout="wide")
    st.title("💰 Money Lodge")

    year, month = render_month_selector()
    st.header(month_label(year, month))

    ledger = get_ledger()
    record = load_month(ledger, year, month)
    metrics = calculate_month_metrics(record)

    tabs = dict(zip(TABS, st.tabs(TABS)))
    with tabs['Overview']:
        render_overview(ledger, metrics, year, month)
    with tabs['Income']:
        render_entry_list(ledger, record, year, month, 'income')
        st.metric("Total Income", format_currency(metrics.total_income))
    with tabs['Expenses']:
        render_entry_list(ledger, record, year, month, 'expenses')
        st.metric("Total Expenses", format_currency(metrics.total_expenses))
    with tabs['Debts']:
        render_debts(ledger, record, metrics, year, month)
    with tabs['Bills']:
        render_entry_list(ledger, record, year, month, 'bills')
        st.metric("Total Bills", format_currency(metrics.total_bills))
    with tabs['Budget']:
        render_budget(ledger, metrics, year, month)
    with tabs['Analytics']:
        render_analytics(metrics)


if __name__ == "__main__":  # pragma: no cover
    main()
