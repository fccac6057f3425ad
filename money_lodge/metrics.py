"""Derived financial metrics for a single month.

:func:`calculate_month_metrics` turns a :class:`~money_lodge.models.MonthRecord`
into totals, ratios and chart buckets.  It is a pure transform: the input
is never modified, nothing is cached, and no input makes it raise.  Every
numeric field goes through :func:`~money_lodge.models.coerce_float`, so a
blank or garbled amount simply counts as zero, and every ratio over
income is guarded to zero when there is no income.  A result that
overflows a float is reported as zero as well.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterable, Literal, Mapping, Tuple, Union

import pandas as pd

from .config import (
    BUDGET_WARNING_PERCENT,
    CHART_COLORS,
    EMERGENCY_FUND_MONTHS,
    FREEDOM_MULTIPLIER,
    SAVINGS_RATE_TARGET,
)
from .models import BudgetCategory, DebtEntry, MonthRecord, coerce_float


@dataclass(frozen=True)
class DebtPayoff:
    name: str
    balance: float
    interest_rate: float
    monthly_payment: float
    months_to_payoff: int


@dataclass(frozen=True)
class BudgetCategoryStatus:
    category: str
    planned: float
    actual: float
    difference: float
    percent_used: float
    status: Literal["under", "over"]
    usage_level: Literal["ok", "warning", "over"]


@dataclass(frozen=True)
class BudgetTotals:
    planned: float
    actual: float
    remaining: float


@dataclass(frozen=True)
class ChartSlice:
    name: str
    value: float
    color: str
    share: float


@dataclass(frozen=True)
class MonthMetrics:
    """Everything the overview, debt, budget and analytics views display."""

    total_income: float
    total_expenses: float
    total_debts: float
    total_bills: float
    monthly_debt_payments: float
    savings_goal: float
    savings_amount: float
    remaining_after_savings: float
    remaining_after_expenses: float
    remaining_after_bills: float
    remaining_after_debts: float
    net_cash_flow: float
    savings_rate: float
    expense_ratio: float
    debt_service_ratio: float
    savings_rate_on_track: bool
    emergency_fund_goal: float
    financial_freedom_number: float
    debt_payoffs: Tuple[DebtPayoff, ...]
    budget_statuses: Tuple[BudgetCategoryStatus, ...]
    budget_totals: BudgetTotals
    chart_slices: Tuple[ChartSlice, ...]

    def as_dict(self) -> Dict[str, float]:
        """Scalar metrics only, keyed by field name."""
        return {
            key: value
            for key, value in asdict(self).items()
            if isinstance(value, (int, float))
        }

    def debt_payoff_frame(self) -> pd.DataFrame:
        columns = ['name', 'balance', 'interest_rate', 'monthly_payment', 'months_to_payoff']
        return pd.DataFrame([asdict(row) for row in self.debt_payoffs], columns=columns)

    def budget_frame(self) -> pd.DataFrame:
        columns = [
            'category', 'planned', 'actual', 'difference', 'percent_used', 'status', 'usage_level',
        ]
        return pd.DataFrame([asdict(row) for row in self.budget_statuses], columns=columns)


def _finite(value: float) -> float:
    """Collapse an overflowed (infinite or NaN) result to zero."""
    return value if math.isfinite(value) else 0.0


def _total(entries: Iterable[Any], attribute: str) -> float:
    values = pd.Series([coerce_float(getattr(entry, attribute)) for entry in entries], dtype=float)
    return _finite(float(values.sum()))


def _percent_of(part: float, whole: float) -> float:
    # zero or negative income reports 0
    return _finite(part / whole * 100) if whole > 0 else 0.0


def months_to_payoff(balance: Any, monthly_payment: Any) -> int:
    """Whole months needed to clear ``balance`` at ``monthly_payment``.

    A zero or negative payment has no payoff horizon and reports ``0``,
    as does a quotient too large to represent.

    Example:
        >>> months_to_payoff(1000, 300)
        4
        >>> months_to_payoff(1000, 0)
        0
    """
    payment = coerce_float(monthly_payment)
    if payment <= 0:
        return 0
    months = coerce_float(balance) / payment
    if not math.isfinite(months):
        return 0
    return int(math.ceil(months))


def debt_payoff(debt: DebtEntry) -> DebtPayoff:
    return DebtPayoff(
        name=str(debt.name or ''),
        balance=coerce_float(debt.balance),
        interest_rate=coerce_float(debt.interest_rate),
        monthly_payment=coerce_float(debt.monthly_payment),
        months_to_payoff=months_to_payoff(debt.balance, debt.monthly_payment),
    )


def budget_category_status(category: BudgetCategory) -> BudgetCategoryStatus:
    """Compare planned against actual spending for one budget row.

    ``usage_level`` buckets ``percent_used``: up to 80% is ``ok``, up to
    100% is ``warning``, anything above is ``over``.
    """
    planned = coerce_float(category.planned)
    actual = coerce_float(category.actual)
    difference = _finite(planned - actual)
    percent_used = _finite(actual / planned * 100) if planned > 0 else 0.0
    if percent_used <= BUDGET_WARNING_PERCENT:
        usage_level = 'ok'
    elif percent_used <= 100:
        usage_level = 'warning'
    else:
        usage_level = 'over'
    return BudgetCategoryStatus(
        category=str(category.category),
        planned=planned,
        actual=actual,
        difference=difference,
        percent_used=percent_used,
        status='under' if difference >= 0 else 'over',
        usage_level=usage_level,
    )


def budget_totals(statuses: Iterable[BudgetCategoryStatus]) -> BudgetTotals:
    rows = list(statuses)
    planned = _finite(float(sum(row.planned for row in rows)))
    actual = _finite(float(sum(row.actual for row in rows)))
    return BudgetTotals(planned=planned, actual=actual, remaining=_finite(planned - actual))


def chart_slices(
    total_expenses: float,
    total_bills: float,
    monthly_debt_payments: float,
    net_cash_flow: float,
) -> Tuple[ChartSlice, ...]:
    """Income distribution buckets for the pie chart.

    Only strictly positive buckets are kept.  A negative cash flow shows
    no ``Remaining`` slice rather than a negative one.

    Example:
        >>> [(s.name, s.value) for s in chart_slices(500, 0, 0, 200)]
        [('Expenses', 500.0), ('Remaining', 200.0)]
    """
    values = {
        'Expenses': float(total_expenses),
        'Bills': float(total_bills),
        'Debt Payments': float(monthly_debt_payments),
        'Remaining': max(0.0, float(net_cash_flow)),
    }
    kept = {name: value for name, value in values.items() if value > 0}
    whole = sum(kept.values())
    return tuple(
        ChartSlice(name=name, value=value, color=CHART_COLORS[name], share=_finite(value / whole))
        for name, value in kept.items()
    )


def calculate_month_metrics(record: Union[MonthRecord, Mapping[str, Any], None]) -> MonthMetrics:
    """Derive every summary metric for one month.

    Args:
        record: A :class:`MonthRecord`, or a mapping in the persisted
            (camelCase) shape.  Anything else is treated as an empty month.

    Returns:
        Frozen :class:`MonthMetrics`.

    Example:
        >>> record = MonthRecord.from_dict({
        ...     'income': [{'amount': 5000}],
        ...     'expenses': [{'amount': 1200}],
        ...     'bills': [{'amount': 300}],
        ...     'debts': [{'balance': 2000, 'monthlyPayment': 200}],
        ...     'savingsGoal': 20,
        ... })
        >>> calculate_month_metrics(record).net_cash_flow
        3300.0
    """
    if not isinstance(record, MonthRecord):
        record = MonthRecord.from_dict(record if isinstance(record, Mapping) else {})

    total_income = _total(record.income, 'amount')
    total_expenses = _total(record.expenses, 'amount')
    total_debts = _total(record.debts, 'balance')
    total_bills = _total(record.bills, 'amount')
    monthly_debt_payments = _total(record.debts, 'monthly_payment')

    savings_goal = coerce_float(record.savings_goal)
    savings_amount = _finite(total_income * savings_goal / 100)
    remaining_after_expenses = _finite(total_income - total_expenses)
    remaining_after_bills = _finite(remaining_after_expenses - total_bills)
    net_cash_flow = _finite(total_income - total_expenses - total_bills - monthly_debt_payments)
    savings_rate = _percent_of(net_cash_flow, total_income)

    statuses = tuple(budget_category_status(cat) for cat in record.budget_categories)

    return MonthMetrics(
        total_income=total_income,
        total_expenses=total_expenses,
        total_debts=total_debts,
        total_bills=total_bills,
        monthly_debt_payments=monthly_debt_payments,
        savings_goal=savings_goal,
        savings_amount=savings_amount,
        remaining_after_savings=_finite(total_income - savings_amount),
        remaining_after_expenses=remaining_after_expenses,
        remaining_after_bills=remaining_after_bills,
        remaining_after_debts=_finite(remaining_after_bills - monthly_debt_payments),
        net_cash_flow=net_cash_flow,
        savings_rate=savings_rate,
        expense_ratio=_percent_of(total_expenses, total_income),
        debt_service_ratio=_percent_of(monthly_debt_payments, total_income),
        savings_rate_on_track=savings_rate >= SAVINGS_RATE_TARGET,
        emergency_fund_goal=_finite(total_expenses * EMERGENCY_FUND_MONTHS),
        financial_freedom_number=_finite(total_expenses * 12 * FREEDOM_MULTIPLIER),
        debt_payoffs=tuple(debt_payoff(debt) for debt in record.debts),
        budget_statuses=statuses,
        budget_totals=budget_totals(statuses),
        chart_slices=chart_slices(total_expenses, total_bills, monthly_debt_payments, net_cash_flow),
    )
