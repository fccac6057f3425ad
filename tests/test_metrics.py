import math
from decimal import Decimal

import pytest

from money_lodge.metrics import (
    calculate_month_metrics,
    chart_slices,
    months_to_payoff,
)
from money_lodge.models import (
    BillEntry,
    BudgetCategory,
    DebtEntry,
    ExpenseEntry,
    IncomeEntry,
    MonthRecord,
)


def _sample_record(**overrides):
    values = dict(
        income=(IncomeEntry(source='Salary', amount=5000),),
        expenses=(ExpenseEntry(description='Groceries', category='Food', amount=1200),),
        bills=(BillEntry(name='Internet', amount=300),),
        debts=(DebtEntry(name='Card', balance=2000, monthly_payment=200),),
        savings_goal=20,
    )
    values.update(overrides)
    return MonthRecord(**values)


def test_empty_month_is_all_zero():
    metrics = calculate_month_metrics(MonthRecord())

    for name in (
        'total_income', 'total_expenses', 'total_debts', 'total_bills',
        'monthly_debt_payments', 'savings_amount', 'net_cash_flow',
        'savings_rate', 'expense_ratio', 'debt_service_ratio',
        'emergency_fund_goal', 'financial_freedom_number',
    ):
        assert getattr(metrics, name) == 0, name
    assert metrics.chart_slices == ()
    assert metrics.debt_payoffs == ()
    assert len(metrics.budget_statuses) == 7


def test_end_to_end_example():
    metrics = calculate_month_metrics(_sample_record())

    assert metrics.total_income == 5000
    assert metrics.total_expenses == 1200
    assert metrics.total_bills == 300
    assert metrics.total_debts == 2000
    assert metrics.monthly_debt_payments == 200
    assert metrics.net_cash_flow == 3300
    assert metrics.savings_amount == 1000
    assert metrics.remaining_after_savings == 4000
    assert metrics.remaining_after_expenses == 3800
    assert metrics.remaining_after_bills == 3500
    assert metrics.remaining_after_debts == 3300
    assert metrics.savings_rate == pytest.approx(66.0)
    assert metrics.expense_ratio == pytest.approx(24.0)
    assert metrics.debt_service_ratio == pytest.approx(4.0)
    assert metrics.savings_rate_on_track
    assert metrics.emergency_fund_goal == 7200
    assert metrics.financial_freedom_number == 360000


def test_accepts_persisted_mapping():
    metrics = calculate_month_metrics({
        'income': [{'amount': 5000}],
        'expenses': [{'amount': 1200}],
        'bills': [{'amount': 300}],
        'debts': [{'balance': 2000, 'monthlyPayment': 200}],
        'savingsGoal': 20,
    })

    assert metrics.net_cash_flow == 3300
    assert metrics.savings_amount == 1000


def test_garbage_input_is_treated_as_empty():
    assert calculate_month_metrics(None).net_cash_flow == 0
    assert calculate_month_metrics('not a record').total_income == 0
    assert calculate_month_metrics({'income': 'oops', 'debts': [1, 2]}).total_income == 0


def test_non_numeric_amounts_count_as_zero():
    record = MonthRecord(
        income=(IncomeEntry(amount='abc'), IncomeEntry(amount=' 250.5 '), IncomeEntry(amount=None)),
        expenses=(ExpenseEntry(amount=''), ExpenseEntry(amount=float('nan'))),
        debts=(DebtEntry(balance='lots', monthly_payment='x'),),
        savings_goal='twenty',
    )
    metrics = calculate_month_metrics(record)

    assert metrics.total_income == 250.5
    assert metrics.total_expenses == 0
    assert metrics.total_debts == 0
    assert metrics.savings_amount == 0
    assert metrics.debt_payoffs[0].months_to_payoff == 0


def test_decimal_and_huge_amounts():
    record = MonthRecord(
        income=(IncomeEntry(amount=Decimal('5000.25')), IncomeEntry(amount=10 ** 400)),
        expenses=(ExpenseEntry(amount=Decimal('1000')),),
    )
    metrics = calculate_month_metrics(record)

    assert metrics.total_income == 5000.25
    assert metrics.total_expenses == 1000
    assert metrics.net_cash_flow == 4000.25


def test_overflowing_values_report_zero():
    record = MonthRecord(
        income=(IncomeEntry(amount=1e308), IncomeEntry(amount=1e308)),
        expenses=(ExpenseEntry(amount=1e308),),
        debts=(DebtEntry(balance=1e308, monthly_payment=1e-10),),
        budget_categories=(BudgetCategory(category='Housing', planned=1e-10, actual=1e308),),
    )
    metrics = calculate_month_metrics(record)

    assert metrics.total_income == 0
    assert metrics.debt_payoffs[0].months_to_payoff == 0
    assert metrics.budget_statuses[0].percent_used == 0
    assert metrics.emergency_fund_goal == 0
    for value in metrics.as_dict().values():
        assert math.isfinite(value)
    for piece in metrics.chart_slices:
        assert math.isfinite(piece.share)


def test_ratios_are_zero_for_negative_income():
    metrics = calculate_month_metrics(_sample_record(income=(IncomeEntry(amount=-1000),)))

    assert metrics.total_income == -1000
    assert metrics.savings_rate == 0
    assert metrics.expense_ratio == 0
    assert metrics.debt_service_ratio == 0
    assert not metrics.savings_rate_on_track


def test_remaining_chain_matches_net_cash_flow_when_negative():
    record = _sample_record(
        expenses=(ExpenseEntry(amount=4000),),
        bills=(BillEntry(amount=900),),
    )
    metrics = calculate_month_metrics(record)

    assert metrics.net_cash_flow == 5000 - 4000 - 900 - 200
    assert metrics.net_cash_flow < 0
    assert metrics.remaining_after_debts == metrics.net_cash_flow
    assert not metrics.savings_rate_on_track
    assert [s.name for s in metrics.chart_slices] == ['Expenses', 'Bills', 'Debt Payments']


@pytest.mark.parametrize('field, kind, entry', [
    ('expenses', ExpenseEntry, 'amount'),
    ('bills', BillEntry, 'amount'),
    ('debts', DebtEntry, 'monthly_payment'),
])
def test_raising_an_outflow_lowers_net_cash_flow(field, kind, entry):
    base = calculate_month_metrics(_sample_record())
    bumped = _sample_record(**{field: (kind(**{entry: 10_000}),)})

    assert calculate_month_metrics(bumped).net_cash_flow < base.net_cash_flow


def test_months_to_payoff():
    assert months_to_payoff(1000, 300) == 4
    assert months_to_payoff(1000, 0) == 0
    assert months_to_payoff(900, 300) == 3
    assert months_to_payoff('1000', '250') == 4


def test_debt_payoff_rows_follow_debt_order():
    record = MonthRecord(debts=(
        DebtEntry(name='Car', balance=1000, monthly_payment=300, interest_rate='4.5'),
        DebtEntry(name='Loan', balance=500, monthly_payment=0),
    ))
    payoffs = calculate_month_metrics(record).debt_payoffs

    assert [(p.name, p.months_to_payoff) for p in payoffs] == [('Car', 4), ('Loan', 0)]
    assert payoffs[0].interest_rate == 4.5


def test_chart_buckets_keep_only_positive_values():
    slices = chart_slices(500, 0, 0, 200)

    assert [(s.name, s.value) for s in slices] == [('Expenses', 500.0), ('Remaining', 200.0)]
    assert [s.color for s in slices] == ['#FFD700', '#1a1a1a']
    assert math.isclose(sum(s.share for s in slices), 1.0)


def test_chart_buckets_drop_negative_remaining():
    slices = chart_slices(100, 50, 25, -10)
    assert 'Remaining' not in [s.name for s in slices]


def test_budget_category_status():
    record = MonthRecord(budget_categories=(
        BudgetCategory('Housing', planned=1000, actual=500),
        BudgetCategory('Food', planned=400, actual=360),
        BudgetCategory('Fun', planned=100, actual=150),
        BudgetCategory('Other', planned=0, actual=25),
    ))
    metrics = calculate_month_metrics(record)
    statuses = {s.category: s for s in metrics.budget_statuses}

    assert statuses['Housing'].difference == 500
    assert statuses['Housing'].percent_used == 50
    assert statuses['Housing'].usage_level == 'ok'
    assert statuses['Food'].usage_level == 'warning'
    assert statuses['Fun'].status == 'over'
    assert statuses['Fun'].usage_level == 'over'
    assert statuses['Other'].percent_used == 0
    assert metrics.budget_totals.planned == 1500
    assert metrics.budget_totals.actual == 1035
    assert metrics.budget_totals.remaining == 465


def test_calculator_is_idempotent_and_does_not_mutate():
    record = _sample_record()
    snapshot = record.to_dict()

    first = calculate_month_metrics(record)
    second = calculate_month_metrics(record)

    assert first == second
    assert record.to_dict() == snapshot


def test_frames_and_summary():
    metrics = calculate_month_metrics(_sample_record())

    summary = metrics.as_dict()
    assert summary['net_cash_flow'] == 3300
    assert 'debt_payoffs' not in summary

    debts = metrics.debt_payoff_frame()
    assert list(debts['months_to_payoff']) == [10]
    assert len(metrics.budget_frame()) == 7
