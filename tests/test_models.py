from decimal import Decimal
from fractions import Fraction

import pytest

from money_lodge.models import (
    BillEntry,
    DebtEntry,
    IncomeEntry,
    MonthRecord,
    coerce_bool,
    coerce_float,
    month_key,
    parse_month_key,
)


def test_coerce_float_is_lenient():
    assert coerce_float(12) == 12.0
    assert coerce_float('12.5') == 12.5
    assert coerce_float('  7 ') == 7.0
    assert coerce_float('abc') == 0.0
    assert coerce_float('') == 0.0
    assert coerce_float(None) == 0.0
    assert coerce_float(True) == 0.0
    assert coerce_float([1, 2]) == 0.0
    assert coerce_float(float('inf')) == 0.0


def test_coerce_float_accepts_decimal_and_rejects_overflow():
    assert coerce_float(Decimal('12.50')) == 12.5
    assert coerce_float(Decimal('NaN')) == 0.0
    assert coerce_float(Fraction(1, 4)) == 0.25
    assert coerce_float(10 ** 400) == 0.0
    assert coerce_float('1' + '0' * 400) == 0.0
    assert coerce_float(complex(1, 2)) == 0.0


def test_coerce_bool_reads_form_text():
    assert coerce_bool('true') is True
    assert coerce_bool('false') is False
    assert coerce_bool('No') is False
    assert coerce_bool(None) is True
    assert coerce_bool(0) is False


def test_month_key_round_trip():
    assert month_key(2025, 9) == '2025-9'
    assert parse_month_key('2025-9') == (2025, 9)


@pytest.mark.parametrize('key', ['2025', '2025-12', 'abc-1', '2025--1'])
def test_parse_month_key_rejects_bad_keys(key):
    with pytest.raises(ValueError):
        parse_month_key(key)


def test_new_month_is_seeded_with_defaults():
    record = MonthRecord()

    assert record.income == ()
    assert record.savings_goal == 20
    assert [c.category for c in record.budget_categories] == [
        'Housing', 'Transportation', 'Food', 'Utilities', 'Entertainment', 'Savings', 'Other',
    ]
    assert all(c.planned == 0 and c.actual == 0 for c in record.budget_categories)


def test_entries_get_distinct_ids():
    first, second = IncomeEntry(), IncomeEntry()
    assert first.id and second.id
    assert first.id != second.id


def test_record_uses_persisted_field_names():
    record = MonthRecord(
        debts=(DebtEntry(name='Card', balance=100, interest_rate=19.9, monthly_payment=25, due_date='15th'),),
        bills=(BillEntry(name='Phone', amount=40, due_date='2025-10-01', recurring=False),),
        savings_goal=15,
    )
    data = record.to_dict()

    assert data['savingsGoal'] == 15
    assert data['debts'][0]['monthlyPayment'] == 25
    assert data['debts'][0]['interestRate'] == 19.9
    assert data['bills'][0]['dueDate'] == '2025-10-01'
    assert data['bills'][0]['recurring'] is False
    assert len(data['budgetCategories']) == 7
    assert MonthRecord.from_dict(data) == record


def test_from_dict_fills_gaps():
    record = MonthRecord.from_dict({
        'income': [{'source': 'Job', 'amount': '100'}, 'junk'],
        'bills': [{'name': 'Gym', 'recurring': 'false'}],
    })

    assert len(record.income) == 1
    assert record.income[0].amount == '100'
    assert record.income[0].id
    assert record.bills[0].recurring is False
    assert record.expenses == ()
    assert record.savings_goal == 20
    assert len(record.budget_categories) == 7


def test_resolve_field_accepts_both_spellings():
    assert DebtEntry.resolve_field('monthlyPayment') == 'monthly_payment'
    assert DebtEntry.resolve_field('monthly_payment') == 'monthly_payment'
    with pytest.raises(ValueError):
        DebtEntry.resolve_field('id')
    with pytest.raises(ValueError):
        IncomeEntry.resolve_field('nope')
