"""Plain records for a month of budgeting data.

Entries keep whatever the user typed into the form; numeric fields are
only coerced when metrics are derived (see :func:`coerce_float`).  Every
line entry carries a generated ``id`` so it can be addressed without
relying on its position in the list.

Records are frozen.  Mutations go through :mod:`money_lodge.ledger`,
which builds new records with :func:`dataclasses.replace`.
"""

from __future__ import annotations

import math
import numbers
import uuid
from dataclasses import dataclass, field, fields
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Mapping, Tuple, Type, TypeVar

import pandas as pd

from .config import DEFAULT_BUDGET_CATEGORIES, DEFAULT_SAVINGS_GOAL

E = TypeVar('E', bound='_Entry')


def new_entry_id() -> str:
    return uuid.uuid4().hex


def today_iso() -> str:
    return date.today().isoformat()


def coerce_float(value: Any) -> float:
    """Coerce form input to a float, falling back to ``0.0``.

    Strings are parsed with :func:`pandas.to_numeric`.  Any real number,
    :class:`~decimal.Decimal` included, is taken as is.  Anything that is
    missing, unparseable, NaN, infinite or too large for a float becomes
    zero.

    Example:
        >>> coerce_float('12.5')
        12.5
        >>> coerce_float('abc')
        0.0
        >>> coerce_float(None)
        0.0
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return 0.0
        value = pd.to_numeric(value, errors='coerce')
    elif not isinstance(value, (numbers.Real, Decimal)):
        return 0.0
    try:
        number = float(value)
    except (OverflowError, TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


def coerce_bool(value: Any, default: bool = True) -> bool:
    """Read a checkbox/select value that may have round-tripped as text."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {'true', 'yes', '1'}:
            return True
        if lowered in {'false', 'no', '0'}:
            return False
        return default
    if value is None:
        return default
    return bool(value)


def month_key(year: int, month: int) -> str:
    """Build the storage key for a (year, zero-based month) pair.

    Example:
        >>> month_key(2025, 9)
        '2025-9'
    """
    return f"{int(year)}-{int(month)}"


def parse_month_key(key: str) -> Tuple[int, int]:
    """Split a storage key back into ``(year, month)``.

    Raises:
        ValueError: If the key is not of the form ``"<year>-<month>"``
            with a month between 0 and 11.
    """
    year_text, sep, month_text = str(key).partition('-')
    if not sep:
        raise ValueError(f"Invalid month key: {key!r}")
    year, month = int(year_text), int(month_text)
    if not 0 <= month <= 11:
        raise ValueError(f"Month index out of range in key: {key!r}")
    return year, month


@dataclass(frozen=True)
class _Entry:
    """Base for line entries.

    ``_aliases`` maps persisted (camelCase) names to field names.
    """

    _aliases = {}  # type: Dict[str, str]

    @classmethod
    def field_names(cls) -> Tuple[str, ...]:
        return tuple(f.name for f in fields(cls) if f.name != 'id')

    @classmethod
    def resolve_field(cls, name: str) -> str:
        """Map a persisted or attribute field name to the attribute name.

        Raises:
            ValueError: If the name is not an editable field of the entry.
        """
        resolved = cls._aliases.get(name, name)
        if resolved not in cls.field_names():
            raise ValueError(f"{cls.__name__} has no field {name!r}")
        return resolved

    @classmethod
    def from_dict(cls: Type[E], data: Mapping[str, Any]) -> E:
        values: Dict[str, Any] = {}
        for key, value in data.items():
            name = cls._aliases.get(key, key)
            if name in cls.field_names():
                values[name] = value
        entry_id = data.get('id')
        values['id'] = str(entry_id) if entry_id else new_entry_id()
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        reverse = {attr: alias for alias, attr in self._aliases.items()}
        payload: Dict[str, Any] = {'id': self.id}
        for name in self.field_names():
            payload[reverse.get(name, name)] = getattr(self, name)
        return payload


@dataclass(frozen=True)
class IncomeEntry(_Entry):
    source: str = ''
    amount: Any = 0
    date: str = field(default_factory=today_iso)
    id: str = field(default_factory=new_entry_id)


@dataclass(frozen=True)
class ExpenseEntry(_Entry):
    description: str = ''
    category: str = ''
    amount: Any = 0
    date: str = field(default_factory=today_iso)
    id: str = field(default_factory=new_entry_id)


@dataclass(frozen=True)
class DebtEntry(_Entry):
    name: str = ''
    balance: Any = 0
    interest_rate: Any = 0
    monthly_payment: Any = 0
    due_date: str = ''
    id: str = field(default_factory=new_entry_id)

    _aliases = {
        'interestRate': 'interest_rate',
        'monthlyPayment': 'monthly_payment',
        'dueDate': 'due_date',
    }


@dataclass(frozen=True)
class BillEntry(_Entry):
    name: str = ''
    amount: Any = 0
    due_date: str = ''
    recurring: bool = True
    id: str = field(default_factory=new_entry_id)

    _aliases = {'dueDate': 'due_date'}

    def __post_init__(self):
        object.__setattr__(self, 'recurring', coerce_bool(self.recurring))


@dataclass(frozen=True)
class BudgetCategory:
    category: str
    planned: Any = 0
    actual: Any = 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BudgetCategory':
        return cls(
            category=str(data.get('category', '')),
            planned=data.get('planned', 0),
            actual=data.get('actual', 0),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {'category': self.category, 'planned': self.planned, 'actual': self.actual}


def default_budget_categories() -> Tuple[BudgetCategory, ...]:
    return tuple(BudgetCategory(category=name) for name in DEFAULT_BUDGET_CATEGORIES)


def _entries(cls: Type[E], items: Any) -> Tuple[E, ...]:
    if not isinstance(items, (list, tuple)):
        return ()
    return tuple(cls.from_dict(item) for item in items if isinstance(item, Mapping))


@dataclass(frozen=True)
class MonthRecord:
    """All line items and settings for one (year, month)."""

    income: Tuple[IncomeEntry, ...] = ()
    expenses: Tuple[ExpenseEntry, ...] = ()
    debts: Tuple[DebtEntry, ...] = ()
    bills: Tuple[BillEntry, ...] = ()
    budget_categories: Tuple[BudgetCategory, ...] = field(default_factory=default_budget_categories)
    savings_goal: Any = DEFAULT_SAVINGS_GOAL

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'MonthRecord':
        """Build a record from its persisted shape.

        Missing lists default to empty and missing budget categories to
        the seven defaults, mirroring a freshly seeded month.
        """
        categories = data.get('budgetCategories')
        if isinstance(categories, (list, tuple)):
            budget_categories = tuple(
                BudgetCategory.from_dict(item) for item in categories if isinstance(item, Mapping)
            )
        else:
            budget_categories = default_budget_categories()
        return cls(
            income=_entries(IncomeEntry, data.get('income')),
            expenses=_entries(ExpenseEntry, data.get('expenses')),
            debts=_entries(DebtEntry, data.get('debts')),
            bills=_entries(BillEntry, data.get('bills')),
            budget_categories=budget_categories,
            savings_goal=data.get('savingsGoal', DEFAULT_SAVINGS_GOAL),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            'income': [entry.to_dict() for entry in self.income],
            'expenses': [entry.to_dict() for entry in self.expenses],
            'debts': [entry.to_dict() for entry in self.debts],
            'bills': [entry.to_dict() for entry in self.bills],
            'budgetCategories': [cat.to_dict() for cat in self.budget_categories],
            'savingsGoal': self.savings_goal,
        }


# List attribute name -> entry class, for the ledger's generic mutators
ENTRY_TYPES: Dict[str, Type[_Entry]] = {
    'income': IncomeEntry,
    'expenses': ExpenseEntry,
    'debts': DebtEntry,
    'bills': BillEntry,
}
