"""Month-scoped editing of income, expenses, debts, bills and budgets.

:class:`BudgetLedger` is what the UI talks to when the user adds, edits
or removes a line.  Each mutation reads the whole collection from the
repository, replaces the record for the month being edited and writes
the whole collection back.  There is a single writer, so no locking is
done around that read-modify-write.

Entries are addressed by their ``id``; deleting one never shifts the
identity of the others.
"""

from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Tuple

from .models import (
    ENTRY_TYPES,
    BudgetCategory,
    MonthRecord,
    coerce_float,
    month_key,
)
from .storage import MonthlyDataRepository

BUDGET_FIELDS = ('planned', 'actual')


def _entry_class(kind: str):
    try:
        return ENTRY_TYPES[kind]
    except KeyError:
        raise ValueError(
            f"Unknown entry list {kind!r}; expected one of {sorted(ENTRY_TYPES)}"
        ) from None


def _find(entries: Tuple[Any, ...], entry_id: str) -> int:
    for position, entry in enumerate(entries):
        if entry.id == entry_id:
            return position
    raise KeyError(entry_id)


class BudgetLedger:
    """Reads and edits month records through a repository."""

    def __init__(self, repository: MonthlyDataRepository):
        self.repository = repository

    def get_month(self, year: int, month: int) -> MonthRecord:
        """Return the record for a month, or a freshly seeded one.

        An unseen month is not written until it is first edited.
        """
        return self.repository.load().get(month_key(year, month)) or MonthRecord()

    def _update_month(self, year: int, month: int, **changes: Any) -> MonthRecord:
        records = self.repository.load()
        key = month_key(year, month)
        updated = replace(records.get(key) or MonthRecord(), **changes)
        records[key] = updated
        self.repository.save(records)
        return updated

    def add_entry(self, year: int, month: int, kind: str, **values: Any):
        """Append a new entry to one of the month's lists.

        Args:
            kind: ``'income'``, ``'expenses'``, ``'debts'`` or ``'bills'``
            **values: Field values; omitted fields take the blank-form defaults

        Returns:
            The created entry, including its generated ``id``.
        """
        cls = _entry_class(kind)
        fields = {cls.resolve_field(name): value for name, value in values.items()}
        entry = cls(**fields)
        record = self.get_month(year, month)
        self._update_month(year, month, **{kind: getattr(record, kind) + (entry,)})
        return entry

    def update_entry(self, year: int, month: int, kind: str, entry_id: str, field: str, value: Any):
        """Set one field of an existing entry.

        Raises:
            KeyError: If no entry with ``entry_id`` exists in that list
            ValueError: If ``kind`` or ``field`` is unknown
        """
        cls = _entry_class(kind)
        name = cls.resolve_field(field)
        entries = getattr(self.get_month(year, month), kind)
        position = _find(entries, entry_id)
        entry = replace(entries[position], **{name: value})
        self._update_month(
            year, month, **{kind: entries[:position] + (entry,) + entries[position + 1:]}
        )
        return entry

    def delete_entry(self, year: int, month: int, kind: str, entry_id: str) -> None:
        """Remove an entry by id.

        Raises:
            KeyError: If no entry with ``entry_id`` exists in that list
        """
        _entry_class(kind)
        entries = getattr(self.get_month(year, month), kind)
        position = _find(entries, entry_id)
        self._update_month(year, month, **{kind: entries[:position] + entries[position + 1:]})

    def update_budget_category(
        self, year: int, month: int, category: str, field: str, value: Any
    ) -> BudgetCategory:
        """Set the planned or actual amount of a budget category.

        Values are stored as numbers; unparseable input is stored as 0.

        Raises:
            KeyError: If the month has no category with that label
            ValueError: If ``field`` is not ``'planned'`` or ``'actual'``
        """
        if field not in BUDGET_FIELDS:
            raise ValueError(f"Budget field must be one of {BUDGET_FIELDS}, got {field!r}")
        categories = self.get_month(year, month).budget_categories
        updated = None
        rows = []
        for row in categories:
            if row.category == category and updated is None:
                updated = replace(row, **{field: coerce_float(value)})
                row = updated
            rows.append(row)
        if updated is None:
            raise KeyError(category)
        self._update_month(year, month, budget_categories=tuple(rows))
        return updated

    def set_savings_goal(self, year: int, month: int, value: Any) -> float:
        goal = coerce_float(value)
        self._update_month(year, month, savings_goal=goal)
        return goal

    def months(self) -> Dict[str, MonthRecord]:
        """Every stored month, keyed by month key."""
        return self.repository.load()
