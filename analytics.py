from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional, Union

from departments import DepartmentLookup, effective_department
from models import Transaction, TransactionType
from periods import TimeRange, as_datetime, resolve_time_range

ALL_DEPARTMENTS = "all"

Amount = Union[int, float, Decimal]


@dataclass
class CurrencyTotals:
    # int zero adopts the numeric type of the first amount added
    income: Amount = 0
    expense: Amount = 0

    @property
    def net(self) -> Amount:
        return self.income - self.expense


def filter_transactions(
    transactions: Iterable[Transaction],
    time_range: Union[TimeRange, str, None],
    department: Optional[str],
    now: datetime,
    lookup: Optional[DepartmentLookup] = None,
) -> list[Transaction]:
    """Restrict ``transactions`` to a time range and department, newest first.

    The input is left untouched. Ties on date keep their input order. A
    transaction without a department never matches a specific department.
    """
    period = resolve_time_range(time_range, now)

    result = list(transactions)
    if period is not None:
        result = [txn for txn in result if period.contains(txn.date)]

    result.sort(key=lambda txn: as_datetime(txn.date, now.tzinfo), reverse=True)

    if department and department != ALL_DEPARTMENTS:
        result = [
            txn
            for txn in result
            if effective_department(txn, lookup) == department
        ]
    return result


def aggregate_by_currency(
    transactions: Iterable[Transaction],
) -> dict[str, CurrencyTotals]:
    totals: dict[str, CurrencyTotals] = {}
    for txn in transactions:
        code = getattr(txn.currency, "value", txn.currency)
        bucket = totals.get(code)
        if bucket is None:
            bucket = totals[code] = CurrencyTotals()
        if txn.type == TransactionType.income:
            bucket.income += txn.amount
        else:
            bucket.expense += txn.amount
    return totals
