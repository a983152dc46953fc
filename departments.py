from typing import Callable, Iterable, Optional

from models import Transaction

DepartmentLookup = Callable[[Optional[int]], Optional[str]]


def effective_department(
    txn: Transaction, lookup: Optional[DepartmentLookup] = None
) -> Optional[str]:
    """Department that applies to ``txn``.

    A non-blank override on the transaction wins. Otherwise the category
    default from ``lookup`` is used, which may itself be missing.
    """
    override = txn.department_name
    if override and override.strip():
        return override
    if lookup is None:
        return None
    return lookup(txn.category_id)


def available_departments(
    transactions: Iterable[Transaction], lookup: Optional[DepartmentLookup] = None
) -> list[str]:
    names: set[str] = set()
    for txn in transactions:
        dept = effective_department(txn, lookup)
        if dept and dept.strip():
            names.add(dept.strip())
    return sorted(names)
