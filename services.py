from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from zoneinfo import ZoneInfo

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from analytics import (
    ALL_DEPARTMENTS,
    CurrencyTotals,
    aggregate_by_currency,
    filter_transactions,
)
from config import get_settings
from departments import available_departments, effective_department
from editor import DepartmentEditor
from models import Category, Transaction
from periods import TimeRange
from schemas import CategoryIn, TransactionIn

logger = logging.getLogger(__name__)


def current_time() -> datetime:
    """Wall clock in the configured timezone, as a naive local datetime."""
    tz = ZoneInfo(get_settings().timezone)
    return datetime.now(tz).replace(tzinfo=None)


def _clean_department(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return value.strip() or None


class CategoryService:
    def __init__(self, session: Session) -> None:
        self.session = session

    def list_all(self) -> list[Category]:
        stmt = select(Category).order_by(Category.type, Category.name)
        return self.session.scalars(stmt).all()

    def get(self, category_id: Optional[int]) -> Category:
        category = (
            self.session.get(Category, category_id)
            if category_id is not None
            else None
        )
        if not category:
            raise ValueError("Category not found")
        return category

    def create(self, data: CategoryIn) -> Category:
        existing = self.session.scalar(
            select(Category).where(
                Category.type == data.type,
                func.lower(Category.name) == data.name.strip().lower(),
            )
        )
        if existing:
            raise ValueError("Category with this name already exists")
        category = Category(
            name=data.name.strip(),
            type=data.type,
            department_name=_clean_department(data.department_name),
        )
        self.session.add(category)
        self.session.commit()
        self.session.refresh(category)
        return category

    def update(
        self,
        category_id: Optional[int],
        name: str,
        department_name: Optional[str] = None,
    ) -> Category:
        category = self.get(category_id)
        category.name = name.strip() or category.name
        category.department_name = _clean_department(department_name)
        self.session.commit()
        logger.info(
            f"category_update: id={category.id} department={category.department_name!r}"
        )
        return category

    def delete(self, category_id: int) -> None:
        category = self.get(category_id)
        self.session.delete(category)
        self.session.commit()
        logger.info(f"category_delete: id={category_id}")

    def department_for(self, category_id: Optional[int]) -> Optional[str]:
        if category_id is None:
            return None
        category = self.session.get(Category, category_id)
        return category.department_name if category else None

    def name_for(self, category_id: Optional[int]) -> str:
        if category_id is None:
            return ""
        category = self.session.get(Category, category_id)
        return category.name if category else ""


class TransactionService:
    EDITABLE_FIELDS = frozenset(
        {
            "type",
            "amount",
            "currency",
            "category_id",
            "department_name",
            "date",
            "description",
            "issued_to",
            "decision_number",
            "cashier_name",
            "amount_in_words",
        }
    )

    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, data: TransactionIn) -> Transaction:
        category = self.session.get(Category, data.category_id)
        if not category:
            raise ValueError("Category not found")
        if category.type != data.type:
            raise ValueError("Category type mismatch")
        txn = Transaction(
            type=data.type,
            amount=data.amount,
            currency=data.currency,
            category_id=data.category_id,
            department_name=_clean_department(data.department_name),
            date=data.date,
            description=data.description,
            issued_to=data.issued_to or None,
            decision_number=data.decision_number or None,
            cashier_name=data.cashier_name or None,
            amount_in_words=data.amount_in_words or None,
        )
        self.session.add(txn)
        self.session.commit()
        self.session.refresh(txn)
        return txn

    def get(self, transaction_id: int) -> Transaction:
        txn = self.session.get(Transaction, transaction_id)
        if not txn:
            raise ValueError("Transaction not found")
        return txn

    def list_all(self) -> list[Transaction]:
        stmt = select(Transaction).order_by(Transaction.id)
        return self.session.scalars(stmt).all()

    def update_fields(
        self, transaction_id: int, fields: dict[str, object]
    ) -> Transaction:
        unknown = set(fields) - self.EDITABLE_FIELDS
        if unknown:
            raise ValueError(f"Unknown transaction fields: {', '.join(sorted(unknown))}")
        txn = self.get(transaction_id)
        for name, value in fields.items():
            if name == "department_name":
                value = _clean_department(value)
            setattr(txn, name, value)
        self.session.commit()
        logger.info(f"transaction_update: id={txn.id} fields={sorted(fields)}")
        return txn

    def delete(self, transaction_id: int) -> None:
        txn = self.get(transaction_id)
        self.session.delete(txn)
        self.session.commit()
        logger.info(f"transaction_delete: id={transaction_id}")


@dataclass
class StatisticsResult:
    time_range: str
    department: str
    transactions: list[Transaction] = field(default_factory=list)
    totals: dict[str, CurrencyTotals] = field(default_factory=dict)
    departments: list[str] = field(default_factory=list)


class StatisticsService:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.categories = CategoryService(session)
        self.transactions = TransactionService(session)

    def statistics(
        self,
        time_range: TimeRange | str | None = TimeRange.all,
        department: Optional[str] = ALL_DEPARTMENTS,
        now: Optional[datetime] = None,
    ) -> StatisticsResult:
        now = now or current_time()
        all_txns = self.transactions.list_all()
        lookup = self.categories.department_for
        filtered = filter_transactions(all_txns, time_range, department, now, lookup)
        return StatisticsResult(
            time_range=getattr(time_range, "value", time_range) or TimeRange.all.value,
            department=department or ALL_DEPARTMENTS,
            transactions=filtered,
            totals=aggregate_by_currency(filtered),
            departments=available_departments(all_txns, lookup),
        )

    def department_of(self, txn: Transaction) -> Optional[str]:
        return effective_department(txn, self.categories.department_for)

    def department_editor(self) -> DepartmentEditor:
        return DepartmentEditor(
            update_transaction=self.transactions.update_fields,
            update_category=self.categories.update,
            category_name=self.categories.name_for,
        )
