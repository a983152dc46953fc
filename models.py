from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum as SAEnum,
    Index,
    Integer,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import Mapped, mapped_column

from database import Base


class TransactionType(str, Enum):
    income = "income"
    expense = "expense"


class CurrencyCode(str, Enum):
    pln = "PLN"
    eur = "EUR"
    usd = "USD"
    uah = "UAH"
    gbp = "GBP"


CURRENCY_SYMBOLS: dict[CurrencyCode, str] = {
    CurrencyCode.pln: "zł",
    CurrencyCode.eur: "€",
    CurrencyCode.usd: "$",
    CurrencyCode.uah: "₴",
    CurrencyCode.gbp: "£",
}

CURRENCY_CODE_ENUM = SAEnum(
    CurrencyCode,
    name="currencycode",
    values_callable=lambda enum_cls: [member.value for member in enum_cls],
)


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )


class Category(Base, TimestampMixin):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    type: Mapped[TransactionType] = mapped_column(
        SAEnum(TransactionType), nullable=False
    )
    # default department for transactions without their own override
    department_name: Mapped[Optional[str]] = mapped_column(String(100))


class Transaction(Base, TimestampMixin):
    __tablename__ = "transactions"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    type: Mapped[TransactionType] = mapped_column(
        SAEnum(TransactionType), nullable=False
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(14, 2), nullable=False)
    currency: Mapped[CurrencyCode] = mapped_column(
        CURRENCY_CODE_ENUM, nullable=False, default=CurrencyCode.pln
    )
    # no foreign key: deleting a category leaves the reference dangling
    category_id: Mapped[Optional[int]] = mapped_column(Integer)
    department_name: Mapped[Optional[str]] = mapped_column(String(100))
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text)

    # payout receipt payload
    issued_to: Mapped[Optional[str]] = mapped_column(String(200))
    decision_number: Mapped[Optional[str]] = mapped_column(String(100))
    cashier_name: Mapped[Optional[str]] = mapped_column(String(200))
    amount_in_words: Mapped[Optional[str]] = mapped_column(String(300))

    __table_args__ = (
        Index("ix_transactions_date", "date"),
        Index("ix_transactions_category", "category_id"),
        CheckConstraint("amount >= 0", name="ck_transactions_amount_positive"),
    )
