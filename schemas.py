from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from models import CurrencyCode, TransactionType


class CategoryIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    type: TransactionType
    department_name: Optional[str] = Field(default=None, max_length=100)


class TransactionIn(BaseModel):
    date: datetime
    type: TransactionType
    amount: Decimal = Field(..., ge=0, max_digits=14, decimal_places=2)
    currency: CurrencyCode = CurrencyCode.pln
    category_id: int
    description: Optional[str] = Field(default=None, max_length=500)
    department_name: Optional[str] = Field(default=None, max_length=100)
    issued_to: Optional[str] = Field(default=None, max_length=200)
    decision_number: Optional[str] = Field(default=None, max_length=100)
    cashier_name: Optional[str] = Field(default=None, max_length=200)
    amount_in_words: Optional[str] = Field(default=None, max_length=300)


class DepartmentEditIn(BaseModel):
    department_name: str = Field(default="", max_length=100)
    apply_to_category: bool = False
