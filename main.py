import logging
from decimal import Decimal
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Request
from sqlalchemy.orm import Session

from analytics import ALL_DEPARTMENTS, CurrencyTotals
from config import get_settings
from database import SessionLocal
from departments import available_departments
from models import CURRENCY_SYMBOLS, Transaction
from periods import TimeRange
from schemas import DepartmentEditIn
from services import StatisticsService

logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Payout Ledger")


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def format_amount(value) -> str:
    return f"{Decimal(value):.2f}"


def time_range_from_request(request: Request) -> str:
    # unknown tokens are passed through and resolve to an unbounded range
    return request.query_params.get("range") or TimeRange.all.value


def department_from_request(request: Request) -> str:
    return request.query_params.get("department") or ALL_DEPARTMENTS


def transaction_payload(
    txn: Transaction, department: Optional[str]
) -> dict[str, object]:
    return {
        "id": txn.id,
        "date": txn.date.isoformat(),
        "type": txn.type.value,
        "amount": format_amount(txn.amount),
        "currency": txn.currency.value,
        "symbol": CURRENCY_SYMBOLS.get(txn.currency, ""),
        "category_id": txn.category_id,
        "department": department,
        "description": txn.description,
    }


def totals_payload(totals: dict[str, CurrencyTotals]) -> dict[str, dict[str, str]]:
    return {
        code: {
            "income": format_amount(bucket.income),
            "expense": format_amount(bucket.expense),
            "net": format_amount(bucket.net),
        }
        for code, bucket in totals.items()
    }


@app.get("/api/statistics")
def api_statistics(request: Request, db: Session = Depends(get_db)):
    service = StatisticsService(db)
    result = service.statistics(
        time_range_from_request(request), department_from_request(request)
    )
    return {
        "range": result.time_range,
        "department": result.department,
        "items": [
            transaction_payload(txn, service.department_of(txn))
            for txn in result.transactions
        ],
        "count": len(result.transactions),
        "totals": totals_payload(result.totals),
        "departments": result.departments,
    }


@app.get("/api/departments")
def api_departments(db: Session = Depends(get_db)):
    service = StatisticsService(db)
    return {
        "departments": available_departments(
            service.transactions.list_all(), service.categories.department_for
        )
    }


@app.post("/api/transactions/{transaction_id}/department")
def api_edit_department(
    transaction_id: int, data: DepartmentEditIn, db: Session = Depends(get_db)
):
    service = StatisticsService(db)
    try:
        txn = service.transactions.get(transaction_id)
    except ValueError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc

    # the cascade target must exist before the transaction write is committed
    if data.apply_to_category:
        try:
            service.categories.get(txn.category_id)
        except ValueError as exc:
            raise HTTPException(status_code=400, detail=str(exc)) from exc

    editor = service.department_editor()
    editor.start_edit(txn, service.department_of(txn))
    editor.update_draft(data.department_name)
    editor.toggle_apply_to_category(data.apply_to_category)
    try:
        editor.commit()
    except ValueError as exc:
        db.rollback()
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    logger.info(
        f"department_edit: transaction={transaction_id} cascade={data.apply_to_category}"
    )
    return {
        "id": txn.id,
        "department_name": txn.department_name,
        "department": service.department_of(txn),
    }
