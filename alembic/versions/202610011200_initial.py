"""categories and transactions with department overrides

Revision ID: 202610011200
Revises:
Create Date: 2026-10-01 12:00:00.000000

"""

from alembic import op
import sqlalchemy as sa


revision = "202610011200"
down_revision = None
branch_labels = None
depends_on = None

CURRENCIES = ("PLN", "EUR", "USD", "UAH", "GBP")


def upgrade():
    op.create_table(
        "categories",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=100), nullable=False),
        sa.Column(
            "type", sa.Enum("income", "expense", name="transactiontype"), nullable=False
        ),
        sa.Column("department_name", sa.String(length=100)),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    )

    op.create_table(
        "transactions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column(
            "type", sa.Enum("income", "expense", name="transactiontype"), nullable=False
        ),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False),
        sa.Column(
            "currency", sa.Enum(*CURRENCIES, name="currencycode"), nullable=False
        ),
        sa.Column("category_id", sa.Integer()),
        sa.Column("department_name", sa.String(length=100)),
        sa.Column("date", sa.DateTime(), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("issued_to", sa.String(length=200)),
        sa.Column("decision_number", sa.String(length=100)),
        sa.Column("cashier_name", sa.String(length=200)),
        sa.Column("amount_in_words", sa.String(length=300)),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.CheckConstraint("amount >= 0", name="ck_transactions_amount_positive"),
    )
    op.create_index("ix_transactions_date", "transactions", ["date"])
    op.create_index("ix_transactions_category", "transactions", ["category_id"])


def downgrade():
    op.drop_index("ix_transactions_category", table_name="transactions")
    op.drop_index("ix_transactions_date", table_name="transactions")
    op.drop_table("transactions")
    op.drop_table("categories")
