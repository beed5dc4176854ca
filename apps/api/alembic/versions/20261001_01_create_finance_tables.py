"""create venue finance tables

Revision ID: 20261001_01_finance
Revises:
Create Date: 2026-10-01
"""
from __future__ import annotations

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = "20261001_01_finance"
down_revision = None
branch_labels = None
depends_on = None


def _uuid() -> postgresql.UUID:
    return postgresql.UUID(as_uuid=True)


def _money(name: str) -> sa.Column:
    return sa.Column(name, sa.Numeric(14, 2), nullable=False, server_default="0")


def _created_at() -> sa.Column:
    return sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()"))


def _updated_at() -> sa.Column:
    return sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()"))


def upgrade() -> None:
    op.create_table(
        "companies",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("business_hours_start", sa.String(length=5), nullable=True),
        sa.Column("business_hours_end", sa.String(length=5), nullable=True),
        sa.Column("timezone", sa.String(length=64), nullable=True),
        sa.Column("operating_days", sa.Text(), nullable=True),
        sa.Column("individual_day_hours", sa.Text(), nullable=True),
        sa.Column("use_individual_hours", sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        _updated_at(),
    )
    op.create_index("ix_companies_created_at", "companies", ["created_at"])

    op.create_table(
        "users",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=255), nullable=False, unique=True),
        sa.Column("is_active", sa.Boolean(), nullable=True, server_default=sa.true()),
        sa.Column("company_id", _uuid(), nullable=True),
        sa.Column("role", sa.String(length=32), nullable=False, server_default="ADMIN"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=True, server_default=sa.text("NOW()")),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_users_company_id", "users", ["company_id"])

    op.create_table(
        "table_sessions",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("company_id", _uuid(), nullable=False),
        sa.Column("table_id", _uuid(), nullable=True),
        sa.Column("status", sa.String(length=16), nullable=False, server_default="ACTIVE"),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_cost", sa.Numeric(14, 2), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_table_sessions_company_id", "table_sessions", ["company_id"])
    op.create_index("ix_table_sessions_table_id", "table_sessions", ["table_id"])
    op.create_index("ix_table_sessions_status", "table_sessions", ["status"])
    op.create_index("ix_table_sessions_ended_at", "table_sessions", ["ended_at"])
    op.create_index("ix_table_sessions_company_ended", "table_sessions", ["company_id", "ended_at"])

    op.create_table(
        "table_maintenance",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("company_id", _uuid(), nullable=False),
        sa.Column("table_id", _uuid(), nullable=True),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("cost", sa.Numeric(14, 2), nullable=True),
        sa.Column("maintenance_at", sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_table_maintenance_company_id", "table_maintenance", ["company_id"])
    op.create_index("ix_table_maintenance_table_id", "table_maintenance", ["table_id"])
    op.create_index("ix_table_maintenance_maintenance_at", "table_maintenance", ["maintenance_at"])
    op.create_index("ix_table_maintenance_company_at", "table_maintenance", ["company_id", "maintenance_at"])

    op.create_table(
        "pos_orders",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("company_id", _uuid(), nullable=False),
        sa.Column("table_session_id", _uuid(), nullable=True),
        sa.Column("amount", sa.Numeric(14, 2), nullable=True),
        sa.Column("payment_status", sa.String(length=16), nullable=False, server_default="PENDING"),
        _created_at(),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["table_session_id"], ["table_sessions.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_pos_orders_company_id", "pos_orders", ["company_id"])
    op.create_index("ix_pos_orders_table_session_id", "pos_orders", ["table_session_id"])
    op.create_index("ix_pos_orders_payment_status", "pos_orders", ["payment_status"])
    op.create_index("ix_pos_orders_created_at", "pos_orders", ["created_at"])
    op.create_index("ix_pos_orders_company_created", "pos_orders", ["company_id", "created_at"])

    op.create_table(
        "inventory_items",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("company_id", _uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("item_type", sa.String(length=16), nullable=False, server_default="SALE"),
        sa.Column("cost_price", sa.Numeric(12, 4), nullable=False, server_default="0"),
        sa.Column("sale_price", sa.Numeric(12, 4), nullable=False, server_default="0"),
        sa.Column("quantity", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.Column("note", sa.Text(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_inventory_items_company_id", "inventory_items", ["company_id"])
    op.create_index("ix_inventory_items_name", "inventory_items", ["name"])
    op.create_index("ix_inventory_items_item_type", "inventory_items", ["item_type"])
    op.create_index("ix_inventory_items_created_at", "inventory_items", ["created_at"])
    op.create_index("ix_inventory_items_company_name", "inventory_items", ["company_id", "name"])

    op.create_table(
        "stock_movements",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("item_id", _uuid(), nullable=False),
        sa.Column("type", sa.String(length=16), nullable=False),
        sa.Column("quantity", sa.Numeric(14, 4), nullable=False, server_default="0"),
        sa.Column("cost_price", sa.Numeric(12, 4), nullable=True),
        sa.Column("note", sa.Text(), nullable=True),
        _created_at(),
        sa.ForeignKeyConstraint(["item_id"], ["inventory_items.id"], ondelete="CASCADE"),
    )
    op.create_index("ix_stock_movements_item_id", "stock_movements", ["item_id"])
    op.create_index("ix_stock_movements_type", "stock_movements", ["type"])
    op.create_index("ix_stock_movements_created_at", "stock_movements", ["created_at"])
    op.create_index("ix_stock_movements_item_created", "stock_movements", ["item_id", "created_at"])

    op.create_table(
        "expenses",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("company_id", _uuid(), nullable=False),
        sa.Column("expense_date", sa.Date(), nullable=False),
        sa.Column("category", sa.String(length=32), nullable=False),
        sa.Column("description", sa.String(length=255), nullable=False),
        sa.Column("amount", sa.Numeric(14, 2), nullable=False, server_default="0"),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("created_by_id", _uuid(), nullable=True),
        _created_at(),
        _updated_at(),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["created_by_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_expenses_company_id", "expenses", ["company_id"])
    op.create_index("ix_expenses_expense_date", "expenses", ["expense_date"])
    op.create_index("ix_expenses_category", "expenses", ["category"])
    op.create_index("ix_expenses_created_at", "expenses", ["created_at"])
    op.create_index("ix_expenses_company_date", "expenses", ["company_id", "expense_date"])
    op.create_index("ix_expenses_company_category", "expenses", ["company_id", "category"])

    op.create_table(
        "financial_reports",
        sa.Column("id", _uuid(), primary_key=True, nullable=False),
        sa.Column("company_id", _uuid(), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("report_type", sa.String(length=16), nullable=False),
        sa.Column("source", sa.String(length=16), nullable=False, server_default="GENERATED"),
        sa.Column("period_start", sa.DateTime(timezone=True), nullable=False),
        sa.Column("period_end", sa.DateTime(timezone=True), nullable=False),
        _money("sales_income"),
        _money("table_rent_income"),
        _money("other_income"),
        _money("total_income"),
        _money("inventory_cost"),
        _money("maintenance_cost"),
        _money("staff_cost"),
        _money("utility_cost"),
        _money("other_expenses"),
        _money("total_expense"),
        _money("net_profit"),
        sa.Column("generated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("NOW()")),
        sa.Column("generated_by_id", _uuid(), nullable=True),
        sa.ForeignKeyConstraint(["company_id"], ["companies.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["generated_by_id"], ["users.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_financial_reports_company_id", "financial_reports", ["company_id"])
    op.create_index("ix_financial_reports_report_type", "financial_reports", ["report_type"])
    op.create_index("ix_financial_reports_generated_at", "financial_reports", ["generated_at"])
    op.create_index(
        "ix_financial_reports_company_type_period",
        "financial_reports",
        ["company_id", "report_type", "period_start"],
    )


def downgrade() -> None:
    op.drop_table("financial_reports")
    op.drop_table("expenses")
    op.drop_table("stock_movements")
    op.drop_table("inventory_items")
    op.drop_table("pos_orders")
    op.drop_table("table_maintenance")
    op.drop_table("table_sessions")
    op.drop_table("users")
    op.drop_table("companies")
