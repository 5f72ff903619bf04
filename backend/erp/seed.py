"""
Default chart of accounts.

Run with:
    python -m erp.seed

Creates bank/cash, income, expense, GST, capital, customer and supplier
accounts. Accounts are matched by name, so running it twice is harmless.
"""
from __future__ import annotations

from loguru import logger
from sqlmodel import Session

from erp.core.config import settings
from erp.core.database import create_db_and_tables, engine
from erp.models.account import Account
from erp.services.accounts import find_account_by_name

SYSTEM_ACCOUNTS: list[dict] = [
    {"name": "Bank Account - HDFC", "type": "ASSET", "opening_balance": 500000},
    {"name": "Cash in Hand", "type": "ASSET", "opening_balance": 50000},
    {"name": settings.SALES_ACCOUNT_NAME, "type": "INCOME"},
    {"name": "Service Income", "type": "INCOME"},
    {"name": settings.PURCHASE_ACCOUNT_NAME, "type": "EXPENSE"},
    {"name": "Rent Expense", "type": "EXPENSE"},
    {"name": "Salary Expense", "type": "EXPENSE"},
    {"name": "Electricity Expense", "type": "EXPENSE"},
    {"name": settings.OUTPUT_GST_ACCOUNT_NAME, "type": "LIABILITY"},
    {"name": settings.INPUT_GST_ACCOUNT_NAME, "type": "ASSET"},
    {"name": "Capital Account", "type": "LIABILITY", "opening_balance": 1000000},
]

CUSTOMERS: list[dict] = [
    {"name": "Reliance Industries Ltd", "gst_number": "27AAACR5055K1Z5"},
    {"name": "Tata Consultancy Services", "gst_number": "27AAACT2727Q1ZV"},
    {"name": "Infosys Limited", "gst_number": "29AAACI1681G1ZA"},
    {"name": "Wipro Limited", "gst_number": "29AAACW3775F000"},
    {"name": "HCL Technologies", "gst_number": "06AAACH2702H1Z0"},
]

SUPPLIERS: list[dict] = [
    {"name": "ABC Suppliers", "gst_number": "27AABCA1234B1Z1"},
    {"name": "XYZ Traders", "gst_number": "27AABCX5678C1Z2"},
    {"name": "PQR Enterprises", "gst_number": "29AABCP9012D1Z3"},
]


def _ensure(session: Session, data: dict) -> bool:
    """Insert the account unless one with the same name exists."""
    if find_account_by_name(session, data["name"]) is not None:
        return False
    session.add(Account(**data))
    session.flush()
    return True


def seed_accounts(session: Session) -> int:
    """Create missing default accounts. Returns how many were inserted."""
    created = 0
    for data in SYSTEM_ACCOUNTS:
        created += _ensure(session, data)
    for data in CUSTOMERS:
        created += _ensure(session, {**data, "type": "ASSET", "is_party": True})
    for data in SUPPLIERS:
        created += _ensure(session, {**data, "type": "LIABILITY", "is_party": True})
    session.commit()
    logger.info(f"Seed complete: {created} account(s) created")
    return created


def main() -> None:
    from erp.core.logging import setup_logging

    setup_logging("INFO")
    create_db_and_tables()
    with Session(engine) as session:
        seed_accounts(session)


if __name__ == "__main__":
    main()
