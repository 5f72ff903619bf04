"""Account master: listing, lookup with derived balance, creation."""
from __future__ import annotations

from typing import Optional

from loguru import logger
from sqlmodel import Session, select

from erp.accounting.errors import AccountNotFound, DuplicateAccount
from erp.accounting.reports import account_balance
from erp.models.account import Account
from erp.models.voucher import LedgerEntry, Voucher


def list_accounts(
    session: Session,
    account_type: Optional[str] = None,
    is_party: Optional[bool] = None,
) -> list[Account]:
    stmt = select(Account)
    if account_type:
        stmt = stmt.where(Account.type == account_type.upper())
    if is_party is not None:
        stmt = stmt.where(Account.is_party == is_party)
    stmt = stmt.order_by(Account.name)
    return list(session.exec(stmt).all())


def get_account(session: Session, account_id: int) -> Account:
    account = session.get(Account, account_id)
    if account is None:
        raise AccountNotFound(account_id)
    return account


def find_account_by_name(session: Session, name: str) -> Optional[Account]:
    return session.exec(select(Account).where(Account.name == name)).first()


def active_entries(session: Session, account_id: Optional[int] = None) -> list[LedgerEntry]:
    """Ledger entries whose voucher is not soft-deleted, in posting order."""
    stmt = (
        select(LedgerEntry)
        .join(Voucher, LedgerEntry.voucher_id == Voucher.id)
        .where(Voucher.is_deleted == False)
    )
    if account_id is not None:
        stmt = stmt.where(LedgerEntry.account_id == account_id)
    stmt = stmt.order_by(LedgerEntry.entry_date, LedgerEntry.id)
    return list(session.exec(stmt).all())


def account_with_balance(session: Session, account_id: int) -> tuple[Account, float]:
    account = get_account(session, account_id)
    balance = account_balance(account, active_entries(session, account_id))
    return account, balance


def create_account(
    session: Session,
    *,
    name: str,
    account_type: str,
    is_party: bool = False,
    gst_number: Optional[str] = None,
    opening_balance: float = 0.0,
) -> Account:
    if find_account_by_name(session, name) is not None:
        raise DuplicateAccount(name)
    account = Account(
        name=name,
        type=account_type.upper(),
        is_party=is_party,
        gst_number=gst_number,
        opening_balance=opening_balance,
    )
    session.add(account)
    session.commit()
    session.refresh(account)
    logger.info(f"Created account {account.name!r} ({account.type}) id={account.id}")
    return account
