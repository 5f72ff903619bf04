"""
Voucher service: the unit of work that posts a voucher, plus listing,
lookup and soft delete.

Posting strategy:
  - Everything happens in one session transaction: resolve system
    accounts, check references, allocate the number, derive and validate
    entries, insert voucher + items + entries, commit.
  - Any failure rolls the whole unit back, including the sequence bump, so
    readers never see a half-written voucher and numbers are never skipped.
"""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Iterable, Optional

from loguru import logger
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, select

from erp.accounting.errors import AccountingError, AccountNotFound, VoucherNotFound
from erp.accounting.posting import (
    ItemInput,
    SystemAccounts,
    build_postings,
    parse_voucher_type,
)
from erp.core.config import settings
from erp.models.account import Account
from erp.models.voucher import LedgerEntry, Voucher, VoucherItem, VoucherSequence
from erp.services.accounts import find_account_by_name


# ── helpers ──────────────────────────────────────────────────────────────────


def resolve_system_accounts(session: Session) -> SystemAccounts:
    """Look up the configured system accounts by name; missing ones stay None."""
    roles = {
        "sales": settings.SALES_ACCOUNT_NAME,
        "purchase": settings.PURCHASE_ACCOUNT_NAME,
        "output_tax": settings.OUTPUT_GST_ACCOUNT_NAME,
        "input_tax": settings.INPUT_GST_ACCOUNT_NAME,
    }
    ids = {}
    for role, name in roles.items():
        account = find_account_by_name(session, name)
        ids[role] = account.id if account else None
    return SystemAccounts(**ids)


def _check_references(session: Session, *account_ids: Optional[int]) -> None:
    for account_id in account_ids:
        if account_id is not None and session.get(Account, account_id) is None:
            raise AccountNotFound(account_id)


def _increment_sequence(session: Session, voucher_type: str) -> Optional[int]:
    stmt = (
        update(VoucherSequence)
        .where(VoucherSequence.voucher_type == voucher_type)
        .values(
            last_value=VoucherSequence.last_value + 1,
            updated_at=datetime.now(timezone.utc),
        )
        .returning(VoucherSequence.last_value)
        .execution_options(synchronize_session=False)
    )
    return session.execute(stmt).scalar_one_or_none()


def _allocate_sequence(session: Session, voucher_type: str) -> int:
    """
    Increment the per-type counter and return how many numbers were issued
    before this one.

    The increment and the read are one UPDATE … RETURNING statement, so the
    row stays write-locked until commit on every backend, SQLite included.
    Must be the first write of the unit of work: a lost race on creating
    the counter row rolls the session back and increments the winner's row.
    """
    issued = _increment_sequence(session, voucher_type)
    if issued is None:
        try:
            session.add(VoucherSequence(voucher_type=voucher_type, last_value=1))
            session.flush()
            issued = 1
        except IntegrityError:
            session.rollback()
            issued = _increment_sequence(session, voucher_type)
    return issued - 1


# ── posting ──────────────────────────────────────────────────────────────────


def post_voucher(
    session: Session,
    voucher_type: str,
    voucher_date: date,
    *,
    party_id: Optional[int] = None,
    items: Optional[Iterable[ItemInput]] = None,
    amount: Optional[float] = None,
    bank_account_id: Optional[int] = None,
    expense_account_id: Optional[int] = None,
    income_account_id: Optional[int] = None,
    narration: Optional[str] = None,
) -> Voucher:
    """
    Derive, validate and persist one voucher atomically.

    Raises an AccountingError subclass (and writes nothing) when the
    voucher is rejected.
    """
    items = list(items or [])
    try:
        vtype = parse_voucher_type(voucher_type)
        system_accounts = resolve_system_accounts(session)
        _check_references(
            session, party_id, bank_account_id, expense_account_id, income_account_id
        )

        existing = _allocate_sequence(session, vtype.value)
        result = build_postings(
            vtype,
            system_accounts=system_accounts,
            existing_count=existing,
            party_id=party_id,
            items=items,
            amount=amount,
            bank_account_id=bank_account_id,
            expense_account_id=expense_account_id,
            income_account_id=income_account_id,
        )

        voucher = Voucher(
            voucher_number=result.voucher_number,
            voucher_type=result.voucher_type.value,
            voucher_date=voucher_date,
            party_id=party_id,
            narration=narration,
            total_amount=result.total_amount,
        )
        session.add(voucher)
        session.flush()

        for line in result.lines:
            session.add(VoucherItem(**line.model_dump(), voucher_id=voucher.id))

        # Entries are flushed in draft order so ids keep the posting order
        for draft in result.entries:
            session.add(
                LedgerEntry(
                    voucher_id=voucher.id,
                    account_id=draft.account_id,
                    entry_date=voucher_date,
                    debit=draft.debit,
                    credit=draft.credit,
                )
            )
            session.flush()

        session.commit()
    except AccountingError as exc:
        session.rollback()
        logger.warning(f"Rejected {voucher_type} voucher: {exc}")
        raise
    except Exception:
        session.rollback()
        raise

    session.refresh(voucher)
    logger.info(
        f"Posted {voucher.voucher_number} ({voucher.voucher_type}) "
        f"total={voucher.total_amount:.2f}, {len(result.entries)} entries"
    )
    return voucher


# ── queries ──────────────────────────────────────────────────────────────────


def list_vouchers(
    session: Session,
    voucher_type: Optional[str] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
) -> list[Voucher]:
    """Active vouchers, newest first."""
    stmt = select(Voucher).where(Voucher.is_deleted == False)
    if voucher_type:
        stmt = stmt.where(Voucher.voucher_type == voucher_type.upper())
    if date_from:
        stmt = stmt.where(Voucher.voucher_date >= date_from)
    if date_to:
        stmt = stmt.where(Voucher.voucher_date <= date_to)
    stmt = stmt.order_by(col(Voucher.voucher_date).desc(), col(Voucher.id).desc())
    return list(session.exec(stmt).all())


def get_voucher(session: Session, voucher_id: int) -> Voucher:
    voucher = session.get(Voucher, voucher_id)
    if voucher is None:
        raise VoucherNotFound(voucher_id)
    return voucher


def delete_voucher(session: Session, voucher_id: int) -> Voucher:
    """
    Soft delete. Entries stay in place but drop out of every report.

    Deleting an already-deleted voucher is a no-op.
    """
    voucher = get_voucher(session, voucher_id)
    if voucher.is_deleted:
        logger.debug(f"Voucher {voucher.voucher_number} already deleted")
        return voucher

    voucher.is_deleted = True
    voucher.deleted_at = datetime.now(timezone.utc)
    session.add(voucher)
    session.commit()
    session.refresh(voucher)
    logger.info(f"Deleted voucher {voucher.voucher_number}")
    return voucher
