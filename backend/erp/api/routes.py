"""
REST API routes for accounts and vouchers.

Endpoints:
  GET    /api/health
  GET    /api/accounts
  GET    /api/accounts/{id}
  POST   /api/accounts
  POST   /api/vouchers
  GET    /api/vouchers
  GET    /api/vouchers/{id}
  DELETE /api/vouchers/{id}
  GET    /api/voucher-types
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query, status
from sqlmodel import Session, select

from erp.accounting.constants import AccountType, VoucherType
from erp.accounting.errors import AccountingError
from erp.core.database import get_session
from erp.models.account import Account
from erp.models.voucher import Voucher
from erp.schemas.requests import AccountCreate, VoucherCreate
from erp.schemas.responses import (
    AccountDetail,
    AccountRead,
    HealthResponse,
    LedgerEntryRead,
    VoucherDetail,
    VoucherRead,
)
from erp.services import accounts as account_service
from erp.services import vouchers as voucher_service

router = APIRouter(prefix="/api")


# ── Helpers ───────────────────────────────────────────────────────────────────


def http_error(exc: AccountingError) -> HTTPException:
    """Translate a domain error into the HTTP error the client sees."""
    return HTTPException(status_code=exc.status_code, detail=exc.message)


def _voucher_read(voucher: Voucher) -> VoucherRead:
    read = VoucherRead.model_validate(voucher)
    read.party_name = voucher.party.name if voucher.party else None
    return read


def _voucher_detail(voucher: Voucher) -> VoucherDetail:
    detail = VoucherDetail.model_validate(voucher)
    detail.party_name = voucher.party.name if voucher.party else None
    detail.entries = [
        LedgerEntryRead(
            id=e.id,
            account_id=e.account_id,
            account_name=e.account.name if e.account else None,
            entry_date=e.entry_date,
            debit=e.debit,
            credit=e.credit,
        )
        for e in voucher.entries
    ]
    return detail


# ── Health ────────────────────────────────────────────────────────────────────


@router.get("/health", response_model=HealthResponse)
def health(session: Session = Depends(get_session)):
    try:
        session.exec(select(Account).limit(1))
        db_status = "ok"
    except Exception as e:
        db_status = f"error: {e}"
    return HealthResponse(status="ok", db=db_status)


# ── Accounts ──────────────────────────────────────────────────────────────────


@router.get("/accounts", response_model=list[AccountRead])
def list_accounts(
    type: Optional[AccountType] = Query(default=None),
    is_party: Optional[bool] = Query(default=None),
    session: Session = Depends(get_session),
):
    return account_service.list_accounts(
        session, type.value if type else None, is_party
    )


@router.get("/accounts/{account_id}", response_model=AccountDetail)
def get_account(account_id: int, session: Session = Depends(get_session)):
    try:
        account, balance = account_service.account_with_balance(session, account_id)
    except AccountingError as exc:
        raise http_error(exc)
    return AccountDetail(
        **AccountRead.model_validate(account).model_dump(), balance=balance
    )


@router.post(
    "/accounts", response_model=AccountRead, status_code=status.HTTP_201_CREATED
)
def create_account(body: AccountCreate, session: Session = Depends(get_session)):
    try:
        return account_service.create_account(
            session,
            name=body.name,
            account_type=body.type.value,
            is_party=body.is_party,
            gst_number=body.gst_number,
            opening_balance=body.opening_balance,
        )
    except AccountingError as exc:
        raise http_error(exc)


# ── Vouchers ──────────────────────────────────────────────────────────────────


@router.post(
    "/vouchers", response_model=VoucherDetail, status_code=status.HTTP_201_CREATED
)
def create_voucher(
    body: VoucherCreate = Body(...),
    session: Session = Depends(get_session),
):
    """
    Post a voucher. Entries are derived server-side; the body carries only
    business fields, tagged by ``type``.
    """
    try:
        voucher = voucher_service.post_voucher(
            session,
            body.type,
            body.date,
            party_id=body.party_id,
            items=getattr(body, "items", None),
            amount=body.amount,
            bank_account_id=getattr(body, "bank_account_id", None),
            expense_account_id=getattr(body, "expense_account_id", None),
            income_account_id=getattr(body, "income_account_id", None),
            narration=body.narration,
        )
    except AccountingError as exc:
        raise http_error(exc)
    return _voucher_detail(voucher)


@router.get("/vouchers", response_model=list[VoucherRead])
def list_vouchers(
    voucher_type: Optional[VoucherType] = Query(default=None),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None),
    session: Session = Depends(get_session),
):
    vouchers = voucher_service.list_vouchers(
        session, voucher_type.value if voucher_type else None, date_from, date_to
    )
    return [_voucher_read(v) for v in vouchers]


@router.get("/vouchers/{voucher_id}", response_model=VoucherDetail)
def get_voucher(voucher_id: int, session: Session = Depends(get_session)):
    try:
        voucher = voucher_service.get_voucher(session, voucher_id)
    except AccountingError as exc:
        raise http_error(exc)
    return _voucher_detail(voucher)


@router.delete("/vouchers/{voucher_id}", response_model=VoucherRead)
def delete_voucher(voucher_id: int, session: Session = Depends(get_session)):
    """Soft delete; repeating the call returns the voucher unchanged."""
    try:
        voucher = voucher_service.delete_voucher(session, voucher_id)
    except AccountingError as exc:
        raise http_error(exc)
    return _voucher_read(voucher)


# ── Voucher types (for filter dropdowns) ─────────────────────────────────────


@router.get("/voucher-types")
def voucher_types():
    return [t.value for t in VoucherType]
