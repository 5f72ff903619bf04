"""
Report service: loads accounts, entries and vouchers visible at query time
and hands them to the pure aggregator.

Defaults mirror the report pages: trial balance as of today, P&L from
1 January of the current year to today, GST for the current month.
"""
from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import Session, col, select

from erp.accounting import reports
from erp.models.account import Account
from erp.models.voucher import Voucher
from erp.schemas.responses import (
    GSTReport,
    LedgerReport,
    OutstandingReport,
    ProfitAndLossReport,
    TrialBalanceReport,
)
from erp.services.accounts import active_entries, get_account


def _accounts(session: Session) -> list[Account]:
    return list(session.exec(select(Account)).all())


def get_trial_balance(session: Session, as_of: Optional[date] = None) -> TrialBalanceReport:
    as_of = as_of or date.today()
    return reports.trial_balance(_accounts(session), active_entries(session), as_of)


def get_profit_and_loss(
    session: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> ProfitAndLossReport:
    today = date.today()
    start_date = start_date or date(today.year, 1, 1)
    end_date = end_date or today
    return reports.profit_and_loss(
        _accounts(session), active_entries(session), start_date, end_date
    )


def get_gst(
    session: Session,
    month: Optional[int] = None,
    year: Optional[int] = None,
) -> GSTReport:
    today = date.today()
    month = month or today.month
    year = year or today.year
    start, end = reports.month_window(month, year)
    stmt = select(Voucher).where(
        Voucher.is_deleted == False,
        col(Voucher.voucher_type).in_(["SALES", "PURCHASE"]),
        Voucher.voucher_date >= start,
        Voucher.voucher_date <= end,
    )
    return reports.gst_report(session.exec(stmt).all(), month, year)


def get_outstanding(session: Session) -> OutstandingReport:
    parties = list(session.exec(select(Account).where(Account.is_party == True)).all())
    return reports.outstanding(parties, active_entries(session))


def get_ledger(
    session: Session,
    account_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> LedgerReport:
    account = get_account(session, account_id)
    return reports.account_ledger(
        account, active_entries(session, account_id), start_date, end_date
    )


def get_day_book(
    session: Session,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    voucher_type: Optional[str] = None,
) -> list[Voucher]:
    stmt = select(Voucher).where(Voucher.is_deleted == False)
    if voucher_type:
        stmt = stmt.where(Voucher.voucher_type == voucher_type.upper())
    return reports.day_book(session.exec(stmt).all(), date_from, date_to)
