"""
Report and export routes.

Endpoints:
  GET  /api/reports/trial-balance
  GET  /api/reports/pl
  GET  /api/reports/gst
  GET  /api/reports/outstanding
  GET  /api/reports/ledger/{account_id}
  GET  /api/export/csv
  GET  /api/export/xlsx/{report}
"""
from __future__ import annotations

import csv
import io
from datetime import date
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import StreamingResponse
from sqlmodel import Session

from erp import exports
from erp.accounting.constants import VoucherType
from erp.accounting.errors import AccountingError
from erp.api.routes import http_error
from erp.core.database import get_session
from erp.schemas.responses import (
    GSTReport,
    LedgerReport,
    OutstandingReport,
    ProfitAndLossReport,
    TrialBalanceReport,
)
from erp.services import reports as report_service

report_router = APIRouter(prefix="/api", tags=["reports"])


# ── Reports ───────────────────────────────────────────────────────────────────


@report_router.get("/reports/trial-balance", response_model=TrialBalanceReport)
def trial_balance(
    as_of: Optional[date] = Query(default=None, description="Defaults to today"),
    session: Session = Depends(get_session),
):
    return report_service.get_trial_balance(session, as_of)


@report_router.get("/reports/pl", response_model=ProfitAndLossReport)
def profit_and_loss(
    start_date: Optional[date] = Query(default=None, description="Defaults to 1 Jan"),
    end_date: Optional[date] = Query(default=None, description="Defaults to today"),
    session: Session = Depends(get_session),
):
    if start_date and end_date and start_date > end_date:
        raise HTTPException(status_code=400, detail="start_date is after end_date")
    return report_service.get_profit_and_loss(session, start_date, end_date)


@report_router.get("/reports/gst", response_model=GSTReport)
def gst(
    month: Optional[int] = Query(default=None, ge=1, le=12),
    year: Optional[int] = Query(default=None, ge=1900, le=9999),
    session: Session = Depends(get_session),
):
    return report_service.get_gst(session, month, year)


@report_router.get("/reports/outstanding", response_model=OutstandingReport)
def outstanding(session: Session = Depends(get_session)):
    return report_service.get_outstanding(session)


@report_router.get("/reports/ledger/{account_id}", response_model=LedgerReport)
def ledger(
    account_id: int,
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    session: Session = Depends(get_session),
):
    try:
        return report_service.get_ledger(session, account_id, start_date, end_date)
    except AccountingError as exc:
        raise http_error(exc)


# ── Export ────────────────────────────────────────────────────────────────────


@report_router.get("/export/csv")
def export_csv(
    voucher_type: Optional[VoucherType] = Query(default=None),
    date_from: Optional[date] = Query(default=None),
    date_to: Optional[date] = Query(default=None),
    session: Session = Depends(get_session),
):
    """Download a day book CSV of active vouchers matching filters."""
    vouchers = report_service.get_day_book(
        session, date_from, date_to, voucher_type.value if voucher_type else None
    )

    output = io.StringIO()
    writer = csv.DictWriter(
        output,
        fieldnames=[
            "id", "voucher_number", "voucher_type", "voucher_date",
            "party_name", "gst_number", "total_amount", "narration",
        ],
    )
    writer.writeheader()
    for v in vouchers:
        writer.writerow({
            "id": v.id,
            "voucher_number": v.voucher_number,
            "voucher_type": v.voucher_type,
            "voucher_date": str(v.voucher_date),
            "party_name": v.party.name if v.party else "",
            "gst_number": (v.party.gst_number or "") if v.party else "",
            "total_amount": round(v.total_amount, 2),
            "narration": v.narration or "",
        })

    output.seek(0)
    filename = f"daybook_{voucher_type.value if voucher_type else 'all'}_{date.today()}.csv"
    return StreamingResponse(
        iter([output.getvalue()]),
        media_type="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@report_router.get("/export/xlsx/{report}")
def export_xlsx(
    report: Literal["trial-balance", "pl", "gst", "daybook"],
    as_of: Optional[date] = Query(default=None),
    start_date: Optional[date] = Query(default=None),
    end_date: Optional[date] = Query(default=None),
    month: Optional[int] = Query(default=None, ge=1, le=12),
    year: Optional[int] = Query(default=None, ge=1900, le=9999),
    session: Session = Depends(get_session),
):
    """Download a report as an Excel workbook."""
    if report == "trial-balance":
        data = report_service.get_trial_balance(session, as_of)
        wb = exports.trial_balance_workbook(data)
        filename = f"Trial_Balance_{data.as_of}.xlsx"
    elif report == "pl":
        data = report_service.get_profit_and_loss(session, start_date, end_date)
        wb = exports.profit_and_loss_workbook(data)
        filename = f"PL_Statement_{data.start_date}_{data.end_date}.xlsx"
    elif report == "gst":
        data = report_service.get_gst(session, month, year)
        wb = exports.gst_workbook(data)
        filename = f"GST_Report_{data.year}_{data.month:02d}.xlsx"
    else:
        vouchers = report_service.get_day_book(session, start_date, end_date)
        wb = exports.day_book_workbook(vouchers)
        filename = f"Day_Book_{date.today()}.xlsx"

    return StreamingResponse(
        exports.workbook_bytes(wb),
        media_type=exports.XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
