"""Pydantic response schemas for API endpoints and report results."""
from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Optional
from pydantic import BaseModel, PlainSerializer

# Amounts stay unrounded in memory and are rounded only when serialised
Money = Annotated[float, PlainSerializer(lambda v: round(v, 2), return_type=float)]


class HealthResponse(BaseModel):
    status: str
    db: str
    version: str = "1.0.0"


# ── Accounts ──────────────────────────────────────────────────────────────────


class AccountRead(BaseModel):
    id: int
    name: str
    type: str
    is_party: bool
    gst_number: Optional[str]
    opening_balance: Money
    created_at: datetime

    class Config:
        from_attributes = True


class AccountDetail(AccountRead):
    balance: Money


# ── Vouchers ──────────────────────────────────────────────────────────────────


class VoucherItemRead(BaseModel):
    id: int
    description: Optional[str]
    quantity: float
    rate: Money
    amount: Money
    gst_rate: float
    gst_amount: Money
    total: Money
    order: int

    class Config:
        from_attributes = True


class LedgerEntryRead(BaseModel):
    id: int
    account_id: int
    account_name: Optional[str] = None
    entry_date: date
    debit: Money
    credit: Money

    class Config:
        from_attributes = True


class VoucherRead(BaseModel):
    id: int
    voucher_number: str
    voucher_type: str
    voucher_date: date
    party_id: Optional[int]
    party_name: Optional[str] = None
    narration: Optional[str]
    total_amount: Money
    is_deleted: bool
    deleted_at: Optional[datetime]
    created_at: datetime

    class Config:
        from_attributes = True


class VoucherDetail(VoucherRead):
    items: list[VoucherItemRead] = []
    entries: list[LedgerEntryRead] = []


# ── Reports ───────────────────────────────────────────────────────────────────


class TrialBalanceRow(BaseModel):
    account_id: int
    account_name: str
    account_type: str
    debit: Money
    credit: Money


class TrialBalanceReport(BaseModel):
    as_of: date
    rows: list[TrialBalanceRow]
    total_debit: Money
    total_credit: Money
    balanced: bool


class ProfitAndLossRow(BaseModel):
    account_id: int
    account_name: str
    account_type: str
    amount: Money


class ProfitAndLossReport(BaseModel):
    start_date: date
    end_date: date
    income_rows: list[ProfitAndLossRow]
    expense_rows: list[ProfitAndLossRow]
    total_income: Money
    total_expenses: Money
    net_profit: Money  # negative = loss


class GSTVoucherRow(BaseModel):
    voucher_id: Optional[int]
    voucher_number: str
    voucher_date: date
    party_name: Optional[str]
    gst_number: Optional[str]
    amount: Money  # total less tax
    gst: Money
    total: Money


class GSTReport(BaseModel):
    month: int
    year: int
    output_tax: Money
    input_tax: Money
    net_tax: Money
    status: str  # "Payable" or "Refundable"
    sales_rows: list[GSTVoucherRow]
    purchase_rows: list[GSTVoucherRow]


class OutstandingParty(BaseModel):
    account_id: int
    name: str
    gst_number: Optional[str]
    balance: Money  # magnitude


class OutstandingReport(BaseModel):
    receivables: list[OutstandingParty]
    payables: list[OutstandingParty]
    total_receivable: Money
    total_payable: Money
    net_position: Money


class LedgerLine(BaseModel):
    entry_id: Optional[int]
    voucher_id: Optional[int]
    voucher_number: Optional[str] = None
    voucher_type: Optional[str] = None
    party_name: Optional[str] = None
    narration: Optional[str] = None
    entry_date: date
    debit: Money
    credit: Money
    running_balance: Money


class LedgerReport(BaseModel):
    account: AccountRead
    start_date: Optional[date]
    end_date: Optional[date]
    opening_balance: Money
    entries: list[LedgerLine]
    closing_balance: Money
