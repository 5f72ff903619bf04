"""
Report aggregator: read-side computations over accounts and ledger entries.

All functions are pure. Callers pass accounts and entries already loaded from
the store; entries of soft-deleted vouchers must be excluded beforehand
(vouchers handed to ``gst_report`` / ``day_book`` are re-checked here).

Accounts are read through attributes ``id``, ``name``, ``type``, ``is_party``,
``gst_number`` and ``opening_balance``; entries through ``id``,
``account_id``, ``entry_date``, ``debit`` and ``credit`` (plus an optional
``voucher``). Date filters are inclusive on both ends.
"""
from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from typing import Iterable, Optional

from dateutil.relativedelta import relativedelta

from erp.accounting.constants import (
    BALANCE_EPSILON,
    DEBIT_NATURE_TYPES,
    ZERO_BALANCE_TOLERANCE,
    AccountType,
    VoucherType,
)
from erp.accounting.errors import AccountNotFound
from erp.schemas.responses import (
    AccountRead,
    GSTReport,
    GSTVoucherRow,
    LedgerLine,
    LedgerReport,
    OutstandingParty,
    OutstandingReport,
    ProfitAndLossReport,
    ProfitAndLossRow,
    TrialBalanceReport,
    TrialBalanceRow,
)

# ── Helpers ───────────────────────────────────────────────────────────────────


def _in_window(d: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and d < start:
        return False
    if end is not None and d > end:
        return False
    return True


def _entry_order(entry) -> tuple:
    # Unsaved entries (id None) sort after saved ones on the same day
    return (entry.entry_date, entry.id is None, entry.id or 0)


def _index_accounts(accounts: Iterable) -> dict:
    return {a.id: a for a in accounts}


def month_window(month: int, year: int) -> tuple[date, date]:
    """First and last calendar day of the month."""
    start = date(year, month, 1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return start, end


# ── Trial balance ─────────────────────────────────────────────────────────────


def trial_balance(accounts: Iterable, entries: Iterable, as_of: date) -> TrialBalanceReport:
    """
    Debit/credit totals per account as of a date.

    Accounts appear if they have an entry dated on or before ``as_of`` or a
    non-zero opening balance. Opening balances of ASSET/EXPENSE accounts go
    to the debit column, all others to the credit column.
    """
    by_id = _index_accounts(accounts)
    totals: dict[int, list[float]] = {}

    for entry in entries:
        if entry.entry_date > as_of:
            continue
        if entry.account_id not in by_id:
            raise AccountNotFound(entry.account_id)
        bucket = totals.setdefault(entry.account_id, [0.0, 0.0])
        bucket[0] += entry.debit
        bucket[1] += entry.credit

    for account in by_id.values():
        if account.opening_balance == 0:
            continue
        bucket = totals.setdefault(account.id, [0.0, 0.0])
        if account.type in DEBIT_NATURE_TYPES:
            bucket[0] += account.opening_balance
        else:
            bucket[1] += account.opening_balance

    rows = [
        TrialBalanceRow(
            account_id=account_id,
            account_name=by_id[account_id].name,
            account_type=by_id[account_id].type,
            debit=debit,
            credit=credit,
        )
        for account_id, (debit, credit) in totals.items()
    ]
    rows.sort(key=lambda r: (r.account_name, r.account_id))

    total_debit = sum(r.debit for r in rows)
    total_credit = sum(r.credit for r in rows)
    return TrialBalanceReport(
        as_of=as_of,
        rows=rows,
        total_debit=total_debit,
        total_credit=total_credit,
        balanced=abs(total_debit - total_credit) < BALANCE_EPSILON,
    )


# ── Profit & loss ─────────────────────────────────────────────────────────────


def profit_and_loss(
    accounts: Iterable, entries: Iterable, start: date, end: date
) -> ProfitAndLossReport:
    """Income (credit − debit) against expenses (debit − credit) in a window."""
    by_id = _index_accounts(accounts)
    amounts: dict[int, float] = defaultdict(float)

    for entry in entries:
        if not _in_window(entry.entry_date, start, end):
            continue
        account = by_id.get(entry.account_id)
        if account is None:
            raise AccountNotFound(entry.account_id)
        if account.type == AccountType.INCOME.value:
            amounts[account.id] += entry.credit - entry.debit
        elif account.type == AccountType.EXPENSE.value:
            amounts[account.id] += entry.debit - entry.credit

    income_rows: list[ProfitAndLossRow] = []
    expense_rows: list[ProfitAndLossRow] = []
    for account_id, amount in amounts.items():
        if amount < ZERO_BALANCE_TOLERANCE:
            continue
        account = by_id[account_id]
        row = ProfitAndLossRow(
            account_id=account_id,
            account_name=account.name,
            account_type=account.type,
            amount=amount,
        )
        if account.type == AccountType.INCOME.value:
            income_rows.append(row)
        else:
            expense_rows.append(row)

    income_rows.sort(key=lambda r: r.account_name)
    expense_rows.sort(key=lambda r: r.account_name)
    total_income = sum(r.amount for r in income_rows)
    total_expenses = sum(r.amount for r in expense_rows)
    return ProfitAndLossReport(
        start_date=start,
        end_date=end,
        income_rows=income_rows,
        expense_rows=expense_rows,
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=total_income - total_expenses,
    )


# ── GST ───────────────────────────────────────────────────────────────────────


def _gst_row(voucher, tax: float) -> GSTVoucherRow:
    party = getattr(voucher, "party", None)
    return GSTVoucherRow(
        voucher_id=voucher.id,
        voucher_number=voucher.voucher_number,
        voucher_date=voucher.voucher_date,
        party_name=party.name if party else None,
        gst_number=party.gst_number if party else None,
        amount=voucher.total_amount - tax,
        gst=tax,
        total=voucher.total_amount,
    )


def gst_report(vouchers: Iterable, month: int, year: int) -> GSTReport:
    """
    Output GST (sales) against input GST (purchases) for one calendar month.

    Tax per voucher is the sum of its item ``gst_amount``s.
    """
    start, end = month_window(month, year)
    output_tax = 0.0
    input_tax = 0.0
    sales_rows: list[GSTVoucherRow] = []
    purchase_rows: list[GSTVoucherRow] = []

    for voucher in sorted(vouchers, key=lambda v: (v.voucher_date, v.id or 0)):
        if voucher.is_deleted or not _in_window(voucher.voucher_date, start, end):
            continue
        tax = sum(item.gst_amount for item in voucher.items)
        if voucher.voucher_type == VoucherType.SALES.value:
            output_tax += tax
            sales_rows.append(_gst_row(voucher, tax))
        elif voucher.voucher_type == VoucherType.PURCHASE.value:
            input_tax += tax
            purchase_rows.append(_gst_row(voucher, tax))

    net_tax = output_tax - input_tax
    return GSTReport(
        month=month,
        year=year,
        output_tax=output_tax,
        input_tax=input_tax,
        net_tax=net_tax,
        status="Payable" if net_tax > 0 else "Refundable",
        sales_rows=sales_rows,
        purchase_rows=purchase_rows,
    )


# ── Outstanding ───────────────────────────────────────────────────────────────


def outstanding(accounts: Iterable, entries: Iterable) -> OutstandingReport:
    """
    Party balances split into receivables (> 0) and payables (< 0).

    Parties that net to zero (within half a paisa) appear in neither list.
    """
    movement: dict[int, float] = defaultdict(float)
    for entry in entries:
        movement[entry.account_id] += entry.debit - entry.credit

    receivables: list[OutstandingParty] = []
    payables: list[OutstandingParty] = []
    for account in sorted(accounts, key=lambda a: a.name):
        if not account.is_party:
            continue
        balance = account.opening_balance + movement.get(account.id, 0.0)
        if abs(balance) < ZERO_BALANCE_TOLERANCE:
            continue
        row = OutstandingParty(
            account_id=account.id,
            name=account.name,
            gst_number=account.gst_number,
            balance=abs(balance),
        )
        if balance > 0:
            receivables.append(row)
        else:
            payables.append(row)

    total_receivable = sum(r.balance for r in receivables)
    total_payable = sum(r.balance for r in payables)
    return OutstandingReport(
        receivables=receivables,
        payables=payables,
        total_receivable=total_receivable,
        total_payable=total_payable,
        net_position=total_receivable - total_payable,
    )


# ── Account ledger ────────────────────────────────────────────────────────────


def account_balance(account, entries: Iterable, as_of: Optional[date] = None) -> float:
    """Opening balance plus debit − credit of the account's entries up to ``as_of``."""
    balance = account.opening_balance
    for entry in entries:
        if entry.account_id != account.id:
            continue
        if as_of is not None and entry.entry_date > as_of:
            continue
        balance += entry.debit - entry.credit
    return balance


def account_ledger(
    account,
    entries: Iterable,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> LedgerReport:
    """
    Entries of one account in date order with a running balance.

    The running balance starts at the account's opening balance whether or
    not a window is given.
    """
    selected = sorted(
        (
            e for e in entries
            if e.account_id == account.id and _in_window(e.entry_date, start, end)
        ),
        key=_entry_order,
    )

    balance = account.opening_balance
    lines: list[LedgerLine] = []
    for entry in selected:
        balance += entry.debit - entry.credit
        voucher = getattr(entry, "voucher", None)
        party = getattr(voucher, "party", None) if voucher is not None else None
        lines.append(
            LedgerLine(
                entry_id=entry.id,
                voucher_id=entry.voucher_id,
                voucher_number=voucher.voucher_number if voucher is not None else None,
                voucher_type=voucher.voucher_type if voucher is not None else None,
                party_name=party.name if party is not None else None,
                narration=voucher.narration if voucher is not None else None,
                entry_date=entry.entry_date,
                debit=entry.debit,
                credit=entry.credit,
                running_balance=balance,
            )
        )

    return LedgerReport(
        account=AccountRead.model_validate(account),
        start_date=start,
        end_date=end,
        opening_balance=account.opening_balance,
        entries=lines,
        closing_balance=balance,
    )


# ── Day book ──────────────────────────────────────────────────────────────────


def day_book(
    vouchers: Iterable,
    start: Optional[date] = None,
    end: Optional[date] = None,
) -> list:
    """Active vouchers in the window, newest first."""
    selected = [
        v for v in vouchers
        if not v.is_deleted and _in_window(v.voucher_date, start, end)
    ]
    selected.sort(key=lambda v: (v.voucher_date, v.id or 0), reverse=True)
    return selected
