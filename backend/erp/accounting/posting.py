"""
Posting engine: turns one voucher's business intent into balanced
debit/credit ledger-entry drafts.

Posting rules:
  SALES     Dr party (total)        Cr sales (base)      Cr output GST (tax)
  PURCHASE  Dr purchase (base)      Dr input GST (tax)   Cr party (total)
  PAYMENT   Cr bank (amount)        Dr party | expense (amount)
  RECEIPT   Dr bank (amount)        Cr party | income (amount)

Everything here is pure: no DB access, no logging, no clock. Callers resolve
the system account ids (Sales, Purchase, Output GST, Input GST) and persist
the result in a single transaction.

Amounts are kept unrounded; rounding to 2 decimals is a presentation concern.
"""
from __future__ import annotations

from typing import Iterable, Optional

from pydantic import BaseModel, Field, field_validator

from erp.accounting.constants import (
    BALANCE_EPSILON,
    DEFAULT_VOUCHER_PREFIX,
    VOUCHER_PREFIXES,
    VoucherType,
)
from erp.accounting.errors import (
    InvalidVoucherType,
    MissingCounterAccount,
    MissingRequiredReference,
    UnbalancedEntries,
)


# ── Data shapes ───────────────────────────────────────────────────────────────


class EntryDraft(BaseModel):
    """A ledger entry before it is attached to a voucher."""

    account_id: int
    debit: float = 0.0
    credit: float = 0.0


class ItemInput(BaseModel):
    """A goods/services line as entered by the user."""

    description: Optional[str] = None
    quantity: float = Field(ge=0)
    rate: float = Field(ge=0)
    gst_rate: float = 0.0

    @field_validator("gst_rate")
    @classmethod
    def gst_rate_range(cls, v: float) -> float:
        if not (0 <= v <= 100):
            raise ValueError("gst_rate must be between 0 and 100")
        return v


class ItemLine(BaseModel):
    """An item line with its derived amounts."""

    description: Optional[str] = None
    quantity: float
    rate: float
    amount: float
    gst_rate: float
    gst_amount: float
    total: float
    order: int = 0


class SystemAccounts(BaseModel):
    """Well-known account ids; any may be missing if not configured."""

    sales: Optional[int] = None
    purchase: Optional[int] = None
    output_tax: Optional[int] = None
    input_tax: Optional[int] = None


class PostingResult(BaseModel):
    voucher_type: VoucherType
    voucher_number: str
    total_amount: float
    base_amount: float
    tax_amount: float
    lines: list[ItemLine] = []
    entries: list[EntryDraft]


# ── Item lines ────────────────────────────────────────────────────────────────


def derive_item_line(item: ItemInput, order: int = 0) -> ItemLine:
    amount = item.quantity * item.rate
    gst_amount = amount * item.gst_rate / 100
    return ItemLine(
        description=item.description,
        quantity=item.quantity,
        rate=item.rate,
        amount=amount,
        gst_rate=item.gst_rate,
        gst_amount=gst_amount,
        total=amount + gst_amount,
        order=order,
    )


def derive_item_lines(
    items: Iterable[ItemInput],
) -> tuple[list[ItemLine], float, float, float]:
    """
    Derive every line and the voucher totals.

    Returns (lines, base_amount, tax_amount, total_amount). No intermediate
    rounding is applied.
    """
    lines = [derive_item_line(item, order) for order, item in enumerate(items)]
    base_amount = sum(line.amount for line in lines)
    tax_amount = sum(line.gst_amount for line in lines)
    total_amount = sum(line.total for line in lines)
    return lines, base_amount, tax_amount, total_amount


# ── Posting rules ─────────────────────────────────────────────────────────────


def derive_sales_entries(
    party_id: int,
    total_amount: float,
    base_amount: float,
    tax_amount: float,
    sales_account_id: int,
    output_tax_account_id: int,
) -> list[EntryDraft]:
    return [
        # Customer owes the gross amount
        EntryDraft(account_id=party_id, debit=total_amount, credit=0.0),
        # Revenue net of tax
        EntryDraft(account_id=sales_account_id, debit=0.0, credit=base_amount),
        # Tax collected is a liability until remitted
        EntryDraft(account_id=output_tax_account_id, debit=0.0, credit=tax_amount),
    ]


def derive_purchase_entries(
    party_id: int,
    total_amount: float,
    base_amount: float,
    tax_amount: float,
    purchase_account_id: int,
    input_tax_account_id: int,
) -> list[EntryDraft]:
    return [
        EntryDraft(account_id=purchase_account_id, debit=base_amount, credit=0.0),
        # Recoverable tax
        EntryDraft(account_id=input_tax_account_id, debit=tax_amount, credit=0.0),
        # Supplier payable
        EntryDraft(account_id=party_id, debit=0.0, credit=total_amount),
    ]


def _exactly_one(
    label: str,
    party_id: Optional[int],
    direct_account_id: Optional[int],
    direct_label: str,
) -> int:
    if party_id is not None and direct_account_id is not None:
        raise MissingRequiredReference(
            f"{label} takes either a party or a {direct_label} account, not both"
        )
    if party_id is None and direct_account_id is None:
        raise MissingRequiredReference(
            f"{label} requires a party or a {direct_label} account"
        )
    return party_id if party_id is not None else direct_account_id


def derive_payment_entries(
    bank_account_id: int,
    amount: float,
    party_id: Optional[int] = None,
    expense_account_id: Optional[int] = None,
) -> list[EntryDraft]:
    """Cash goes out; either a supplier is paid or an expense is booked."""
    debit_account_id = _exactly_one("Payment", party_id, expense_account_id, "expense")
    return [
        EntryDraft(account_id=bank_account_id, debit=0.0, credit=amount),
        EntryDraft(account_id=debit_account_id, debit=amount, credit=0.0),
    ]


def derive_receipt_entries(
    bank_account_id: int,
    amount: float,
    party_id: Optional[int] = None,
    income_account_id: Optional[int] = None,
) -> list[EntryDraft]:
    """Cash comes in; either a customer settles or income is booked."""
    credit_account_id = _exactly_one("Receipt", party_id, income_account_id, "income")
    return [
        EntryDraft(account_id=bank_account_id, debit=amount, credit=0.0),
        EntryDraft(account_id=credit_account_id, debit=0.0, credit=amount),
    ]


def validate_balance(entries: Iterable[EntryDraft]) -> bool:
    """True iff total debits equal total credits within BALANCE_EPSILON."""
    entries = list(entries)
    total_debit = sum(e.debit for e in entries)
    total_credit = sum(e.credit for e in entries)
    return abs(total_debit - total_credit) < BALANCE_EPSILON


def derive_voucher_number(voucher_type: str, existing_count: int) -> str:
    """
    SV-0001, PV-0001, PY-0001, RC-0001 … ; unknown types get the VO prefix.

    ``existing_count`` is the number of vouchers already numbered for the type.
    """
    prefix = VOUCHER_PREFIXES.get(str(voucher_type).upper(), DEFAULT_VOUCHER_PREFIX)
    return f"{prefix}-{existing_count + 1:04d}"


# ── Dispatcher ────────────────────────────────────────────────────────────────


def parse_voucher_type(voucher_type) -> VoucherType:
    if isinstance(voucher_type, VoucherType):
        return voucher_type
    try:
        return VoucherType(str(voucher_type).upper())
    except ValueError:
        raise InvalidVoucherType(voucher_type) from None


def _require(account_id: Optional[int], role: str) -> int:
    if account_id is None:
        raise MissingCounterAccount(role)
    return account_id


def build_postings(
    voucher_type,
    *,
    system_accounts: SystemAccounts,
    existing_count: int = 0,
    party_id: Optional[int] = None,
    items: Optional[Iterable[ItemInput]] = None,
    amount: Optional[float] = None,
    bank_account_id: Optional[int] = None,
    expense_account_id: Optional[int] = None,
    income_account_id: Optional[int] = None,
) -> PostingResult:
    """
    Derive totals, item lines, entries and the voucher number for one voucher.

    SALES/PURCHASE totals come from the item lines; without items the
    supplied ``amount`` is posted as an untaxed base amount. PAYMENT/RECEIPT
    post ``amount`` and ignore items.

    Raises InvalidVoucherType, MissingCounterAccount, MissingRequiredReference
    or UnbalancedEntries. Nothing is returned unless the entries balance.
    """
    vtype = parse_voucher_type(voucher_type)

    lines: list[ItemLine] = []
    items = list(items or [])
    if vtype in (VoucherType.SALES, VoucherType.PURCHASE) and items:
        lines, base_amount, tax_amount, total_amount = derive_item_lines(items)
    else:
        total_amount = float(amount or 0.0)
        base_amount = total_amount
        tax_amount = 0.0

    if vtype == VoucherType.SALES:
        sales_id = _require(system_accounts.sales, "sales")
        output_tax_id = _require(system_accounts.output_tax, "output_tax")
        if party_id is None:
            raise MissingRequiredReference("Sales voucher requires a party")
        entries = derive_sales_entries(
            party_id, total_amount, base_amount, tax_amount, sales_id, output_tax_id
        )
    elif vtype == VoucherType.PURCHASE:
        purchase_id = _require(system_accounts.purchase, "purchase")
        input_tax_id = _require(system_accounts.input_tax, "input_tax")
        if party_id is None:
            raise MissingRequiredReference("Purchase voucher requires a party")
        entries = derive_purchase_entries(
            party_id, total_amount, base_amount, tax_amount, purchase_id, input_tax_id
        )
    elif vtype == VoucherType.PAYMENT:
        if bank_account_id is None:
            raise MissingRequiredReference("Payment voucher requires a bank/cash account")
        entries = derive_payment_entries(
            bank_account_id, total_amount, party_id, expense_account_id
        )
    else:
        if bank_account_id is None:
            raise MissingRequiredReference("Receipt voucher requires a bank/cash account")
        entries = derive_receipt_entries(
            bank_account_id, total_amount, party_id, income_account_id
        )

    if not validate_balance(entries):
        raise UnbalancedEntries(
            sum(e.debit for e in entries), sum(e.credit for e in entries)
        )

    return PostingResult(
        voucher_type=vtype,
        voucher_number=derive_voucher_number(vtype.value, existing_count),
        total_amount=total_amount,
        base_amount=base_amount,
        tax_amount=tax_amount,
        lines=lines,
        entries=entries,
    )
