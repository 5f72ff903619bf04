"""Enumerations and constants shared by the posting engine and the reports."""
from enum import Enum


class AccountType(str, Enum):
    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class VoucherType(str, Enum):
    SALES = "SALES"
    PURCHASE = "PURCHASE"
    PAYMENT = "PAYMENT"
    RECEIPT = "RECEIPT"


# Voucher number prefix per type; anything unknown falls back to "VO"
VOUCHER_PREFIXES: dict[str, str] = {
    VoucherType.SALES.value: "SV",
    VoucherType.PURCHASE.value: "PV",
    VoucherType.PAYMENT.value: "PY",
    VoucherType.RECEIPT.value: "RC",
}
DEFAULT_VOUCHER_PREFIX = "VO"

# Tolerance for debit/credit comparison
BALANCE_EPSILON = 0.01

# Opening balances of these types sit on the debit side of a trial balance
DEBIT_NATURE_TYPES = frozenset({AccountType.ASSET.value, AccountType.EXPENSE.value})

# Report balances below half a paisa are float noise and count as zero
ZERO_BALANCE_TOLERANCE = 0.005
