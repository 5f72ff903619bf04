from erp.models.account import Account
from erp.models.voucher import LedgerEntry, Voucher, VoucherItem, VoucherSequence

__all__ = [
    "Account",
    "Voucher",
    "VoucherItem",
    "LedgerEntry",
    "VoucherSequence",
]
