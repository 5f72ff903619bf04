"""
Domain errors raised by the posting engine and the services.

Every error is a deterministic validation failure; none is worth retrying.
The HTTP layer maps ``status_code`` onto the response.
"""
from __future__ import annotations

from typing import Any


class AccountingError(Exception):
    """Base class for all accounting rule violations."""

    status_code: int = 400

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class InvalidVoucherType(AccountingError):
    def __init__(self, voucher_type: Any) -> None:
        super().__init__(
            f"No matching posting rule for voucher type {voucher_type!r}",
            voucher_type=voucher_type,
        )


class MissingCounterAccount(AccountingError):
    """A system account the posting rule needs is not configured."""

    def __init__(self, role: str) -> None:
        super().__init__(f"System account not configured: {role}", role=role)


class MissingRequiredReference(AccountingError):
    """A party, bank or direct account is absent, or given ambiguously."""


class UnbalancedEntries(AccountingError):
    def __init__(self, total_debit: float, total_credit: float) -> None:
        super().__init__(
            f"Ledger entries do not balance: debit {total_debit:.2f} "
            f"vs credit {total_credit:.2f}",
            total_debit=total_debit,
            total_credit=total_credit,
        )


class AccountNotFound(AccountingError):
    status_code = 404

    def __init__(self, account_id: Any) -> None:
        super().__init__(f"Account not found: {account_id}", account_id=account_id)


class VoucherNotFound(AccountingError):
    status_code = 404

    def __init__(self, voucher_id: Any) -> None:
        super().__init__(f"Voucher not found: {voucher_id}", voucher_id=voucher_id)


class DuplicateAccount(AccountingError):
    status_code = 409

    def __init__(self, name: str) -> None:
        super().__init__(f"Account already exists: {name}", name=name)
