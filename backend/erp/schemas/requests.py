"""
Pydantic request bodies.

Voucher creation takes a tagged union on ``type``: each voucher kind
declares only the fields it needs, and the party-vs-direct-account choice
for payments and receipts is checked before the request reaches the
posting engine.
"""
from datetime import date
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from erp.accounting.constants import AccountType
from erp.accounting.posting import ItemInput


class AccountCreate(BaseModel):
    name: str = Field(min_length=1)
    type: AccountType
    is_party: bool = False
    gst_number: Optional[str] = None
    opening_balance: float = 0.0

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v


class _VoucherBase(BaseModel):
    date: date
    narration: Optional[str] = None


class _TradeVoucher(_VoucherBase):
    party_id: int
    items: list[ItemInput] = []
    # Untaxed amount used only when no items are given
    amount: Optional[float] = Field(default=None, ge=0)

    @model_validator(mode="after")
    def items_or_amount(self):
        if not self.items and self.amount is None:
            raise ValueError("provide items or an amount")
        return self


class SalesVoucherIn(_TradeVoucher):
    type: Literal["SALES"]


class PurchaseVoucherIn(_TradeVoucher):
    type: Literal["PURCHASE"]


class PaymentVoucherIn(_VoucherBase):
    type: Literal["PAYMENT"]
    bank_account_id: int
    amount: float = Field(gt=0)
    party_id: Optional[int] = None
    expense_account_id: Optional[int] = None

    @model_validator(mode="after")
    def party_xor_expense(self):
        if (self.party_id is None) == (self.expense_account_id is None):
            raise ValueError("give exactly one of party_id or expense_account_id")
        return self


class ReceiptVoucherIn(_VoucherBase):
    type: Literal["RECEIPT"]
    bank_account_id: int
    amount: float = Field(gt=0)
    party_id: Optional[int] = None
    income_account_id: Optional[int] = None

    @model_validator(mode="after")
    def party_xor_income(self):
        if (self.party_id is None) == (self.income_account_id is None):
            raise ValueError("give exactly one of party_id or income_account_id")
        return self


VoucherCreate = Annotated[
    Union[SalesVoucherIn, PurchaseVoucherIn, PaymentVoucherIn, ReceiptVoucherIn],
    Field(discriminator="type"),
]
