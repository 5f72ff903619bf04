"""SQLModel models for vouchers, their line items, ledger entries and numbering."""
from typing import Optional
from datetime import date, datetime, timezone
from sqlmodel import SQLModel, Field, Relationship

from erp.models.account import Account


class Voucher(SQLModel, table=True):
    """A recorded business transaction (sale, purchase, payment or receipt)."""

    __tablename__ = "vouchers"

    id: Optional[int] = Field(default=None, primary_key=True)

    # Core identification
    voucher_number: str = Field(index=True, unique=True)
    voucher_type: str = Field(index=True)  # SALES, PURCHASE, PAYMENT, RECEIPT
    voucher_date: date = Field(index=True)

    # Party info
    party_id: Optional[int] = Field(default=None, foreign_key="accounts.id", index=True)
    narration: Optional[str] = None

    # Financial
    total_amount: float = Field(default=0.0)

    # Soft delete; a deleted voucher never comes back
    is_deleted: bool = Field(default=False, index=True)
    deleted_at: Optional[datetime] = None

    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    party: Optional[Account] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )
    items: list["VoucherItem"] = Relationship(
        back_populates="voucher",
        sa_relationship_kwargs={"lazy": "selectin", "order_by": "VoucherItem.order"},
    )
    entries: list["LedgerEntry"] = Relationship(
        back_populates="voucher",
        sa_relationship_kwargs={"lazy": "selectin", "order_by": "LedgerEntry.id"},
    )


class VoucherItem(SQLModel, table=True):
    """A goods/services line on a SALES or PURCHASE voucher."""

    __tablename__ = "voucher_items"

    id: Optional[int] = Field(default=None, primary_key=True)
    voucher_id: Optional[int] = Field(default=None, foreign_key="vouchers.id", index=True)

    description: Optional[str] = None
    quantity: float = Field(default=0.0)
    rate: float = Field(default=0.0)
    amount: float = Field(default=0.0)  # quantity × rate
    gst_rate: float = Field(default=0.0)  # percent
    gst_amount: float = Field(default=0.0)
    total: float = Field(default=0.0)  # amount + gst_amount

    order: int = Field(default=0)  # line order within voucher

    voucher: Optional[Voucher] = Relationship(back_populates="items")


class LedgerEntry(SQLModel, table=True):
    """One debit or credit posting against one account, owned by one voucher."""

    __tablename__ = "ledger_entries"

    # Autoincrement id doubles as insertion order for same-day entries
    id: Optional[int] = Field(default=None, primary_key=True)
    voucher_id: Optional[int] = Field(default=None, foreign_key="vouchers.id", index=True)
    account_id: int = Field(foreign_key="accounts.id", index=True)
    entry_date: date = Field(index=True)
    debit: float = Field(default=0.0)
    credit: float = Field(default=0.0)

    voucher: Optional[Voucher] = Relationship(back_populates="entries")
    account: Optional[Account] = Relationship(
        sa_relationship_kwargs={"lazy": "selectin"}
    )


class VoucherSequence(SQLModel, table=True):
    """Per-type counter for voucher numbers, incremented under a row lock."""

    __tablename__ = "voucher_sequences"

    voucher_type: str = Field(primary_key=True)
    last_value: int = Field(default=0)  # numbers issued so far
    updated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
