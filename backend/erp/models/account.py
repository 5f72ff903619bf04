"""SQLModel model for the chart of accounts (ledgers, parties, system accounts)."""
from typing import Optional
from datetime import datetime, timezone
from sqlmodel import SQLModel, Field


class Account(SQLModel, table=True):
    """A ledger account. Balance is derived from ledger entries, never stored."""

    __tablename__ = "accounts"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(index=True, unique=True)
    type: str = Field(index=True)  # ASSET, LIABILITY, INCOME, EXPENSE
    # Customers / suppliers tracked in the outstanding report
    is_party: bool = Field(default=False, index=True)
    gst_number: Optional[str] = Field(default=None, index=True)
    # Signed; debit-natured for ASSET/EXPENSE, credit-natured otherwise
    opening_balance: float = Field(default=0.0)
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
