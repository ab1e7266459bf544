from datetime import datetime, timezone

from sqlalchemy import Column, Text
from sqlmodel import SQLModel, Field


class StoreEntry(SQLModel, table=True):
    """
    One JSON document in the key-value store.

    Keys used by the storefront:
      - orders: list of order documents
      - users:  list of customer documents
    """

    __tablename__ = "store_entries"

    key: str = Field(
        primary_key=True,
        max_length=64,
        description="Document key (e.g. 'orders', 'users')",
    )

    # Serialized JSON; parsed lazily by StoreRepository
    value: str = Field(
        sa_column=Column(Text, nullable=False),
        description="JSON-encoded document",
    )

    updated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Last write timestamp (UTC)",
    )
