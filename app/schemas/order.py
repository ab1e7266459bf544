import logging
from datetime import date, datetime, timezone
from typing import Any, Iterable

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
)

logger = logging.getLogger(__name__)

UNCATEGORIZED = "Uncategorized"
DEFAULT_STATUS = "Processing"


def parse_timestamp(value: Any) -> datetime | None:
    """
    Lenient timestamp parsing for stored documents.

    Accepts datetimes, dates and ISO 8601 strings (``2024-01-01``,
    ``2024-01-01T10:00:00.000Z``). Naive values are taken to be UTC.
    Anything else parses to None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _coerce_identifier(value: Any) -> Any:
    # Stored ids may be numbers (1) or strings ("ORD-1A2B3C4D")
    if isinstance(value, bool):
        return value
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return value


def text_or_none(value: Any) -> str | None:
    """Free-text form fields: numbers become strings, other non-strings None."""
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return value.strip() or None
    return None


class LineItem(BaseModel):
    """
    One product entry inside a cart or an order.

    Stored shape (camelCase keys):
      - id, name, price, quantity, category, originalPrice, unit
    """

    model_config = ConfigDict(populate_by_name=True)

    product_id: str = Field(alias="id", min_length=1)
    name: str | None = None
    price: float = Field(ge=0)
    quantity: int = Field(gt=0)
    category: str | None = None
    original_price: float | None = Field(default=None, alias="originalPrice", ge=0)
    unit: str | None = None

    @field_validator("product_id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_identifier(v)

    @field_validator("name", "category", "unit", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity

    @property
    def category_label(self) -> str:
        return self.category or UNCATEGORIZED


class CustomerInfo(BaseModel):
    """
    Contact details captured at checkout.
    """

    model_config = ConfigDict(populate_by_name=True)

    email: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    phone: str | None = None
    address: str | None = None

    @field_validator("email", "first_name", "last_name", "phone", "address", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Any:
        return text_or_none(v)

    @property
    def full_name(self) -> str | None:
        parts = [p for p in (self.first_name, self.last_name) if p]
        return " ".join(parts) or None


class OrderRecord(BaseModel):
    """
    A placed order as kept in the `orders` store document.

    Lenient on purpose for the fields aggregation can live without:
      - unparseable `date` -> None (kept out of date-bucketed stats)
      - malformed line items are dropped individually
      - malformed `customerInfo` -> None

    Missing `id` or a missing/negative `total` still fail validation;
    such documents are skipped by coerce_orders().
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(min_length=1)
    created_at: datetime | None = Field(default=None, alias="date")
    status: str = DEFAULT_STATUS
    total: float = Field(ge=0)
    items: list[LineItem] = Field(default_factory=list)
    customer_info: CustomerInfo | None = Field(default=None, alias="customerInfo")
    updated_at: datetime | None = Field(default=None, alias="updatedAt")

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _coerce_identifier(v)

    @field_validator("created_at", "updated_at", mode="before")
    @classmethod
    def lenient_timestamp(cls, v: Any) -> datetime | None:
        return parse_timestamp(v)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return text_or_none(v) or DEFAULT_STATUS

    @field_validator("items", mode="before")
    @classmethod
    def drop_malformed_items(cls, v: Any) -> list:
        if not isinstance(v, list):
            return []
        kept: list[LineItem] = []
        for raw in v:
            if isinstance(raw, LineItem):
                kept.append(raw)
                continue
            try:
                kept.append(LineItem.model_validate(raw))
            except ValidationError:
                logger.warning("Dropping malformed line item: %r", raw)
        return kept

    @field_validator("customer_info", mode="before")
    @classmethod
    def lenient_customer_info(cls, v: Any) -> Any:
        if v is None or isinstance(v, CustomerInfo):
            return v
        try:
            return CustomerInfo.model_validate(v)
        except ValidationError:
            logger.warning("Dropping malformed customerInfo: %r", v)
            return None

    @property
    def order_date(self) -> date | None:
        """UTC calendar day of the order, or None when undated."""
        if self.created_at is None:
            return None
        return self.created_at.date()

    @property
    def customer_email(self) -> str | None:
        if self.customer_info is None:
            return None
        return self.customer_info.email

    def to_document(self) -> dict:
        """Serialize back to the stored camelCase shape."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def coerce_orders(raw_orders: Iterable[Any]) -> list[OrderRecord]:
    """
    Validate order documents one by one.

    Records that are already OrderRecord pass through untouched; documents
    that fail validation are logged and skipped.
    """
    orders: list[OrderRecord] = []
    for raw in raw_orders:
        if isinstance(raw, OrderRecord):
            orders.append(raw)
            continue
        try:
            orders.append(OrderRecord.model_validate(raw))
        except ValidationError as exc:
            order_id = raw.get("id") if isinstance(raw, dict) else None
            logger.warning(
                "Skipping malformed order %r (%d validation errors)",
                order_id,
                exc.error_count(),
            )
    return orders


class OrderCreate(BaseModel):
    """
    Checkout payload: the cart lines plus contact details.

    Backend derives:
      - id, date, status = 'Processing'
      - total from cart pricing (subtotal + delivery fee + tax)
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    items: list[LineItem]
    customer_info: CustomerInfo | None = Field(default=None, alias="customerInfo")


class OrderStatusUpdate(BaseModel):
    """
    Admin payload to change order status.
    """

    model_config = ConfigDict(extra="forbid")

    status: str = Field(max_length=50)

    @field_validator("status")
    @classmethod
    def not_empty(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("status cannot be empty")
        return v
