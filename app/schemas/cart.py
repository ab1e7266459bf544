from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.schemas.order import LineItem


class CartQuoteRequest(SQLModel):
    """
    Cart lines as held by the browser client.
    """

    model_config = ConfigDict(extra="forbid")

    items: list[LineItem]


class CartLineRead(SQLModel):
    """
    Cart line with computed line_total.
    """

    product_id: str
    name: str | None
    quantity: int
    price: float
    line_total: float


class CartSummary(SQLModel):
    """
    Priced cart: subtotal, delivery fee, tax and grand total.
    """

    items: list[CartLineRead]
    item_count: int
    subtotal: float
    delivery_fee: float
    tax: float
    total: float
    savings: float
    currency: str
