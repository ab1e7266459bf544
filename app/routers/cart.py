from fastapi import APIRouter

from app.core.config import get_settings
from app.schemas.cart import CartQuoteRequest, CartSummary
from app.services.cart_service import CartService

router = APIRouter(prefix="/cart", tags=["Cart"])

service = CartService(get_settings())


@router.post("/quote", response_model=CartSummary)
def quote_cart(payload: CartQuoteRequest):
    """
    Price cart lines: subtotal, delivery fee (free above the threshold),
    tax and total.
    """
    return service.quote(payload.items)
