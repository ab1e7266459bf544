from fastapi import APIRouter, Depends
from sqlmodel import Session

from app.core.config import get_settings
from app.database import get_session
from app.repositories.order_repo import OrderRepository
from app.repositories.store_repo import StoreRepository
from app.schemas.order import OrderCreate, OrderRecord, OrderStatusUpdate
from app.services.cart_service import CartService
from app.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["Orders"])

order_repo = OrderRepository(StoreRepository())
cart_service = CartService(get_settings())
service = OrderService(order_repo, cart_service)


@router.post("/checkout", response_model=OrderRecord, status_code=201)
def checkout(
    payload: OrderCreate,
    session: Session = Depends(get_session),
):
    """
    Create an order from the submitted cart lines.

    The total is recomputed server-side (subtotal + delivery fee + tax).
    """
    return service.checkout(session, payload)


@router.get("", response_model=list[OrderRecord])
def list_orders(session: Session = Depends(get_session)):
    """
    List all orders, newest first.
    """
    return service.list_orders(session)


@router.get("/{order_id}", response_model=OrderRecord)
def get_order(
    order_id: str,
    session: Session = Depends(get_session),
):
    return service.get_order(session, order_id)


@router.patch("/{order_id}/status", response_model=OrderRecord)
def update_order_status(
    order_id: str,
    payload: OrderStatusUpdate,
    session: Session = Depends(get_session),
):
    """
    Update order status (e.g. Processing -> Delivered) and stamp updatedAt.
    """
    return service.update_status(session, order_id, payload)
