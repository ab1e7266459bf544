import logging
import uuid
from datetime import datetime, timezone

from fastapi import HTTPException, status
from sqlmodel import Session

from app.repositories.order_repo import OrderRepository
from app.schemas.order import (
    DEFAULT_STATUS,
    OrderCreate,
    OrderRecord,
    OrderStatusUpdate,
    coerce_orders,
)
from app.services import aggregation
from app.services.cart_service import CartService

logger = logging.getLogger(__name__)


class OrderService:
    """
    Business logic for orders.

    Responsibilities:
      - Create an order from submitted cart lines (priced by CartService)
      - Look up orders by id
      - Admin status changes (sets updatedAt; last write wins)
    """

    def __init__(self, order_repo: OrderRepository, cart_service: CartService):
        self.order_repo = order_repo
        self.cart_service = cart_service

    # -------- Checkout --------

    def checkout(self, session: Session, payload: OrderCreate) -> OrderRecord:
        """
        Convert cart lines into an Order.

        Steps:
          1. Reject an empty cart.
          2. Price the cart (subtotal + delivery fee + tax).
          3. Append the order document with status 'Processing'.
        """
        if not payload.items:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Cart is empty",
            )

        summary = self.cart_service.quote(payload.items)

        order = OrderRecord(
            id=f"ORD-{uuid.uuid4().hex[:8].upper()}",
            created_at=datetime.now(timezone.utc),
            status=DEFAULT_STATUS,
            total=summary.total,
            items=payload.items,
            customer_info=payload.customer_info,
        )
        self.order_repo.append(session, order.to_document())
        logger.info("Order %s placed (%d items, total %.2f)", order.id, summary.item_count, order.total)
        return order

    # -------- Lookups --------

    def list_orders(self, session: Session) -> list[OrderRecord]:
        """All valid orders, newest first."""
        orders = self.order_repo.list_documents(session)
        return aggregation.recent_orders(orders, len(orders))

    def get_order(self, session: Session, order_id: str) -> OrderRecord:
        """
        Get a single order.

        - 404 if the id is unknown or the stored document is unusable.
        """
        doc = self.order_repo.find_document(self.order_repo.list_documents(session), order_id)
        records = coerce_orders([doc]) if doc is not None else []
        if not records:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )
        return records[0]

    # -------- Admin operations --------

    def update_status(
        self,
        session: Session,
        order_id: str,
        payload: OrderStatusUpdate,
    ) -> OrderRecord:
        """
        Set a new status on the stored order and stamp updatedAt.

        Statuses are free-form labels ("Processing", "Delivered",
        "Cancelled", ...); no transition rules apply.
        """
        orders = self.order_repo.list_documents(session)
        doc = self.order_repo.find_document(orders, order_id)
        if doc is None or not coerce_orders([doc]):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Order not found",
            )

        previous = doc.get("status")
        doc["status"] = payload.status
        doc["updatedAt"] = datetime.now(timezone.utc).isoformat()
        self.order_repo.save_documents(session, orders)
        logger.info("Order %s status %s -> %s", order_id, previous, payload.status)

        return coerce_orders([doc])[0]
