from sqlmodel import Session

from app.repositories.store_repo import StoreRepository

ORDERS_KEY = "orders"


class OrderRepository:
    """
    Data access for the `orders` store document.

    Works on raw documents so that records the aggregation layer would
    skip are still written back untouched.
    """

    def __init__(self, store: StoreRepository):
        self.store = store

    def list_documents(self, session: Session) -> list:
        return self.store.get_list(session, ORDERS_KEY)

    def save_documents(self, session: Session, orders: list) -> None:
        self.store.put(session, ORDERS_KEY, orders)

    def find_document(self, orders: list, order_id: str) -> dict | None:
        """Return the first stored order whose id matches `order_id`."""
        for doc in orders:
            if isinstance(doc, dict) and str(doc.get("id")) == order_id:
                return doc
        return None

    def append(self, session: Session, order: dict) -> dict:
        orders = self.list_documents(session)
        orders.append(order)
        self.save_documents(session, orders)
        return order
