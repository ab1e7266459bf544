from sqlmodel import Session

from app.repositories.order_repo import ORDERS_KEY
from app.repositories.store_repo import StoreRepository
from app.schemas.customer import CustomerRecord, coerce_customers
from app.schemas.order import OrderRecord, coerce_orders

CUSTOMERS_KEY = "users"


class StatsRepository:
    """
    Read-only loaders for the admin dashboard.

    Documents are validated one by one; malformed ones are logged and
    skipped (see coerce_orders / coerce_customers).
    """

    def __init__(self, store: StoreRepository):
        self.store = store

    def load_orders(self, session: Session) -> list[OrderRecord]:
        return coerce_orders(self.store.get_list(session, ORDERS_KEY))

    def load_customers(self, session: Session) -> list[CustomerRecord]:
        return coerce_customers(self.store.get_list(session, CUSTOMERS_KEY))
