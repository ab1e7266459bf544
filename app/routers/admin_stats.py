from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from app.core.config import get_settings
from app.database import get_session
from app.repositories.stats_repo import StatsRepository
from app.repositories.store_repo import StoreRepository
from app.schemas.order import OrderRecord
from app.schemas.stats import (
    AdminDashboard,
    CategoryRevenue,
    CustomerStats,
    DailySales,
    DashboardStats,
    TopProduct,
)
from app.services.stats_service import StatsService

router = APIRouter(prefix="/admin/stats", tags=["Admin Stats"])

repo = StatsRepository(StoreRepository())
service = StatsService(repo, get_settings())


@router.get("", response_model=AdminDashboard)
def get_admin_dashboard(session: Session = Depends(get_session)):
    """
    Everything the admin dashboard renders in one payload:
    headline stats, recent orders, 30-day sales, top products,
    revenue by category and customer counts.
    """
    return service.get_admin_dashboard(session)


@router.get("/summary", response_model=DashboardStats)
def get_summary(session: Session = Depends(get_session)):
    return service.get_summary(session)


@router.get("/recent-orders", response_model=list[OrderRecord])
def get_recent_orders(
    limit: int | None = Query(default=None, ge=0, le=500),
    session: Session = Depends(get_session),
):
    """Most recent orders first; `limit` defaults to RECENT_ORDERS_LIMIT."""
    return service.get_recent_orders(session, limit)


@router.get("/sales", response_model=list[DailySales])
def get_sales_series(
    days: int | None = Query(default=None, ge=0, le=366),
    session: Session = Depends(get_session),
):
    """
    Daily order count and revenue for the last `days` days (UTC), oldest
    first, zero-filled.
    """
    return service.get_sales_series(session, days)


@router.get("/top-products", response_model=list[TopProduct])
def get_top_products(
    limit: int | None = Query(default=None, ge=0, le=100),
    session: Session = Depends(get_session),
):
    return service.get_top_products(session, limit)


@router.get("/categories", response_model=list[CategoryRevenue])
def get_revenue_by_category(session: Session = Depends(get_session)):
    return service.get_revenue_by_category(session)


@router.get("/customers", response_model=CustomerStats)
def get_customer_stats(session: Session = Depends(get_session)):
    return service.get_customer_stats(session)
