from datetime import date

from fastapi import HTTPException, status
from sqlmodel import Session

from app.core.config import Settings
from app.repositories.stats_repo import StatsRepository
from app.schemas.order import OrderRecord
from app.schemas.stats import (
    AdminDashboard,
    CategoryRevenue,
    CustomerStats,
    DailySales,
    DashboardStats,
    Report,
    ReportError,
    TopProduct,
)
from app.services import aggregation


class StatsService:
    """
    Orchestrates aggregated admin dashboard statistics.

    Loads a snapshot of orders/customers through the repository and hands
    it to the aggregation functions; limits and windows default to Settings.
    """

    def __init__(self, repo: StatsRepository, settings: Settings):
        self.repo = repo
        self.settings = settings

    def get_admin_dashboard(self, session: Session) -> AdminDashboard:
        return aggregation.build_admin_dashboard(
            self.repo.load_orders(session),
            self.repo.load_customers(session),
            recent_limit=self.settings.RECENT_ORDERS_LIMIT,
            top_limit=self.settings.TOP_PRODUCTS_LIMIT,
            series_days=self.settings.SALES_SERIES_DAYS,
            new_window_days=self.settings.NEW_CUSTOMER_WINDOW_DAYS,
        )

    def get_summary(self, session: Session) -> DashboardStats:
        return aggregation.dashboard_stats(
            self.repo.load_orders(session),
            self.repo.load_customers(session),
        )

    def get_recent_orders(self, session: Session, limit: int | None = None) -> list[OrderRecord]:
        if limit is None:
            limit = self.settings.RECENT_ORDERS_LIMIT
        return aggregation.recent_orders(self.repo.load_orders(session), limit)

    def get_sales_series(self, session: Session, days: int | None = None) -> list[DailySales]:
        if days is None:
            days = self.settings.SALES_SERIES_DAYS
        return aggregation.sales_series(self.repo.load_orders(session), days)

    def get_top_products(self, session: Session, limit: int | None = None) -> list[TopProduct]:
        if limit is None:
            limit = self.settings.TOP_PRODUCTS_LIMIT
        return aggregation.top_products(self.repo.load_orders(session), limit)

    def get_revenue_by_category(self, session: Session) -> list[CategoryRevenue]:
        return aggregation.revenue_by_category(self.repo.load_orders(session))

    def get_customer_stats(self, session: Session) -> CustomerStats:
        return aggregation.customer_stats(
            self.repo.load_orders(session),
            self.repo.load_customers(session),
            new_window_days=self.settings.NEW_CUSTOMER_WINDOW_DAYS,
        )

    def get_report(
        self,
        session: Session,
        report_type: str,
        start_date: date,
        end_date: date,
    ) -> Report:
        """
        Build a date-range report.

        - 404 for an unknown report type
        - 400 for a reversed date range
        """
        result = aggregation.generate_report(
            self.repo.load_orders(session),
            report_type,
            start_date,
            end_date,
        )
        if isinstance(result, ReportError):
            code = (
                status.HTTP_404_NOT_FOUND
                if result.kind == "not_found"
                else status.HTTP_400_BAD_REQUEST
            )
            raise HTTPException(status_code=code, detail=result.detail)
        return result
