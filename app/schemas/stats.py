from datetime import date, datetime
from typing import Literal

from pydantic import ConfigDict
from sqlmodel import SQLModel

from app.schemas.order import OrderRecord


class DashboardStats(SQLModel):
    """
    Headline numbers for the admin dashboard cards.
    """
    model_config = ConfigDict(extra="forbid")

    total_orders: int
    total_revenue: float
    total_customers: int
    today_orders: int
    today_revenue: float
    average_order_value: float


class DailySales(SQLModel):
    """
    Orders and revenue for one UTC calendar day.
    """
    model_config = ConfigDict(extra="forbid")

    date: date
    order_count: int
    revenue: float


class TopProduct(SQLModel):
    """
    Aggregated sales for one product across line items.
    """
    model_config = ConfigDict(extra="forbid")

    product_id: str
    name: str | None
    quantity: int
    revenue: float


class CategoryRevenue(SQLModel):
    model_config = ConfigDict(extra="forbid")

    category: str
    revenue: float


class CustomerStats(SQLModel):
    """
    Customer counts; active means at least one order under the same email.
    """
    model_config = ConfigDict(extra="forbid")

    total: int
    new_this_month: int
    active: int
    inactive: int


class AdminDashboard(SQLModel):
    """
    Full payload for the admin dashboard page.
    """
    model_config = ConfigDict(extra="forbid")

    stats: DashboardStats
    recent_orders: list[OrderRecord]
    sales: list[DailySales]
    top_products: list[TopProduct]
    revenue_by_category: list[CategoryRevenue]
    customers: CustomerStats


# ---- Date-range reports ----


class SalesReport(SQLModel):
    model_config = ConfigDict(extra="forbid")

    report_type: Literal["sales"] = "sales"
    start_date: date
    end_date: date
    total_orders: int
    total_revenue: float
    average_order_value: float
    orders_by_status: dict[str, int]
    daily_revenue: list[DailySales]
    top_products: list[TopProduct]


class ProductReportEntry(SQLModel):
    """
    Per-product totals within a report window.

    unit_price is the price on the last line item seen for the product;
    average_price is revenue / units sold.
    """
    model_config = ConfigDict(extra="forbid")

    product_id: str
    name: str | None
    category: str
    total_sold: int
    total_revenue: float
    unit_price: float
    average_price: float


class ProductsReport(SQLModel):
    model_config = ConfigDict(extra="forbid")

    report_type: Literal["products"] = "products"
    start_date: date
    end_date: date
    products: list[ProductReportEntry]


class CustomerReportEntry(SQLModel):
    model_config = ConfigDict(extra="forbid")

    email: str
    name: str | None
    total_orders: int
    total_spent: float
    first_order: datetime | None
    last_order: datetime | None


class CustomersReport(SQLModel):
    model_config = ConfigDict(extra="forbid")

    report_type: Literal["customers"] = "customers"
    start_date: date
    end_date: date
    customers: list[CustomerReportEntry]


class ReportError(SQLModel):
    """
    Returned instead of a report when the request cannot be served.

      - not_found:     unknown report type
      - invalid_input: unparseable or reversed date range
    """
    model_config = ConfigDict(extra="forbid")

    kind: Literal["not_found", "invalid_input"]
    detail: str


Report = SalesReport | ProductsReport | CustomersReport
