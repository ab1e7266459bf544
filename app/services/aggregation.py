"""
Order and revenue aggregation for the admin dashboard and reports.

Every function here is pure: it takes order/customer collections (validated
records or raw store documents) plus explicit parameters and returns plain
result models. Nothing reads storage or the clock except through the `now`
argument, which defaults to the current time.

Timezone convention: all timestamps are normalized to UTC and bucketed by
their UTC calendar date.

Malformed records never abort an aggregation:
  - orders failing validation are skipped everywhere
  - undated orders count toward totals but not toward "today", the sales
    series or date-range reports
  - malformed line items are dropped from their order
"""
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Any, Callable, Iterable

from app.schemas.customer import CustomerRecord, coerce_customers
from app.schemas.order import OrderRecord, coerce_orders, parse_timestamp
from app.schemas.stats import (
    AdminDashboard,
    CategoryRevenue,
    CustomerReportEntry,
    CustomersReport,
    CustomerStats,
    DailySales,
    DashboardStats,
    ProductReportEntry,
    ProductsReport,
    Report,
    ReportError,
    SalesReport,
    TopProduct,
)

SALES_REPORT_TOP_PRODUCTS = 10


def _utc_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    return parse_timestamp(now)


def _today(now: datetime | None) -> date:
    return _utc_now(now).date()


# ---------------------------------------------------------
# Grouping helpers
# ---------------------------------------------------------


@dataclass
class _ProductTally:
    product_id: str
    name: str | None
    category: str
    quantity: int = 0
    revenue: float = 0.0
    last_price: float = 0.0


@dataclass
class _CustomerTally:
    email: str
    name: str | None
    total_orders: int = 0
    total_spent: float = 0.0
    first_order: datetime | None = None
    last_order: datetime | None = None


def _tally_products(orders: list[OrderRecord]) -> list[_ProductTally]:
    """
    Sum quantity and revenue per product id.

    Name and category come from the first line item seen; last_price from
    the last one. Sorted by revenue descending, then product id ascending.
    """
    tallies: dict[str, _ProductTally] = {}
    for order in orders:
        for item in order.items:
            tally = tallies.get(item.product_id)
            if tally is None:
                tally = _ProductTally(
                    product_id=item.product_id,
                    name=item.name,
                    category=item.category_label,
                )
                tallies[item.product_id] = tally
            tally.quantity += item.quantity
            tally.revenue += item.line_total
            tally.last_price = item.price

    return sorted(tallies.values(), key=lambda t: (-t.revenue, t.product_id))


def _daily_totals(orders: list[OrderRecord]) -> dict[date, DailySales]:
    """Order count and revenue per UTC day, ascending by day. Undated orders are ignored."""
    buckets: dict[date, DailySales] = {}
    for order in orders:
        day = order.order_date
        if day is None:
            continue
        bucket = buckets.get(day)
        if bucket is None:
            bucket = DailySales(date=day, order_count=0, revenue=0.0)
            buckets[day] = bucket
        bucket.order_count += 1
        bucket.revenue += order.total
    return {day: buckets[day] for day in sorted(buckets)}


# ---------------------------------------------------------
# Dashboard
# ---------------------------------------------------------


def dashboard_stats(
    orders: Iterable[Any],
    customers: Iterable[Any] | None = None,
    now: datetime | None = None,
) -> DashboardStats:
    """
    Headline totals plus today's orders and revenue.

    total_customers counts customer records when a customer collection is
    given, otherwise distinct customer emails seen on orders.
    """
    records = coerce_orders(orders)
    today = _today(now)

    total_revenue = sum((o.total for o in records), 0.0)
    todays = [o for o in records if o.order_date == today]

    if customers is None:
        total_customers = len({o.customer_email for o in records if o.customer_email})
    else:
        total_customers = len(coerce_customers(customers))

    return DashboardStats(
        total_orders=len(records),
        total_revenue=total_revenue,
        total_customers=total_customers,
        today_orders=len(todays),
        today_revenue=sum((o.total for o in todays), 0.0),
        average_order_value=total_revenue / len(records) if records else 0.0,
    )


def recent_orders(orders: Iterable[Any], limit: int) -> list[OrderRecord]:
    """
    Most recent orders first, at most `limit` of them.

    Orders with equal timestamps keep their input order; undated orders go
    after all dated ones.
    """
    if limit <= 0:
        return []
    records = coerce_orders(orders)
    dated = [o for o in records if o.created_at is not None]
    undated = [o for o in records if o.created_at is None]
    # sorted() stays stable with reverse=True
    dated = sorted(dated, key=lambda o: o.created_at, reverse=True)
    return (dated + undated)[:limit]


def sales_series(
    orders: Iterable[Any],
    days: int,
    now: datetime | None = None,
) -> list[DailySales]:
    """
    One entry per day for the last `days` days ending today, oldest first.
    Days without orders are zero-filled.
    """
    if days <= 0:
        return []
    today = _today(now)
    start = today - timedelta(days=days - 1)

    in_window = [
        o for o in coerce_orders(orders)
        if o.order_date is not None and start <= o.order_date <= today
    ]
    totals = _daily_totals(in_window)

    series: list[DailySales] = []
    for offset in range(days):
        day = start + timedelta(days=offset)
        bucket = totals.get(day)
        if bucket is None:
            bucket = DailySales(date=day, order_count=0, revenue=0.0)
        series.append(bucket)
    return series


def top_products(orders: Iterable[Any], limit: int) -> list[TopProduct]:
    """
    Best sellers by revenue (price * quantity over all line items).
    Ties are broken by product id ascending.
    """
    if limit <= 0:
        return []
    tallies = _tally_products(coerce_orders(orders))
    return [
        TopProduct(
            product_id=t.product_id,
            name=t.name,
            quantity=t.quantity,
            revenue=t.revenue,
        )
        for t in tallies[:limit]
    ]


def revenue_by_category(orders: Iterable[Any]) -> list[CategoryRevenue]:
    revenue: dict[str, float] = {}
    for order in coerce_orders(orders):
        for item in order.items:
            label = item.category_label
            revenue[label] = revenue.get(label, 0.0) + item.line_total

    ranked = sorted(revenue.items(), key=lambda kv: (-kv[1], kv[0]))
    return [CategoryRevenue(category=c, revenue=r) for c, r in ranked]


def customer_stats(
    orders: Iterable[Any],
    customers: Iterable[Any],
    now: datetime | None = None,
    new_window_days: int = 30,
) -> CustomerStats:
    """
    Count customers, those who joined within the trailing window, and those
    with at least one order.

    Emails are matched exactly (case-sensitive), as stored.
    """
    people: list[CustomerRecord] = coerce_customers(customers)
    cutoff = _utc_now(now) - timedelta(days=new_window_days)

    ordering_emails = {o.customer_email for o in coerce_orders(orders) if o.customer_email}

    new_count = sum(
        1 for c in people if c.join_date is not None and c.join_date > cutoff
    )
    active = sum(1 for c in people if c.email in ordering_emails)

    return CustomerStats(
        total=len(people),
        new_this_month=new_count,
        active=active,
        inactive=len(people) - active,
    )


def build_admin_dashboard(
    orders: Iterable[Any],
    customers: Iterable[Any],
    now: datetime | None = None,
    recent_limit: int = 10,
    top_limit: int = 5,
    series_days: int = 30,
    new_window_days: int = 30,
) -> AdminDashboard:
    """
    Everything the dashboard page renders, computed from one snapshot.
    """
    records = coerce_orders(orders)
    people = coerce_customers(customers)
    now = _utc_now(now)

    return AdminDashboard(
        stats=dashboard_stats(records, people, now=now),
        recent_orders=recent_orders(records, recent_limit),
        sales=sales_series(records, series_days, now=now),
        top_products=top_products(records, top_limit),
        revenue_by_category=revenue_by_category(records),
        customers=customer_stats(records, people, now=now, new_window_days=new_window_days),
    )


# ---------------------------------------------------------
# Date-range reports
# ---------------------------------------------------------


def parse_report_date(value: Any) -> date | None:
    """Accept a date, a datetime (UTC day) or an ISO string; None if unparseable."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.date()


def filter_orders_by_date(
    orders: Iterable[Any],
    start_date: date,
    end_date: date,
) -> list[OrderRecord]:
    """Orders whose UTC day lies in [start_date, end_date]; undated orders are excluded."""
    return [
        o for o in coerce_orders(orders)
        if o.order_date is not None and start_date <= o.order_date <= end_date
    ]


def build_sales_report(
    orders: list[OrderRecord],
    start_date: date,
    end_date: date,
) -> SalesReport:
    total_revenue = sum((o.total for o in orders), 0.0)

    status_counts: dict[str, int] = {}
    for order in orders:
        status_counts[order.status] = status_counts.get(order.status, 0) + 1

    return SalesReport(
        start_date=start_date,
        end_date=end_date,
        total_orders=len(orders),
        total_revenue=total_revenue,
        average_order_value=total_revenue / len(orders) if orders else 0.0,
        orders_by_status={s: status_counts[s] for s in sorted(status_counts)},
        daily_revenue=list(_daily_totals(orders).values()),
        top_products=top_products(orders, SALES_REPORT_TOP_PRODUCTS),
    )


def build_products_report(
    orders: list[OrderRecord],
    start_date: date,
    end_date: date,
) -> ProductsReport:
    entries = [
        ProductReportEntry(
            product_id=t.product_id,
            name=t.name,
            category=t.category,
            total_sold=t.quantity,
            total_revenue=t.revenue,
            unit_price=t.last_price,
            average_price=t.revenue / t.quantity,
        )
        for t in _tally_products(orders)
    ]
    return ProductsReport(start_date=start_date, end_date=end_date, products=entries)


def build_customers_report(
    orders: list[OrderRecord],
    start_date: date,
    end_date: date,
) -> CustomersReport:
    """
    Per-email order count, spend and first/last order time.
    Orders without a customer email are left out.
    """
    tallies: dict[str, _CustomerTally] = {}
    for order in orders:
        email = order.customer_email
        if not email:
            continue
        tally = tallies.get(email)
        if tally is None:
            tally = _CustomerTally(email=email, name=order.customer_info.full_name)
            tallies[email] = tally
        tally.total_orders += 1
        tally.total_spent += order.total
        if order.created_at is not None:
            if tally.first_order is None or order.created_at < tally.first_order:
                tally.first_order = order.created_at
            if tally.last_order is None or order.created_at > tally.last_order:
                tally.last_order = order.created_at

    ranked = sorted(tallies.values(), key=lambda t: (-t.total_spent, t.email))
    return CustomersReport(
        start_date=start_date,
        end_date=end_date,
        customers=[
            CustomerReportEntry(
                email=t.email,
                name=t.name,
                total_orders=t.total_orders,
                total_spent=t.total_spent,
                first_order=t.first_order,
                last_order=t.last_order,
            )
            for t in ranked
        ],
    )


REPORT_BUILDERS: dict[str, Callable[[list[OrderRecord], date, date], Report]] = {
    "sales": build_sales_report,
    "products": build_products_report,
    "customers": build_customers_report,
}


def generate_report(
    orders: Iterable[Any],
    report_type: str,
    start_date: Any,
    end_date: Any,
) -> Report | ReportError:
    """
    Filter orders to [start_date, end_date] (inclusive, by UTC day) and build
    the requested report.

    Returns ReportError instead of raising:
      - kind="not_found" for an unknown report type
      - kind="invalid_input" for an unparseable or reversed date range
    """
    builder = REPORT_BUILDERS.get(report_type)
    if builder is None:
        return ReportError(
            kind="not_found",
            detail=f"unsupported report type: {report_type}",
        )

    start = parse_report_date(start_date)
    end = parse_report_date(end_date)
    if start is None or end is None:
        return ReportError(
            kind="invalid_input",
            detail="start_date and end_date must be ISO dates (YYYY-MM-DD)",
        )
    if start > end:
        return ReportError(
            kind="invalid_input",
            detail="start_date must not be after end_date",
        )

    return builder(filter_orders_by_date(orders, start, end), start, end)
