"""
Tests for app.services.aggregation dashboard functions.
"""
from datetime import date, datetime, timezone

import pytest

from app.schemas.order import OrderRecord
from app.services.aggregation import (
    build_admin_dashboard,
    customer_stats,
    dashboard_stats,
    recent_orders,
    revenue_by_category,
    sales_series,
    top_products,
)


def _dump(models):
    return [m.model_dump() for m in models]


@pytest.fixture
def fruit_orders():
    """Two orders of the same product on the same day."""
    return [
        {
            "id": 1,
            "date": "2024-01-01",
            "total": 100,
            "items": [{"id": "A", "price": 50, "quantity": 2, "category": "Fruits"}],
        },
        {
            "id": 2,
            "date": "2024-01-01",
            "total": 50,
            "items": [{"id": "A", "price": 50, "quantity": 1, "category": "Fruits"}],
        },
    ]


class TestDashboardStats:
    """Tests for dashboard_stats()."""

    def test_empty(self, now):
        """No orders gives all-zero stats, including average order value."""
        stats = dashboard_stats([], now=now)
        assert stats.model_dump() == {
            "total_orders": 0,
            "total_revenue": 0,
            "total_customers": 0,
            "today_orders": 0,
            "today_revenue": 0,
            "average_order_value": 0,
        }

    def test_totals_and_today(self, sample_orders, now):
        stats = dashboard_stats(sample_orders, now=now)
        assert stats.total_orders == 4
        assert stats.total_revenue == 420.0
        assert stats.today_orders == 2
        assert stats.today_revenue == 160.0
        assert stats.average_order_value == 105.0

    def test_customers_default_to_distinct_order_emails(self, sample_orders, now):
        assert dashboard_stats(sample_orders, now=now).total_customers == 2

    def test_customers_from_collection(self, sample_orders, sample_customers, now):
        stats = dashboard_stats(sample_orders, sample_customers, now=now)
        assert stats.total_customers == 3

    def test_today_uses_utc_day(self, now):
        """02:00 at +05:30 on the 15th is still the 14th in UTC."""
        orders = [{"id": "x", "date": "2024-01-15T02:00:00+05:30", "total": 10}]
        stats = dashboard_stats(orders, now=now)
        assert stats.today_orders == 0
        assert stats.total_revenue == 10.0

    def test_undated_order_counts_in_totals_only(self, now):
        orders = [
            {"id": "a", "date": "2024-01-15T10:00:00Z", "total": 30},
            {"id": "b", "date": "not-a-date", "total": 70},
        ]
        stats = dashboard_stats(orders, now=now)
        assert stats.total_orders == 2
        assert stats.total_revenue == 100.0
        assert stats.today_orders == 1
        assert stats.today_revenue == 30.0


class TestRecentOrders:
    """Tests for recent_orders()."""

    def test_zero_limit(self, sample_orders):
        assert recent_orders(sample_orders, 0) == []

    def test_negative_limit(self, sample_orders):
        assert recent_orders(sample_orders, -3) == []

    @pytest.mark.parametrize("limit", [1, 2, 4, 10])
    def test_length_is_min_of_limit_and_count(self, sample_orders, limit):
        assert len(recent_orders(sample_orders, limit)) == min(limit, len(sample_orders))

    def test_newest_first(self, sample_orders):
        ids = [o.id for o in recent_orders(sample_orders, 10)]
        assert ids == ["ORD-4", "ORD-1", "ORD-2", "ORD-3"]

    def test_equal_timestamps_keep_input_order(self):
        orders = [
            {"id": "first", "date": "2024-01-15T10:00:00Z", "total": 1},
            {"id": "second", "date": "2024-01-15T10:00:00Z", "total": 2},
        ]
        assert [o.id for o in recent_orders(orders, 2)] == ["first", "second"]
        assert [o.id for o in recent_orders(orders[::-1], 2)] == ["second", "first"]

    def test_undated_orders_go_last(self):
        orders = [
            {"id": "undated", "total": 5},
            {"id": "old", "date": "2023-01-01", "total": 1},
        ]
        assert [o.id for o in recent_orders(orders, 2)] == ["old", "undated"]

    def test_returns_order_records(self, sample_orders):
        result = recent_orders(sample_orders, 1)
        assert isinstance(result[0], OrderRecord)
        assert result[0].customer_email is None


class TestSalesSeries:
    """Tests for sales_series()."""

    def test_zero_filled_oldest_first(self, sample_orders, now):
        series = sales_series(sample_orders, 7, now=now)
        assert [d.date for d in series] == [date(2024, 1, d) for d in range(9, 16)]
        by_day = {d.date: (d.order_count, d.revenue) for d in series}
        assert by_day[date(2024, 1, 15)] == (2, 160.0)
        assert by_day[date(2024, 1, 14)] == (1, 200.0)
        assert by_day[date(2024, 1, 10)] == (1, 60.0)
        assert by_day[date(2024, 1, 12)] == (0, 0.0)

    @pytest.mark.parametrize("days,expected", [(1, 160.0), (3, 360.0), (7, 420.0), (30, 420.0)])
    def test_revenue_sum_matches_window(self, sample_orders, now, days, expected):
        series = sales_series(sample_orders, days, now=now)
        assert len(series) == days
        assert sum(d.revenue for d in series) == expected

    def test_non_positive_days(self, sample_orders, now):
        assert sales_series(sample_orders, 0, now=now) == []
        assert sales_series(sample_orders, -1, now=now) == []

    def test_future_orders_excluded(self, now):
        orders = [{"id": "f", "date": "2024-01-16T00:00:00Z", "total": 99}]
        assert sum(d.revenue for d in sales_series(orders, 5, now=now)) == 0

    def test_empty_input(self, now):
        series = sales_series([], 3, now=now)
        assert [(d.order_count, d.revenue) for d in series] == [(0, 0.0)] * 3


class TestTopProducts:
    """Tests for top_products()."""

    def test_merges_line_items_by_product(self, fruit_orders):
        result = top_products(fruit_orders, 1)
        assert _dump(result) == [
            {"product_id": "A", "name": None, "quantity": 3, "revenue": 150.0}
        ]

    def test_sorted_by_revenue(self, sample_orders):
        ids = [p.product_id for p in top_products(sample_orders, 10)]
        assert ids == ["rice", "apple", "milk", "bread"]

    def test_ties_broken_by_product_id(self):
        orders = [
            {"id": 1, "total": 10, "items": [{"id": "zeta", "price": 10, "quantity": 1}]},
            {"id": 2, "total": 10, "items": [{"id": "alpha", "price": 5, "quantity": 2}]},
        ]
        assert [p.product_id for p in top_products(orders, 2)] == ["alpha", "zeta"]
        assert _dump(top_products(orders, 2)) == _dump(top_products(orders[::-1], 2))

    def test_limit(self, sample_orders):
        assert len(top_products(sample_orders, 2)) == 2
        assert top_products(sample_orders, 0) == []

    def test_first_seen_name_wins(self):
        orders = [
            {"id": 1, "total": 1, "items": [{"id": "p", "name": "Old", "price": 1, "quantity": 1}]},
            {"id": 2, "total": 1, "items": [{"id": "p", "name": "New", "price": 1, "quantity": 1}]},
        ]
        assert top_products(orders, 1)[0].name == "Old"

    def test_numeric_product_ids_are_strings(self):
        orders = [{"id": 1, "total": 3, "items": [{"id": 7, "price": 3, "quantity": 1}]}]
        assert top_products(orders, 1)[0].product_id == "7"


class TestRevenueByCategory:
    """Tests for revenue_by_category()."""

    def test_single_category(self, fruit_orders):
        assert _dump(revenue_by_category(fruit_orders)) == [
            {"category": "Fruits", "revenue": 150.0}
        ]

    def test_missing_category_is_uncategorized(self, sample_orders):
        result = revenue_by_category(sample_orders)
        assert [(c.category, c.revenue) for c in result] == [
            ("Grains", 200.0),
            ("Fruits", 120.0),
            ("Dairy", 60.0),
            ("Uncategorized", 40.0),
        ]

    def test_blank_category_is_uncategorized(self):
        orders = [{"id": 1, "total": 2, "items": [{"id": "x", "price": 2, "quantity": 1, "category": "  "}]}]
        assert revenue_by_category(orders)[0].category == "Uncategorized"

    def test_ties_broken_by_name_and_permutation_stable(self):
        orders = [
            {"id": 1, "total": 5, "items": [{"id": "a", "price": 5, "quantity": 1, "category": "Veg"}]},
            {"id": 2, "total": 5, "items": [{"id": "b", "price": 5, "quantity": 1, "category": "Bakery"}]},
        ]
        assert [c.category for c in revenue_by_category(orders)] == ["Bakery", "Veg"]
        assert _dump(revenue_by_category(orders)) == _dump(revenue_by_category(orders[::-1]))

    def test_empty(self):
        assert revenue_by_category([]) == []


class TestCustomerStats:
    """Tests for customer_stats()."""

    def test_counts(self, sample_orders, sample_customers, now):
        stats = customer_stats(sample_orders, sample_customers, now=now)
        assert stats.model_dump() == {
            "total": 3,
            "new_this_month": 2,
            "active": 2,
            "inactive": 1,
        }

    def test_customer_without_orders_is_inactive(self, now):
        customers = [{"email": "nobody@example.com", "joinDate": "2023-01-01"}]
        stats = customer_stats([], customers, now=now)
        assert stats.active == 0
        assert stats.inactive == 1

    def test_email_match_is_case_sensitive(self, sample_orders, now):
        customers = [{"email": "Asha@Example.com", "joinDate": "2023-01-01"}]
        stats = customer_stats(sample_orders, customers, now=now)
        assert stats.active == 0
        assert stats.inactive == 1

    def test_new_window_is_trailing_days(self, now):
        customers = [
            {"email": "edge@example.com", "joinDate": "2023-12-16T12:00:00Z"},
            {"email": "inside@example.com", "joinDate": "2023-12-16T12:00:01Z"},
        ]
        assert customer_stats([], customers, now=now).new_this_month == 1
        assert customer_stats([], customers, now=now, new_window_days=31).new_this_month == 2

    def test_unparseable_join_date_is_not_new(self, now):
        customers = [{"email": "x@example.com", "joinDate": "yesterday"}]
        stats = customer_stats([], customers, now=now)
        assert stats.total == 1
        assert stats.new_this_month == 0

    def test_empty(self, now):
        assert customer_stats([], [], now=now).model_dump() == {
            "total": 0,
            "new_this_month": 0,
            "active": 0,
            "inactive": 0,
        }


class TestMalformedRecords:
    """Malformed documents are skipped per record, never raised."""

    def test_orders_without_total_or_id_are_skipped(self, now):
        orders = [
            {"id": "ok", "date": "2024-01-15", "total": 10},
            {"id": "no-total", "date": "2024-01-15"},
            {"date": "2024-01-15", "total": 5},
            {"id": "negative", "total": -1},
            "garbage",
            None,
        ]
        stats = dashboard_stats(orders, now=now)
        assert stats.total_orders == 1
        assert stats.total_revenue == 10.0

    def test_malformed_line_items_are_dropped(self):
        orders = [
            {
                "id": 1,
                "total": 10,
                "items": [
                    {"id": "A", "price": 10, "quantity": 1},
                    {"price": 5, "quantity": 1},
                    {"id": "B", "price": -1, "quantity": 1},
                    {"id": "C", "price": 3, "quantity": 0},
                    {"id": "D", "quantity": 2},
                ],
            }
        ]
        assert [p.product_id for p in top_products(orders, 10)] == ["A"]

    def test_items_not_a_list(self):
        orders = [{"id": 1, "total": 10, "items": "oops"}]
        assert top_products(orders, 5) == []
        assert dashboard_stats(orders).total_orders == 1

    def test_undated_orders_still_ranked(self, now):
        orders = [{"id": 1, "total": 8, "items": [{"id": "A", "price": 4, "quantity": 2}]}]
        assert top_products(orders, 1)[0].revenue == 8.0
        assert sum(d.revenue for d in sales_series(orders, 30, now=now)) == 0

    def test_odd_contact_fields_keep_the_order(self, now):
        orders = [
            {"id": "a", "date": "2024-01-15", "total": 30},
            {
                "id": "b",
                "date": "2024-01-15",
                "total": 70,
                "status": 3,
                "customerInfo": {"email": "x@example.com", "phone": 9876543210},
            },
        ]
        stats = dashboard_stats(orders, now=now)
        assert stats.total_orders == 2
        assert stats.total_revenue == 100.0

    def test_customer_with_null_role_is_counted(self, now):
        stats = customer_stats([], [{"email": "a@example.com", "role": None}], now=now)
        assert stats.total == 1
        assert stats.inactive == 1


class TestAdminDashboard:
    """Tests for build_admin_dashboard()."""

    def test_combines_all_sections(self, sample_orders, sample_customers, now):
        dashboard = build_admin_dashboard(
            sample_orders,
            sample_customers,
            now=now,
            recent_limit=2,
            top_limit=3,
            series_days=7,
        )
        assert dashboard.stats.total_orders == 4
        assert [o.id for o in dashboard.recent_orders] == ["ORD-4", "ORD-1"]
        assert len(dashboard.sales) == 7
        assert [p.product_id for p in dashboard.top_products] == ["rice", "apple", "milk"]
        assert dashboard.revenue_by_category[0].category == "Grains"
        assert dashboard.customers.active == 2

    def test_naive_now_is_utc(self, sample_orders):
        naive = datetime(2024, 1, 15, 12, 0)
        aware = datetime(2024, 1, 15, 12, 0, tzinfo=timezone.utc)
        assert (
            dashboard_stats(sample_orders, now=naive).model_dump()
            == dashboard_stats(sample_orders, now=aware).model_dump()
        )
