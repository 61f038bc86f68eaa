from __future__ import annotations

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone
from rest_framework.test import APIClient

from apps.accounts.models import AccountProfile
from apps.accounts.testing import bearer_for, create_user_with_profile
from apps.catalog.testing import make_category, make_product
from apps.dashboard.services.order_analytics_service import orders_analytics, resolve_period
from apps.orders.models import Order
from apps.orders.testing import place_order


class DashboardApiTests(TestCase):
    def setUp(self):
        self.admin = create_user_with_profile()
        create_user_with_profile(email="buyer@bondex.test", role=AccountProfile.ROLE_CUSTOMER)
        self.client = APIClient()
        self.client.credentials(HTTP_AUTHORIZATION=bearer_for(self.admin))

        category = make_category()
        self.helmet = make_product("Safety Helmet", category=category, price="1000.00", stock=20)
        self.gloves = make_product("Nitrile Gloves", category=category, price="200.00", stock=3)
        make_product("Hi-Vis Vest", category=category, price="500.00", stock=0, is_featured=True)
        place_order((self.helmet, 4))

    def test_requires_admin(self):
        response = APIClient().get("/api/admin/dashboard/")
        self.assertEqual(response.status_code, 401)

    def test_dashboard_sections(self):
        response = self.client.get("/api/admin/dashboard/")
        self.assertEqual(response.status_code, 200)
        data = response.json()["data"]

        overview = data["overview"]
        self.assertEqual(overview["totalProducts"], 3)
        self.assertEqual(overview["activeProducts"], 2)
        self.assertEqual(overview["lowStockProducts"], 2)
        self.assertEqual(overview["featuredProducts"], 1)
        self.assertEqual(overview["totalCategories"], 1)
        self.assertEqual(overview["totalUsers"], 2)
        self.assertEqual(overview["adminUsers"], 1)

        self.assertEqual(data["charts"]["topProducts"][0]["name"], "Safety Helmet")
        self.assertEqual(data["charts"]["topProducts"][0]["sales"], 4)
        self.assertEqual(data["charts"]["productsByCategory"][0]["count"], 2)

        alerts = {alert["name"]: alert["severity"] for alert in data["alerts"]["lowStockAlerts"]}
        self.assertEqual(alerts, {"Hi-Vis Vest": "critical", "Nitrile Gloves": "warning"})

        self.assertEqual(data["orders"]["totalOrders"], 1)
        self.assertEqual(data["orders"]["pendingOrders"], 1)


class OrdersAnalyticsTests(TestCase):
    def setUp(self):
        self.helmet = make_product("Safety Helmet", price="1000.00", stock=50)
        self.kept = place_order((self.helmet, 2))
        cancelled = place_order((self.helmet, 1))
        Order.objects.filter(pk=cancelled.pk).update(status="cancelled")
        old = place_order((self.helmet, 1))
        Order.objects.filter(pk=old.pk).update(created_at=timezone.now() - timedelta(days=40))

    def test_unknown_period_falls_back_to_thirty_days(self):
        self.assertEqual(resolve_period("2w"), "30d")
        self.assertEqual(resolve_period("1y"), "1y")

    def test_totals_exclude_cancelled_orders(self):
        data = orders_analytics("30d")
        self.assertEqual(data["totalStats"]["totalOrders"], 1)
        self.assertEqual(data["totalStats"]["totalRevenue"], self.kept.total_amount)
        self.assertEqual(data["totalStats"]["totalItems"], 1)
        statuses = {row["status"]: row["count"] for row in data["statusBreakdown"]}
        self.assertEqual(statuses, {"pending": 1, "cancelled": 1})
        self.assertEqual(len(data["dailyTrend"]), 1)
        self.assertEqual(data["dailyTrend"][0]["orders"], 1)
        self.assertEqual(
            [(row["method"], row["count"]) for row in data["paymentMethods"]], [("cash_on_delivery", 2)]
        )

    def test_year_period_includes_older_orders(self):
        data = orders_analytics("1y")
        self.assertEqual(data["totalStats"]["totalOrders"], 2)
        self.assertEqual(len(data["dailyTrend"]), 2)

    def test_analytics_endpoint(self):
        admin = create_user_with_profile()
        client = APIClient()
        client.credentials(HTTP_AUTHORIZATION=bearer_for(admin))
        response = client.get("/api/admin/orders/analytics/", {"period": "7d"})
        self.assertEqual(response.status_code, 200)
        body = response.json()
        self.assertEqual(body["message"], "Orders analytics retrieved successfully")
        self.assertEqual(body["data"]["period"], "7d")
        self.assertEqual(body["data"]["totalStats"]["totalOrders"], 1)
