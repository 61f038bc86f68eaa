from django.urls import path

from .views import DashboardStatsAPI, OrdersAnalyticsAPI

urlpatterns = [
    path("dashboard/", DashboardStatsAPI.as_view(), name="api_admin_dashboard"),
    path("orders/analytics/", OrdersAnalyticsAPI.as_view(), name="api_admin_orders_analytics"),
]
