from __future__ import annotations

from rest_framework.views import APIView

from apps.dashboard.services.dashboard_service import dashboard_stats
from apps.dashboard.services.order_analytics_service import orders_analytics
from bondex.api_responses import api_success


class DashboardStatsAPI(APIView):
    def get(self, request):
        return api_success(message="Dashboard statistics retrieved successfully", data=dashboard_stats())


class OrdersAnalyticsAPI(APIView):
    def get(self, request):
        data = orders_analytics(request.query_params.get("period"))
        return api_success(message="Orders analytics retrieved successfully", data=data)
