from django.urls import path

from .views import (
    OrderBulkStatusAPI,
    OrderDetailAPI,
    OrderExportAPI,
    OrderListAPI,
    OrderPaymentAPI,
    OrderRefundAPI,
    OrderStatsAPI,
    OrderStatusAPI,
    OrderTrackingAPI,
    RecentOrdersAPI,
)

urlpatterns = [
    path("orders/", OrderListAPI.as_view(), name="api_admin_orders"),
    path("orders/stats/", OrderStatsAPI.as_view(), name="api_admin_orders_stats"),
    path("orders/recent/", RecentOrdersAPI.as_view(), name="api_admin_orders_recent"),
    path("orders/export/", OrderExportAPI.as_view(), name="api_admin_orders_export"),
    path("orders/bulk/status/", OrderBulkStatusAPI.as_view(), name="api_admin_orders_bulk_status"),
    path("orders/<int:order_id>/", OrderDetailAPI.as_view(), name="api_admin_order_detail"),
    path("orders/<int:order_id>/status/", OrderStatusAPI.as_view(), name="api_admin_order_status"),
    path("orders/<int:order_id>/tracking/", OrderTrackingAPI.as_view(), name="api_admin_order_tracking"),
    path("orders/<int:order_id>/payment/", OrderPaymentAPI.as_view(), name="api_admin_order_payment"),
    path("orders/<int:order_id>/refund/", OrderRefundAPI.as_view(), name="api_admin_order_refund"),
]
