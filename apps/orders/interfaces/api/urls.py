from django.urls import path

from .views import (
    MyOrderDetailAPI,
    MyOrdersAPI,
    OrderBulkStatusAPI,
    OrderCollectionAPI,
    OrderDetailAPI,
    OrderExportAPI,
    OrderPaymentAPI,
    OrderRefundAPI,
    OrderStatsAPI,
    OrderStatusAPI,
    OrderTrackingAPI,
    OrderTrackingLookupAPI,
    RecentOrdersAPI,
)

urlpatterns = [
    path("orders/", OrderCollectionAPI.as_view(), name="api_orders"),
    path("orders/stats/", OrderStatsAPI.as_view(), name="api_orders_stats"),
    path("orders/recent/", RecentOrdersAPI.as_view(), name="api_orders_recent"),
    path("orders/export/", OrderExportAPI.as_view(), name="api_orders_export"),
    path("orders/my-orders/", MyOrdersAPI.as_view(), name="api_my_orders"),
    path("orders/tracking/<str:order_number>/", OrderTrackingLookupAPI.as_view(), name="api_order_tracking_lookup"),
    path("orders/bulk/status/", OrderBulkStatusAPI.as_view(), name="api_orders_bulk_status"),
    path("orders/<int:order_id>/", OrderDetailAPI.as_view(), name="api_order_detail"),
    path("orders/<int:order_id>/customer/", MyOrderDetailAPI.as_view(), name="api_my_order_detail"),
    path("orders/<int:order_id>/status/", OrderStatusAPI.as_view(), name="api_order_status"),
    path("orders/<int:order_id>/tracking/", OrderTrackingAPI.as_view(), name="api_order_tracking"),
    path("orders/<int:order_id>/payment/", OrderPaymentAPI.as_view(), name="api_order_payment"),
    path("orders/<int:order_id>/refund/", OrderRefundAPI.as_view(), name="api_order_refund"),
]
