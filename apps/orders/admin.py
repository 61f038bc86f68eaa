from django.contrib import admin

from .models import (
    Order,
    OrderItem,
    OrderTimelineEntry,
    PaymentHistoryEntry,
    RefundEntry,
    TrackingEntry,
)


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ("product", "product_name", "quantity", "price", "total_price")


class OrderTimelineInline(admin.TabularInline):
    model = OrderTimelineEntry
    extra = 0
    readonly_fields = ("status", "note", "updated_by", "created_at")


class PaymentHistoryInline(admin.TabularInline):
    model = PaymentHistoryEntry
    extra = 0
    readonly_fields = ("status", "method", "transaction_id", "note", "updated_by", "created_at")


class RefundInline(admin.TabularInline):
    model = RefundEntry
    extra = 0
    readonly_fields = ("amount", "reason", "method", "status", "processed_by", "processed_at")


class TrackingInline(admin.TabularInline):
    model = TrackingEntry
    extra = 0
    readonly_fields = ("tracking_number", "carrier", "tracking_url", "estimated_delivery", "note", "created_at")


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_number", "customer_name", "total_amount", "status", "payment_status", "created_at")
    list_filter = ("status", "payment_status", "payment_method", "source")
    search_fields = ("order_number", "customer_name", "customer_email", "customer_phone")
    readonly_fields = ("order_number", "total_amount", "stock_reserved", "created_at", "updated_at")
    inlines = [OrderItemInline, OrderTimelineInline, PaymentHistoryInline, RefundInline, TrackingInline]
