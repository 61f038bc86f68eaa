from __future__ import annotations

from rest_framework import serializers

from apps.orders.models import (
    Order,
    OrderItem,
    OrderTimelineEntry,
    PaymentHistoryEntry,
    RefundEntry,
    TrackingEntry,
)

_MONEY = {"max_digits": 12, "decimal_places": 2}


class OrderItemSerializer(serializers.ModelSerializer):
    productName = serializers.CharField(source="product_name")
    productImage = serializers.CharField(source="product_image")
    totalPrice = serializers.DecimalField(source="total_price", **_MONEY)

    class Meta:
        model = OrderItem
        fields = ["id", "product", "productName", "productImage", "quantity", "price", "totalPrice"]


class TimelineEntrySerializer(serializers.ModelSerializer):
    timestamp = serializers.DateTimeField(source="created_at")
    updatedBy = serializers.IntegerField(source="updated_by_id", allow_null=True)

    class Meta:
        model = OrderTimelineEntry
        fields = ["status", "note", "timestamp", "updatedBy"]


class PaymentHistoryEntrySerializer(serializers.ModelSerializer):
    transactionId = serializers.CharField(source="transaction_id")
    timestamp = serializers.DateTimeField(source="created_at")
    updatedBy = serializers.IntegerField(source="updated_by_id", allow_null=True)

    class Meta:
        model = PaymentHistoryEntry
        fields = ["status", "method", "transactionId", "note", "timestamp", "updatedBy"]


class RefundEntrySerializer(serializers.ModelSerializer):
    processedBy = serializers.IntegerField(source="processed_by_id", allow_null=True)
    processedAt = serializers.DateTimeField(source="processed_at")

    class Meta:
        model = RefundEntry
        fields = ["amount", "reason", "method", "status", "processedBy", "processedAt"]


class TrackingEntrySerializer(serializers.ModelSerializer):
    trackingNumber = serializers.CharField(source="tracking_number")
    trackingUrl = serializers.CharField(source="tracking_url")
    estimatedDelivery = serializers.DateTimeField(source="estimated_delivery", allow_null=True)
    timestamp = serializers.DateTimeField(source="created_at")
    updatedBy = serializers.IntegerField(source="updated_by_id", allow_null=True)

    class Meta:
        model = TrackingEntry
        fields = ["trackingNumber", "carrier", "trackingUrl", "estimatedDelivery", "note", "timestamp", "updatedBy"]


class OrderListSerializer(serializers.ModelSerializer):
    orderNumber = serializers.CharField(source="order_number")
    customerInfo = serializers.SerializerMethodField()
    items = OrderItemSerializer(many=True, read_only=True)
    shippingAddress = serializers.JSONField(source="shipping_address_data")
    totalAmount = serializers.DecimalField(source="total_amount", **_MONEY)
    paymentStatus = serializers.CharField(source="payment_status")
    paymentMethod = serializers.CharField(source="payment_method")
    trackingNumber = serializers.CharField(source="tracking_number")
    estimatedDelivery = serializers.DateTimeField(source="estimated_delivery", allow_null=True)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta:
        model = Order
        fields = [
            "id",
            "orderNumber",
            "customer",
            "customerInfo",
            "items",
            "shippingAddress",
            "totalAmount",
            "status",
            "paymentStatus",
            "paymentMethod",
            "trackingNumber",
            "estimatedDelivery",
            "createdAt",
            "updatedAt",
        ]

    def get_customerInfo(self, obj):
        return {"name": obj.customer_name, "email": obj.customer_email, "phone": obj.customer_phone}


class OrderSerializer(OrderListSerializer):
    customer = serializers.SerializerMethodField()
    billingAddress = serializers.SerializerMethodField()
    pricing = serializers.SerializerMethodField()
    payment = serializers.SerializerMethodField()
    shipping = serializers.SerializerMethodField()
    notes = serializers.SerializerMethodField()
    cancelReason = serializers.CharField(source="cancel_reason")
    statusDates = serializers.SerializerMethodField()
    timeline = TimelineEntrySerializer(many=True, read_only=True)
    paymentHistory = PaymentHistoryEntrySerializer(source="payment_history", many=True, read_only=True)
    refunds = RefundEntrySerializer(many=True, read_only=True)
    trackingHistory = TrackingEntrySerializer(source="tracking_history", many=True, read_only=True)
    metadata = serializers.SerializerMethodField()

    class Meta(OrderListSerializer.Meta):
        fields = OrderListSerializer.Meta.fields + [
            "billingAddress",
            "pricing",
            "payment",
            "shipping",
            "notes",
            "cancelReason",
            "statusDates",
            "timeline",
            "paymentHistory",
            "refunds",
            "trackingHistory",
            "metadata",
        ]

    def get_customer(self, obj):
        if obj.customer_id is None:
            return None
        return {"id": obj.customer_id, "email": obj.customer.email}

    def get_billingAddress(self, obj):
        return obj.billing_address or obj.shipping_address_data

    def get_pricing(self, obj):
        return {
            "subtotal": obj.subtotal,
            "shippingCost": obj.shipping_cost,
            "tax": obj.tax,
            "discount": obj.discount,
            "totalAmount": obj.total_amount,
            "currency": obj.currency,
        }

    def get_payment(self, obj):
        return {
            "method": obj.payment_method,
            "status": obj.payment_status,
            "transactionId": obj.transaction_id,
            "paidAt": obj.paid_at,
            "refundedAt": obj.refunded_at,
            "partiallyRefundedAt": obj.partially_refunded_at,
            "refundAmount": obj.refund_amount,
        }

    def get_shipping(self, obj):
        return {
            "method": obj.shipping_method,
            "trackingNumber": obj.tracking_number,
            "carrier": obj.carrier,
            "trackingUrl": obj.tracking_url,
            "estimatedDelivery": obj.estimated_delivery,
            "actualDelivery": obj.actual_delivery,
        }

    def get_notes(self, obj):
        return {"customer": obj.customer_note, "internal": obj.internal_note}

    def get_statusDates(self, obj):
        return {
            "confirmedAt": obj.confirmed_at,
            "processingAt": obj.processing_at,
            "shippedAt": obj.shipped_at,
            "deliveredAt": obj.delivered_at,
            "cancelledAt": obj.cancelled_at,
        }

    def get_metadata(self, obj):
        return {"source": obj.source, "userAgent": obj.user_agent, "ipAddress": obj.ip_address}


class RecentOrderSerializer(serializers.ModelSerializer):
    orderNumber = serializers.CharField(source="order_number")
    customerName = serializers.CharField(source="customer_name")
    customerEmail = serializers.CharField(source="customer_email")
    totalAmount = serializers.DecimalField(source="total_amount", **_MONEY)
    createdAt = serializers.DateTimeField(source="created_at")

    class Meta:
        model = Order
        fields = ["id", "orderNumber", "customerName", "customerEmail", "totalAmount", "status", "createdAt"]


class PublicTimelineEntrySerializer(serializers.ModelSerializer):
    timestamp = serializers.DateTimeField(source="created_at")

    class Meta:
        model = OrderTimelineEntry
        fields = ["status", "note", "timestamp"]


class PublicTrackingEntrySerializer(serializers.ModelSerializer):
    trackingNumber = serializers.CharField(source="tracking_number")
    trackingUrl = serializers.CharField(source="tracking_url")
    estimatedDelivery = serializers.DateTimeField(source="estimated_delivery", allow_null=True)
    timestamp = serializers.DateTimeField(source="created_at")

    class Meta:
        model = TrackingEntry
        fields = ["trackingNumber", "carrier", "trackingUrl", "estimatedDelivery", "note", "timestamp"]


class OrderTrackingSerializer(serializers.ModelSerializer):
    """What a shopper may see with only the order number: no contact or payment details."""

    orderNumber = serializers.CharField(source="order_number")
    items = serializers.SerializerMethodField()
    shipping = serializers.SerializerMethodField()
    timeline = PublicTimelineEntrySerializer(many=True, read_only=True)
    trackingHistory = PublicTrackingEntrySerializer(source="tracking_history", many=True, read_only=True)
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    class Meta:
        model = Order
        fields = ["orderNumber", "status", "items", "shipping", "timeline", "trackingHistory", "createdAt", "updatedAt"]

    def get_items(self, obj):
        return [{"productName": item.product_name, "quantity": item.quantity} for item in obj.items.all()]

    def get_shipping(self, obj):
        return {
            "method": obj.shipping_method,
            "city": obj.shipping_city,
            "trackingNumber": obj.tracking_number,
            "carrier": obj.carrier,
            "trackingUrl": obj.tracking_url,
            "estimatedDelivery": obj.estimated_delivery,
            "actualDelivery": obj.actual_delivery,
        }


# Input


class AddressSerializer(serializers.Serializer):
    fullName = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, default="")
    address = serializers.CharField(required=False, allow_blank=True, default="")
    city = serializers.CharField(required=False, allow_blank=True, default="")
    county = serializers.CharField(required=False, allow_blank=True, default="")
    postalCode = serializers.CharField(required=False, allow_blank=True, default="")
    country = serializers.CharField(required=False, allow_blank=True, default="Kenya")


class CustomerInfoSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True, default="")
    email = serializers.CharField(required=False, allow_blank=True, default="")
    phone = serializers.CharField(required=False, allow_blank=True, default="")


class CreateOrderSerializer(serializers.Serializer):
    """Shape only; required-ness and business checks belong to the use case."""

    customerInfo = CustomerInfoSerializer(required=False)
    items = serializers.JSONField(required=False)
    shippingAddress = AddressSerializer(required=False)
    billingAddress = serializers.DictField(required=False, allow_null=True)
    paymentMethod = serializers.CharField(required=False, allow_blank=True, default="")
    shippingMethod = serializers.ChoiceField(
        choices=[choice for choice, _ in Order.SHIPPING_METHOD_CHOICES], required=False, default="standard"
    )
    customerNote = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField(required=False, allow_blank=True, default="")
    note = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")
    trackingNumber = serializers.CharField(required=False, allow_blank=True, default="")
    estimatedDelivery = serializers.DateTimeField(required=False, allow_null=True, default=None)


class PaymentUpdateSerializer(serializers.Serializer):
    paymentStatus = serializers.CharField(required=False, allow_blank=True, default="")
    paymentMethod = serializers.CharField(required=False, allow_blank=True, default="")
    transactionId = serializers.CharField(required=False, allow_blank=True, max_length=100, default="")
    note = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")


class RefundSerializer(serializers.Serializer):
    amount = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")
    refundMethod = serializers.CharField(required=False, allow_blank=True, max_length=40, default="")


class BulkStatusUpdateSerializer(serializers.Serializer):
    orderIds = serializers.JSONField(required=False)
    status = serializers.CharField(required=False, allow_blank=True, default="")
    note = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")


class TrackingUpdateSerializer(serializers.Serializer):
    trackingNumber = serializers.CharField(required=False, allow_blank=True, max_length=100, default="")
    carrier = serializers.CharField(required=False, allow_blank=True, max_length=100, default="")
    trackingUrl = serializers.URLField(required=False, allow_blank=True, max_length=500, default="")
    estimatedDelivery = serializers.DateTimeField(required=False, allow_null=True, default=None)
    note = serializers.CharField(required=False, allow_blank=True, max_length=1000, default="")


_ADDRESS_FIELDS = {
    "fullName": "shipping_full_name",
    "phone": "shipping_phone",
    "email": "shipping_email",
    "address": "shipping_address",
    "city": "shipping_city",
    "county": "shipping_county",
    "postalCode": "shipping_postal_code",
    "country": "shipping_country",
}


class OrderUpdateSerializer(serializers.Serializer):
    customerName = serializers.CharField(source="customer_name", required=False, max_length=200)
    customerPhone = serializers.CharField(source="customer_phone", required=False, max_length=32)
    shippingAddress = serializers.DictField(required=False)
    billingAddress = serializers.DictField(source="billing_address", required=False, allow_null=True)
    shippingMethod = serializers.ChoiceField(
        source="shipping_method", choices=[choice for choice, _ in Order.SHIPPING_METHOD_CHOICES], required=False
    )
    paymentMethod = serializers.CharField(source="payment_method", required=False)
    carrier = serializers.CharField(required=False, allow_blank=True, max_length=100)
    trackingUrl = serializers.URLField(source="tracking_url", required=False, allow_blank=True, max_length=500)
    estimatedDelivery = serializers.DateTimeField(source="estimated_delivery", required=False, allow_null=True)
    customerNote = serializers.CharField(source="customer_note", required=False, allow_blank=True, max_length=500)
    internalNote = serializers.CharField(source="internal_note", required=False, allow_blank=True, max_length=1000)
    discount = serializers.DecimalField(required=False, min_value=0, **_MONEY)

    def validate(self, attrs):
        address = attrs.pop("shippingAddress", None) or {}
        for key, field_name in _ADDRESS_FIELDS.items():
            if key in address:
                attrs[field_name] = str(address[key] or "").strip()
        return attrs
