from __future__ import annotations

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from apps.orders.domain.payment_state_machine import PaymentMethod, PaymentStatus
from apps.orders.domain.pricing import line_total, total_amount
from apps.orders.domain.state_machine import OrderStatus


def _choices(enum_cls) -> list[tuple[str, str]]:
    return [(member.value, member.value.replace("_", " ").capitalize()) for member in enum_cls]


class Order(models.Model):
    CURRENCY_CHOICES = [("KES", "KES"), ("USD", "USD"), ("EUR", "EUR")]

    SHIPPING_METHOD_CHOICES = [
        ("standard", "Standard"),
        ("express", "Express"),
        ("overnight", "Overnight"),
        ("pickup", "Pickup"),
    ]

    SOURCE_CHOICES = [
        ("web", "Web"),
        ("mobile", "Mobile"),
        ("admin", "Admin"),
        ("api", "API"),
    ]

    order_number = models.CharField(max_length=16, unique=True)
    customer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )

    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField(db_index=True)
    customer_phone = models.CharField(max_length=32)

    shipping_full_name = models.CharField(max_length=200, blank=True, default="")
    shipping_phone = models.CharField(max_length=32, blank=True, default="")
    shipping_email = models.EmailField(blank=True, default="")
    shipping_address = models.CharField(max_length=255)
    shipping_city = models.CharField(max_length=100)
    shipping_county = models.CharField(max_length=100)
    shipping_postal_code = models.CharField(max_length=20, blank=True, default="")
    shipping_country = models.CharField(max_length=100, default="Kenya")
    billing_address = models.JSONField(null=True, blank=True)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    shipping_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    discount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    currency = models.CharField(max_length=3, choices=CURRENCY_CHOICES, default="KES")

    status = models.CharField(
        max_length=20,
        choices=_choices(OrderStatus),
        default=OrderStatus.PENDING.value,
        db_index=True,
    )
    confirmed_at = models.DateTimeField(null=True, blank=True)
    processing_at = models.DateTimeField(null=True, blank=True)
    shipped_at = models.DateTimeField(null=True, blank=True)
    delivered_at = models.DateTimeField(null=True, blank=True)
    cancelled_at = models.DateTimeField(null=True, blank=True)
    cancel_reason = models.CharField(max_length=500, blank=True, default="")

    payment_method = models.CharField(
        max_length=20,
        choices=_choices(PaymentMethod),
        default=PaymentMethod.CASH_ON_DELIVERY.value,
    )
    payment_status = models.CharField(
        max_length=20,
        choices=_choices(PaymentStatus),
        default=PaymentStatus.PENDING.value,
        db_index=True,
    )
    transaction_id = models.CharField(max_length=100, blank=True, default="")
    paid_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    partially_refunded_at = models.DateTimeField(null=True, blank=True)
    refund_amount = models.DecimalField(max_digits=12, decimal_places=2, default=0)

    shipping_method = models.CharField(max_length=20, choices=SHIPPING_METHOD_CHOICES, default="standard")
    tracking_number = models.CharField(max_length=100, blank=True, default="")
    carrier = models.CharField(max_length=100, blank=True, default="")
    tracking_url = models.URLField(max_length=500, blank=True, default="")
    estimated_delivery = models.DateTimeField(null=True, blank=True)
    actual_delivery = models.DateTimeField(null=True, blank=True)

    customer_note = models.CharField(max_length=500, blank=True, default="")
    internal_note = models.CharField(max_length=1000, blank=True, default="")

    source = models.CharField(max_length=10, choices=SOURCE_CHOICES, default="web")
    user_agent = models.TextField(blank=True, default="")
    ip_address = models.GenericIPAddressField(null=True, blank=True)

    # True while line-item quantities are held out of product stock.
    stock_reserved = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status", "created_at"], name="orders_orde_status_7d2e1a_idx"),
            models.Index(fields=["payment_status", "created_at"], name="orders_orde_payment_4b9c3f_idx"),
            models.Index(fields=["total_amount"], name="orders_orde_total_a_2f8e6d_idx"),
        ]

    def __str__(self) -> str:
        return self.order_number

    def save(self, *args, **kwargs):
        self.total_amount = total_amount(
            subtotal=self.subtotal,
            shipping=self.shipping_cost,
            tax=self.tax,
            discount=self.discount,
        )
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = set(update_fields) | {"total_amount", "updated_at"}
        super().save(*args, **kwargs)

    @property
    def shipping_address_data(self) -> dict:
        return {
            "fullName": self.shipping_full_name,
            "phone": self.shipping_phone,
            "email": self.shipping_email,
            "address": self.shipping_address,
            "city": self.shipping_city,
            "county": self.shipping_county,
            "postalCode": self.shipping_postal_code,
            "country": self.shipping_country,
        }


class OrderItem(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="items")
    product = models.ForeignKey(
        "catalog.Product",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="order_items",
    )
    product_name = models.CharField(max_length=200)
    product_image = models.CharField(max_length=500, blank=True, default="")
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_price = models.DecimalField(max_digits=12, decimal_places=2)

    class Meta:
        ordering = ["id"]

    def __str__(self) -> str:
        return f"{self.order} - {self.product_name} x{self.quantity}"

    def save(self, *args, **kwargs):
        self.total_price = line_total(self.price, self.quantity)
        super().save(*args, **kwargs)


class OrderTimelineEntry(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="timeline")
    status = models.CharField(max_length=20)
    note = models.CharField(max_length=1000, blank=True, default="")
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]

    def __str__(self) -> str:
        return f"{self.order_id}:{self.status}"


class PaymentHistoryEntry(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="payment_history")
    status = models.CharField(max_length=20)
    method = models.CharField(max_length=20, blank=True, default="")
    transaction_id = models.CharField(max_length=100, blank=True, default="")
    note = models.CharField(max_length=1000, blank=True, default="")
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]


class RefundEntry(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="refunds")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    reason = models.CharField(max_length=500)
    method = models.CharField(max_length=40, default="original_payment")
    status = models.CharField(max_length=20, default="processed")
    processed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    processed_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["processed_at", "id"]


class TrackingEntry(models.Model):
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="tracking_history")
    tracking_number = models.CharField(max_length=100)
    carrier = models.CharField(max_length=100, blank=True, default="")
    tracking_url = models.CharField(max_length=500, blank=True, default="")
    estimated_delivery = models.DateTimeField(null=True, blank=True)
    note = models.CharField(max_length=1000, blank=True, default="")
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["created_at", "id"]
