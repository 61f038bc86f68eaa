import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


def _user_fk(related_name):
    return models.ForeignKey(
        blank=True,
        null=True,
        on_delete=django.db.models.deletion.SET_NULL,
        related_name=related_name,
        to=settings.AUTH_USER_MODEL,
    )


def _order_fk(related_name):
    return models.ForeignKey(
        on_delete=django.db.models.deletion.CASCADE,
        related_name=related_name,
        to="orders.order",
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("catalog", "0001_initial"),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("order_number", models.CharField(max_length=16, unique=True)),
                ("customer_name", models.CharField(max_length=200)),
                ("customer_email", models.EmailField(db_index=True, max_length=254)),
                ("customer_phone", models.CharField(max_length=32)),
                ("shipping_full_name", models.CharField(blank=True, default="", max_length=200)),
                ("shipping_phone", models.CharField(blank=True, default="", max_length=32)),
                ("shipping_email", models.EmailField(blank=True, default="", max_length=254)),
                ("shipping_address", models.CharField(max_length=255)),
                ("shipping_city", models.CharField(max_length=100)),
                ("shipping_county", models.CharField(max_length=100)),
                ("shipping_postal_code", models.CharField(blank=True, default="", max_length=20)),
                ("shipping_country", models.CharField(default="Kenya", max_length=100)),
                ("billing_address", models.JSONField(blank=True, null=True)),
                ("subtotal", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("shipping_cost", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("tax", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("discount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ("total_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                (
                    "currency",
                    models.CharField(
                        choices=[("KES", "KES"), ("USD", "USD"), ("EUR", "EUR")],
                        default="KES",
                        max_length=3,
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("processing", "Processing"),
                            ("shipped", "Shipped"),
                            ("delivered", "Delivered"),
                            ("cancelled", "Cancelled"),
                            ("refunded", "Refunded"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("processing_at", models.DateTimeField(blank=True, null=True)),
                ("shipped_at", models.DateTimeField(blank=True, null=True)),
                ("delivered_at", models.DateTimeField(blank=True, null=True)),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                ("cancel_reason", models.CharField(blank=True, default="", max_length=500)),
                (
                    "payment_method",
                    models.CharField(
                        choices=[
                            ("mpesa", "Mpesa"),
                            ("stripe", "Stripe"),
                            ("bank_transfer", "Bank transfer"),
                            ("cash_on_delivery", "Cash on delivery"),
                        ],
                        default="cash_on_delivery",
                        max_length=20,
                    ),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("paid", "Paid"),
                            ("failed", "Failed"),
                            ("refunded", "Refunded"),
                            ("partially_refunded", "Partially refunded"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("transaction_id", models.CharField(blank=True, default="", max_length=100)),
                ("paid_at", models.DateTimeField(blank=True, null=True)),
                ("refunded_at", models.DateTimeField(blank=True, null=True)),
                ("partially_refunded_at", models.DateTimeField(blank=True, null=True)),
                ("refund_amount", models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                (
                    "shipping_method",
                    models.CharField(
                        choices=[
                            ("standard", "Standard"),
                            ("express", "Express"),
                            ("overnight", "Overnight"),
                            ("pickup", "Pickup"),
                        ],
                        default="standard",
                        max_length=20,
                    ),
                ),
                ("tracking_number", models.CharField(blank=True, default="", max_length=100)),
                ("carrier", models.CharField(blank=True, default="", max_length=100)),
                ("tracking_url", models.URLField(blank=True, default="", max_length=500)),
                ("estimated_delivery", models.DateTimeField(blank=True, null=True)),
                ("actual_delivery", models.DateTimeField(blank=True, null=True)),
                ("customer_note", models.CharField(blank=True, default="", max_length=500)),
                ("internal_note", models.CharField(blank=True, default="", max_length=1000)),
                (
                    "source",
                    models.CharField(
                        choices=[("web", "Web"), ("mobile", "Mobile"), ("admin", "Admin"), ("api", "API")],
                        default="web",
                        max_length=10,
                    ),
                ),
                ("user_agent", models.TextField(blank=True, default="")),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("stock_reserved", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("customer", _user_fk("orders")),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="orders_orde_status_7d2e1a_idx"),
                    models.Index(fields=["payment_status", "created_at"], name="orders_orde_payment_4b9c3f_idx"),
                    models.Index(fields=["total_amount"], name="orders_orde_total_a_2f8e6d_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("product_name", models.CharField(max_length=200)),
                ("product_image", models.CharField(blank=True, default="", max_length=500)),
                (
                    "quantity",
                    models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)]),
                ),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("total_price", models.DecimalField(decimal_places=2, max_digits=12)),
                ("order", _order_fk("items")),
                (
                    "product",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order_items",
                        to="catalog.product",
                    ),
                ),
            ],
            options={"ordering": ["id"]},
        ),
        migrations.CreateModel(
            name="OrderTimelineEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(max_length=20)),
                ("note", models.CharField(blank=True, default="", max_length=1000)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", _order_fk("timeline")),
                ("updated_by", _user_fk("+")),
            ],
            options={"ordering": ["created_at", "id"]},
        ),
        migrations.CreateModel(
            name="PaymentHistoryEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("status", models.CharField(max_length=20)),
                ("method", models.CharField(blank=True, default="", max_length=20)),
                ("transaction_id", models.CharField(blank=True, default="", max_length=100)),
                ("note", models.CharField(blank=True, default="", max_length=1000)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", _order_fk("payment_history")),
                ("updated_by", _user_fk("+")),
            ],
            options={"ordering": ["created_at", "id"]},
        ),
        migrations.CreateModel(
            name="RefundEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=12)),
                ("reason", models.CharField(max_length=500)),
                ("method", models.CharField(default="original_payment", max_length=40)),
                ("status", models.CharField(default="processed", max_length=20)),
                ("processed_at", models.DateTimeField(auto_now_add=True)),
                ("order", _order_fk("refunds")),
                ("processed_by", _user_fk("+")),
            ],
            options={"ordering": ["processed_at", "id"]},
        ),
        migrations.CreateModel(
            name="TrackingEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("tracking_number", models.CharField(max_length=100)),
                ("carrier", models.CharField(blank=True, default="", max_length=100)),
                ("tracking_url", models.CharField(blank=True, default="", max_length=500)),
                ("estimated_delivery", models.DateTimeField(blank=True, null=True)),
                ("note", models.CharField(blank=True, default="", max_length=1000)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("order", _order_fk("tracking_history")),
                ("updated_by", _user_fk("+")),
            ],
            options={"ordering": ["created_at", "id"]},
        ),
    ]
