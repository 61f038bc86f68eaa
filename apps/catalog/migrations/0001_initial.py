import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Category",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True)),
                ("description", models.CharField(blank=True, default="", max_length=500)),
                ("slug", models.SlugField(max_length=120, unique=True)),
                (
                    "type",
                    models.CharField(
                        choices=[
                            ("protection_type", "Protection type"),
                            ("industry", "Industry"),
                            ("brand", "Brand"),
                            ("certification", "Certification"),
                        ],
                        db_index=True,
                        max_length=20,
                    ),
                ),
                ("icon", models.CharField(blank=True, default="📦", max_length=32)),
                ("color_primary", models.CharField(default="#f59e0b", max_length=7)),
                ("color_secondary", models.CharField(default="#fef3c7", max_length=7)),
                ("image_url", models.CharField(blank=True, default="", max_length=500)),
                ("image_key", models.CharField(blank=True, default="", max_length=500)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("inactive", "Inactive")],
                        db_index=True,
                        default="active",
                        max_length=20,
                    ),
                ),
                ("sort_order", models.IntegerField(default=0)),
                ("is_featured", models.BooleanField(default=False)),
                ("meta_title", models.CharField(blank=True, default="", max_length=200)),
                ("meta_description", models.CharField(blank=True, default="", max_length=500)),
                ("keywords", models.JSONField(blank=True, default=list)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="subcategories",
                        to="catalog.category",
                    ),
                ),
            ],
            options={
                "ordering": ["type", "sort_order", "name"],
                "verbose_name_plural": "categories",
            },
        ),
        migrations.CreateModel(
            name="Product",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True, default="", max_length=2000)),
                ("brand", models.CharField(blank=True, default="", max_length=100)),
                ("sku", models.CharField(blank=True, db_index=True, default="", max_length=64)),
                ("slug", models.SlugField(max_length=220, unique=True)),
                (
                    "price",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("sale_price", models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ("is_on_sale", models.BooleanField(default=False)),
                ("sale_start_date", models.DateTimeField(blank=True, null=True)),
                ("sale_end_date", models.DateTimeField(blank=True, null=True)),
                ("stock", models.PositiveIntegerField(default=0)),
                ("low_stock_threshold", models.PositiveIntegerField(default=10)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("active", "Active"),
                            ("inactive", "Inactive"),
                            ("draft", "Draft"),
                            ("out_of_stock", "Out of stock"),
                        ],
                        db_index=True,
                        default="active",
                        max_length=20,
                    ),
                ),
                ("features", models.JSONField(blank=True, default=list)),
                ("specifications", models.JSONField(blank=True, default=dict)),
                ("certifications", models.JSONField(blank=True, default=list)),
                ("compliance_standards", models.JSONField(blank=True, default=list)),
                ("tags", models.JSONField(blank=True, default=list)),
                ("keywords", models.JSONField(blank=True, default=list)),
                ("meta_title", models.CharField(blank=True, default="", max_length=200)),
                ("meta_description", models.CharField(blank=True, default="", max_length=160)),
                ("views", models.PositiveIntegerField(default=0)),
                ("sales_count", models.PositiveIntegerField(default=0)),
                ("avg_rating", models.DecimalField(decimal_places=2, default=0, max_digits=3)),
                ("review_count", models.PositiveIntegerField(default=0)),
                ("is_featured", models.BooleanField(db_index=True, default=False)),
                ("is_new_arrival", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="created_products",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "primary_category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="primary_products",
                        to="catalog.category",
                    ),
                ),
                (
                    "secondary_categories",
                    models.ManyToManyField(blank=True, related_name="secondary_products", to="catalog.category"),
                ),
                (
                    "updated_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="updated_products",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["status", "created_at"], name="catalog_pro_status_3b7e21_idx"),
                    models.Index(fields=["status", "stock"], name="catalog_pro_stock_9a4c10_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="ProductImage",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("url", models.CharField(max_length=500)),
                ("key", models.CharField(blank=True, default="", max_length=500)),
                ("alt", models.CharField(blank=True, default="", max_length=255)),
                ("is_main", models.BooleanField(default=False)),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="images",
                        to="catalog.product",
                    ),
                ),
            ],
            options={
                "ordering": ["position", "id"],
            },
        ),
    ]
