"""
API URL aggregation.

Public storefront routes and the admin mirrors (`/api/admin/...`) all live
under `/api/`.
"""

from django.urls import include, path

urlpatterns = [
    path("", include("apps.catalog.interfaces.api.urls")),
    path("", include("apps.orders.interfaces.api.urls")),
    path("admin/", include("apps.accounts.interfaces.api.urls")),
    path("admin/", include("apps.dashboard.interfaces.api.urls")),
    path("admin/", include("apps.catalog.interfaces.api.admin_urls")),
    path("admin/", include("apps.orders.interfaces.api.admin_urls")),
    path("admin/", include("apps.storage.interfaces.api.urls")),
]
