"""
URL configuration for the bondex project.

`/api/` carries the JSON API; `/admin/` is Django's own admin site.
"""

from django.conf import settings
from django.conf.urls.static import static
from django.contrib import admin
from django.urls import include, path

from . import error_views

handler403 = "bondex.error_views.handle_403"
handler404 = "bondex.error_views.handle_404"
handler500 = "bondex.error_views.handle_500"

urlpatterns = [
    path("healthz", error_views.healthz, name="healthz"),
    path("django-admin/", admin.site.urls),
    path("api/", include("bondex.api_urls")),
]

if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
