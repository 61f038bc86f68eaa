from django.urls import path

from .views import AdminLoginAPI, AdminLogoutAPI, AdminProfileAPI

urlpatterns = [
    path("login/", AdminLoginAPI.as_view(), name="api_admin_login"),
    path("logout/", AdminLogoutAPI.as_view(), name="api_admin_logout"),
    path("profile/", AdminProfileAPI.as_view(), name="api_admin_profile"),
]
