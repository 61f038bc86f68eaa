from django.urls import path

from .views import DeleteUploadAPI, UploadImageAPI

urlpatterns = [
    path("uploads/", UploadImageAPI.as_view(), name="api_admin_upload_image"),
    path("uploads/delete/", DeleteUploadAPI.as_view(), name="api_admin_delete_image"),
]
