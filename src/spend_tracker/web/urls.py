"""
URL configuration for the statement import web service.
"""

from django.contrib import admin
from django.urls import path

from . import views

# Note: No app_name since this is the ROOT_URLCONF

urlpatterns = [
    # Django admin (user management and session login)
    path("admin/", admin.site.urls),
    # Statement import
    path("import/upload", views.upload_import, name="import_upload"),
]
