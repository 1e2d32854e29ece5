# backend/leetbuddy/urls.py
from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/", include("tracker.urls")),
]

handler404 = "tracker.views.not_found"
