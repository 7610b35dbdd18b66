"""
Root URL configuration for the quiz learning backend.

URL Structure:
- /admin/: Django admin (Jazzmin theme)
- /api/elearning/: Quiz participation, scoring and analytics API

Author: DSP Development Team
Version: 1.0.0
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/elearning/", include("elearning.urls")),
]
