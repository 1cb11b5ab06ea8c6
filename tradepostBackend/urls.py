"""
URL configuration for tradepostBackend project.

API surface:
    /api/auth/         signup and JWT issuance
    /api/users/        public profiles, profile update, account deletion
    /api/marketplace/  products, images, orders, metrics
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView, SpectacularSwaggerView


urlpatterns = [
    path("admin/", admin.site.urls),
    # API Documentation
    path("api/schema/", SpectacularAPIView.as_view(), name="schema"),
    path("api/docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("api/redoc/", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    # API endpoints
    path("api/auth/", include("authentication.api.urls.auth_urls")),
    path("api/users/", include("authentication.api.urls.user_urls")),
    path("api/marketplace/", include("marketplace.urls")),
]
