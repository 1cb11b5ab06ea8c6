from django.urls import path
from rest_framework_simplejwt.views import TokenRefreshView

from authentication.api.views import LoginAPIView, SignupAPIView


urlpatterns = [
    path("signup/", SignupAPIView.as_view(), name="signup"),
    path("token/", LoginAPIView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", TokenRefreshView.as_view(), name="token_refresh"),
]
