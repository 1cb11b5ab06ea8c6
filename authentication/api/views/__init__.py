from .auth_views import LoginAPIView, SignupAPIView
from .user_views import UserDetailView, UserListView

__all__ = [
    "LoginAPIView",
    "SignupAPIView",
    "UserDetailView",
    "UserListView",
]
