from .auth_serializers import PrivateUserSerializer, PublicUserSerializer, SignupSerializer, UserUpdateSerializer
from .jwt_serializers import CustomTokenObtainPairSerializer

__all__ = [
    "CustomTokenObtainPairSerializer",
    "PrivateUserSerializer",
    "PublicUserSerializer",
    "SignupSerializer",
    "UserUpdateSerializer",
]
