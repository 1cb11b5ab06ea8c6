from django.contrib.auth import get_user_model
from rest_framework import serializers


User = get_user_model()


class SignupSerializer(serializers.Serializer):
    """Format validation for signup; uniqueness is checked by AccountService"""

    username = serializers.RegexField(
        r"^[\w.@+-]+$",
        min_length=User.USERNAME_MIN_LENGTH,
        max_length=User.USERNAME_MAX_LENGTH,
        error_messages={"invalid": "Username may contain letters, digits and @/./+/-/_ only."},
    )
    name = serializers.CharField(max_length=User.NAME_MAX_LENGTH)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=User.PASSWORD_MIN_LENGTH, write_only=True, trim_whitespace=False)


class UserUpdateSerializer(serializers.Serializer):
    """Partial profile update; password changes need current_password"""

    username = serializers.RegexField(
        r"^[\w.@+-]+$",
        min_length=User.USERNAME_MIN_LENGTH,
        max_length=User.USERNAME_MAX_LENGTH,
        required=False,
    )
    name = serializers.CharField(max_length=User.NAME_MAX_LENGTH, required=False)
    email = serializers.EmailField(required=False)
    password = serializers.CharField(
        min_length=User.PASSWORD_MIN_LENGTH, required=False, write_only=True, trim_whitespace=False
    )
    current_password = serializers.CharField(required=False, write_only=True, trim_whitespace=False)

    def validate(self, attrs):
        if attrs.get("password") and not attrs.get("current_password"):
            raise serializers.ValidationError({"current_password": "Required to change the password."})
        return attrs


class PublicUserSerializer(serializers.ModelSerializer):
    """Public profile: never exposes email or credentials"""

    class Meta:
        model = User
        fields = ("id", "username", "name", "date_joined")
        read_only_fields = fields


class PrivateUserSerializer(serializers.ModelSerializer):
    """The caller's own profile"""

    class Meta:
        model = User
        fields = ("id", "username", "name", "email", "date_joined")
        read_only_fields = fields
