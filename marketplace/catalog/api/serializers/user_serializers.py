from django.contrib.auth import get_user_model
from rest_framework import serializers


User = get_user_model()


class PublicUserSerializer(serializers.ModelSerializer):
    """Public identity shown next to products and orders (no email)"""

    class Meta:
        model = User
        fields = ["id", "username", "name"]
        read_only_fields = ["id", "username", "name"]
