import uuid

from django.contrib.auth.models import AbstractUser, UserManager
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models


class CustomUserManager(UserManager):
    """Stores emails lowercased so login by email is case-insensitive."""

    def create_user(self, username, email=None, password=None, **extra_fields):
        email = (email or "").strip().lower()
        return super().create_user(username, email=email, password=password, **extra_fields)

    def create_superuser(self, username, email=None, password=None, **extra_fields):
        email = (email or "").strip().lower()
        return super().create_superuser(username, email=email, password=password, **extra_fields)


class CustomUser(AbstractUser):
    USERNAME_MIN_LENGTH = 3
    USERNAME_MAX_LENGTH = 20
    NAME_MAX_LENGTH = 50
    PASSWORD_MIN_LENGTH = 6

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    username = models.CharField(
        max_length=USERNAME_MAX_LENGTH,
        unique=True,
        validators=[
            MinLengthValidator(USERNAME_MIN_LENGTH),
            RegexValidator(r"^[\w.@+-]+$", "Username may contain letters, digits and @/./+/-/_ only."),
        ],
        error_messages={"unique": "A user with that username already exists."},
    )
    email = models.EmailField(unique=True)
    name = models.CharField(max_length=NAME_MAX_LENGTH)
    date_joined = models.DateTimeField(auto_now_add=True)

    objects = CustomUserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["username", "name"]

    class Meta:
        app_label = "authentication"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email
