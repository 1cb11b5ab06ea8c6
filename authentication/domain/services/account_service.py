"""
AccountService - Account Business Logic.

Signup, public user listing, profile reads and self-service profile updates.
Account deletion is owned by the marketplace CascadeService because it has
to clean up products, orders and images first.
"""

from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.db.models import Q

from authentication.domain.events import UserRegisteredEvent
from authentication.infra.observability.metrics import profile_updates_total, signup_total
from infrastructure.events import get_event_bus
from marketplace.domain.policy import Role, require_role, resolve_account_role
from marketplace.services.base import BaseService, ErrorCodes, ServiceResult, paginate, service_err, service_ok
from utils.logging_utils import mask_value, sanitize_payload


User = get_user_model()

PROFILE_FIELDS = ("username", "name", "email")


class AccountService(BaseService):
    """
    Account service encapsulating signup and profile logic.
    """

    def __init__(self, event_bus=None):
        super().__init__()
        self.event_bus = event_bus or get_event_bus()

    def _conflict(self, username: Optional[str], email: Optional[str], exclude_id=None) -> Optional[ServiceResult]:
        others = User.objects.exclude(id=exclude_id) if exclude_id else User.objects.all()
        if email and others.filter(email__iexact=email).exists():
            return service_err(ErrorCodes.EMAIL_TAKEN, "A user with this email already exists")
        if username and others.filter(username__iexact=username).exists():
            return service_err(ErrorCodes.USERNAME_TAKEN, "A user with this username already exists")
        return None

    @BaseService.log_performance
    def register(self, username: str, name: str, email: str, password: str) -> ServiceResult:
        """
        Create an account.

        Args are assumed format-validated (SignupSerializer). Duplicate email
        or username yields email_taken / username_taken.
        """
        email = email.strip().lower()
        self.logger.info(
            f"Signup attempt: {sanitize_payload({'username': username, 'email': email}, ['username', 'email'])}"
        )

        conflict = self._conflict(username, email)
        if conflict:
            signup_total.labels(status=conflict.error).inc()
            return conflict

        try:
            with transaction.atomic():
                user = User.objects.create_user(username=username, email=email, password=password, name=name)
        except IntegrityError:
            # Lost a race against a concurrent signup with the same identity
            signup_total.labels(status="conflict").inc()
            return self._conflict(username, email) or service_err(
                ErrorCodes.EMAIL_TAKEN, "A user with this email or username already exists"
            )
        except Exception as e:
            self.logger.error(f"Signup failed for {mask_value(email)}: {e}", exc_info=True)
            signup_total.labels(status="error").inc()
            return service_err(ErrorCodes.INTERNAL_ERROR, str(e))

        signup_total.labels(status="success").inc()
        self.logger.info(f"Registered user {user.id} ({mask_value(email)})")
        try:
            event = UserRegisteredEvent(user_id=str(user.id), username=user.username, email=user.email)
            self.event_bus.publish(event.event_type, event.payload)
        except Exception as e:
            self.logger.error(f"Failed to publish user.registered: {e}")
        return service_ok(user)

    @BaseService.log_performance
    def list_users(self, search: Optional[str] = None, page: int = 1, limit: int = 10) -> ServiceResult[Dict[str, Any]]:
        """Public user listing, newest first, optionally filtered by username/name."""
        if page < 1 or limit < 1:
            return service_err(ErrorCodes.VALIDATION_ERROR, "page and limit must be positive integers")

        queryset = User.objects.filter(is_active=True).order_by("-date_joined")
        if search:
            queryset = queryset.filter(Q(username__icontains=search) | Q(name__icontains=search))

        results, paginator = paginate(queryset, page, limit)

        return service_ok(
            {
                "results": results,
                "count": paginator.count,
                "page": page,
                "limit": limit,
                "num_pages": paginator.num_pages,
            }
        )

    @BaseService.log_performance
    def get_user(self, user_id) -> ServiceResult:
        try:
            return service_ok(User.objects.get(id=user_id))
        except (User.DoesNotExist, ValidationError, ValueError):
            return service_err(ErrorCodes.USER_NOT_FOUND, f"User {user_id} not found")

    @BaseService.log_performance
    def update_user(self, user_id, caller, data: Dict[str, Any]) -> ServiceResult:
        """
        Self-service profile update.

        Supported keys: username, name, email, and password (which requires
        current_password). Anything else is ignored.
        """
        denial = require_role(resolve_account_role(caller, user_id), [Role.OWNER], ErrorCodes.NOT_ACCOUNT_OWNER)
        if denial:
            return service_err(denial, "You can only update your own profile")

        result = self.get_user(user_id)
        if not result.ok:
            return result
        user = result.value

        changes = {field: data[field] for field in PROFILE_FIELDS if data.get(field) not in (None, "")}
        if "email" in changes:
            changes["email"] = changes["email"].strip().lower()

        conflict = self._conflict(changes.get("username"), changes.get("email"), exclude_id=user.id)
        if conflict:
            profile_updates_total.labels(status=conflict.error).inc()
            return conflict

        new_password = data.get("password")
        if new_password:
            current_password = data.get("current_password")
            if not current_password or not user.check_password(current_password):
                profile_updates_total.labels(status=ErrorCodes.INVALID_CREDENTIALS).inc()
                return service_err(ErrorCodes.INVALID_CREDENTIALS, "Current password is incorrect")
            user.set_password(new_password)

        for field, value in changes.items():
            setattr(user, field, value)

        try:
            with transaction.atomic():
                user.save()
        except IntegrityError:
            return self._conflict(changes.get("username"), changes.get("email"), exclude_id=user.id) or service_err(
                ErrorCodes.USERNAME_TAKEN, "A user with this username or email already exists"
            )

        profile_updates_total.labels(status="success").inc()
        self.logger.info(
            f"Updated user {user.id}: fields={sorted(changes)}{' +password' if new_password else ''}"
        )
        return service_ok(user)
