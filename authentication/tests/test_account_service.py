import uuid

import pytest

from authentication.domain.services.account_service import AccountService
from marketplace.services.base import ErrorCodes
from marketplace.tests.factories import UserFactory
from utils.logging_utils import mask_value, sanitize_payload


pytestmark = pytest.mark.django_db


@pytest.fixture
def account_service(event_bus):
    return AccountService(event_bus=event_bus)


class TestRegister:
    def test_register_lowercases_email(self, account_service):
        result = account_service.register("lampfan", "Lamp Fan", "  Fan@Example.COM ", "secret123")

        assert result.ok is True
        assert result.value.email == "fan@example.com"

    def test_email_conflict_is_case_insensitive(self, account_service):
        UserFactory(email="fan@example.com")

        result = account_service.register("newname", "New", "FAN@example.com", "secret123")

        assert result.error == ErrorCodes.EMAIL_TAKEN

    def test_username_conflict_is_case_insensitive(self, account_service):
        UserFactory(username="lampfan")

        result = account_service.register("LampFan", "New", "new@example.com", "secret123")

        assert result.error == ErrorCodes.USERNAME_TAKEN

    def test_signup_event_omits_password(self, account_service, event_bus):
        account_service.register("lampfan", "Lamp Fan", "fan@example.com", "secret123")

        payload = event_bus.published[-1]["payload"]
        assert payload["username"] == "lampfan"
        assert "password" not in payload


class TestUpdateUser:
    def test_email_change_keeps_own_address_free(self, account_service):
        user = UserFactory(email="alice@example.com")

        result = account_service.update_user(user.id, user, {"email": "ALICE@example.com"})

        assert result.ok is True
        assert result.value.email == "alice@example.com"

    def test_unknown_fields_are_ignored(self, account_service):
        user = UserFactory()

        result = account_service.update_user(user.id, user, {"is_staff": True, "name": "Renamed"})

        assert result.ok is True
        user.refresh_from_db()
        assert user.is_staff is False
        assert user.name == "Renamed"

    def test_missing_user(self, account_service):
        user_id = uuid.uuid4()
        caller = UserFactory.build(id=user_id)

        assert account_service.update_user(user_id, caller, {"name": "x"}).error == ErrorCodes.USER_NOT_FOUND


@pytest.mark.unit
class TestLogMasking:
    def test_mask_email(self):
        assert mask_value("alice@example.com") == "al***@example.com"

    def test_mask_long_secret(self):
        assert mask_value("abcdefghijklmnopq") == "abcd...nopq"

    def test_sanitize_drops_and_masks(self):
        payload = {"username": "alice", "email": "alice@example.com", "password": "hunter22", "extra": 1}

        assert sanitize_payload(payload, ["username", "email", "password"]) == {
            "username": "alice",
            "email": "al***@example.com",
            "password": "***",
        }
