import logging

from infrastructure.events import get_event_bus
from utils.logging_utils import mask_value

logger = logging.getLogger(__name__)


def register_authentication_listeners(event_bus=None):
    """
    Register all event listeners for authentication context.
    Called when Django app starts.
    """
    event_bus = event_bus or get_event_bus()

    event_bus.subscribe("user.registered", log_user_registration)
    event_bus.subscribe("account.deleted", log_account_deletion)

    logger.info("Authentication event listeners registered")


def log_user_registration(event):
    """Log user registration event."""
    # event is the full envelope including 'payload'
    payload = event.get("payload", {})
    logger.info(f"[LISTENER] User registered: {mask_value(payload.get('email'))} ({payload.get('user_id')})")


def log_account_deletion(event):
    """Log account deletion event."""
    payload = event.get("payload", {})
    if payload.get("failures"):
        logger.warning(
            f"[LISTENER] Account {payload.get('user_id')} deleted with {payload.get('failures')} failed cleanup steps"
        )
    else:
        logger.info(f"[LISTENER] Account deleted: {payload.get('user_id')}")
