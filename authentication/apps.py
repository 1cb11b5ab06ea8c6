import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class AuthenticationConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "authentication"

    def ready(self):
        """
        Register account listeners and start consuming events.
        """
        from authentication.infra.events.listeners import register_authentication_listeners
        from infrastructure.events import get_event_bus

        try:
            register_authentication_listeners()
            # Listens on the whole channel pattern, so apps registering later are covered
            get_event_bus().start_listening()
        except Exception as e:
            logger.warning(f"Failed to initialize Event Bus listeners: {e}")
