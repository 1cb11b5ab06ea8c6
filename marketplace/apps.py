import logging

from django.apps import AppConfig

logger = logging.getLogger(__name__)


class MarketplaceConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "marketplace"

    def ready(self):
        # Register event listeners
        try:
            from marketplace.infra.events.listeners import register_marketplace_listeners

            register_marketplace_listeners()
        except Exception as e:
            logger.error(f"Failed to register marketplace listeners: {e}")

        # OpenTelemetry tracing (no-op tracers unless enabled)
        from django.conf import settings

        if getattr(settings, "OTEL_TRACING_ENABLED", False):
            from marketplace.infra.observability.tracing import setup_tracing

            setup_tracing(service_name="tradepost-marketplace")
