"""
Event Bus Tests
===============

Unit tests for the in-memory and Redis event buses.
"""

import json
import uuid
from unittest.mock import MagicMock, patch

from django.test import SimpleTestCase, override_settings

from infrastructure.events import InMemoryEventBus, RedisEventBus, get_event_bus, reset_event_bus


class InMemoryEventBusTest(SimpleTestCase):
    def test_publish_records_envelope_and_calls_handlers(self):
        bus = InMemoryEventBus()
        received = []
        bus.subscribe("order.placed", received.append)

        bus.publish("order.placed", {"order_id": "o1"})

        self.assertEqual(len(bus.published), 1)
        envelope = bus.published[0]
        self.assertEqual(envelope["event_type"], "order.placed")
        self.assertEqual(envelope["payload"], {"order_id": "o1"})
        self.assertIn("occurred_at", envelope)
        self.assertEqual(received, [envelope])

    def test_failing_handler_does_not_propagate(self):
        bus = InMemoryEventBus()
        after = MagicMock()
        bus.subscribe("order.placed", MagicMock(side_effect=RuntimeError("boom")))
        bus.subscribe("order.placed", after)

        bus.publish("order.placed", {})

        after.assert_called_once()


class RedisEventBusTest(SimpleTestCase):
    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_publish_serializes_envelope(self, mock_from_url):
        client = MagicMock()
        mock_from_url.return_value = client
        product_id = uuid.uuid4()

        RedisEventBus("redis://test:6379/0", channel_prefix="test.").publish(
            "product.deleted", {"product_id": product_id}
        )

        channel, raw = client.publish.call_args[0]
        self.assertEqual(channel, "test.product.deleted")
        self.assertEqual(json.loads(raw)["payload"], {"product_id": str(product_id)})

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_publish_swallows_redis_errors(self, mock_from_url):
        client = MagicMock()
        client.publish.side_effect = ConnectionError("redis down")
        mock_from_url.return_value = client

        RedisEventBus().publish("order.placed", {})

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_handle_message_dispatches_envelope(self, mock_from_url):
        bus = RedisEventBus()
        handler = MagicMock()
        bus.subscribe("order.placed", handler)

        envelope = {"event_type": "order.placed", "occurred_at": "now", "payload": {"order_id": "o1"}}
        bus._handle_message({"type": "message", "data": json.dumps(envelope)})

        handler.assert_called_once_with(envelope)

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_malformed_message_is_discarded(self, mock_from_url):
        bus = RedisEventBus()
        handler = MagicMock()
        bus.subscribe("order.placed", handler)

        with self.assertLogs("infrastructure.events.redis_event_bus", level="ERROR"):
            bus._handle_message({"type": "message", "data": "not json"})

        handler.assert_not_called()

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_start_listening_without_client_is_noop(self, mock_from_url):
        bus = RedisEventBus()
        bus.redis_client = None

        bus.start_listening()

        self.assertIsNone(bus._listener)

    @patch("infrastructure.events.redis_event_bus.threading.Thread")
    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_start_listening_starts_one_thread(self, mock_from_url, mock_thread):
        bus = RedisEventBus()

        bus.start_listening()
        bus.start_listening()

        mock_thread.return_value.start.assert_called_once()

    @patch("infrastructure.events.redis_event_bus.redis.from_url")
    def test_pattern_messages_are_dispatched(self, mock_from_url):
        bus = RedisEventBus()
        handler = MagicMock()
        bus.subscribe("account.deleted", handler)

        envelope = {"event_type": "account.deleted", "occurred_at": "now", "payload": {"user_id": "u1"}}
        bus._handle_message({"type": "pmessage", "data": json.dumps(envelope).encode()})

        handler.assert_called_once_with(envelope)


class GetEventBusTest(SimpleTestCase):
    def tearDown(self):
        reset_event_bus()

    @override_settings(INFRASTRUCTURE={"EVENT_BUS_BACKEND": "memory"})
    def test_memory_backend_singleton(self):
        reset_event_bus()

        bus = get_event_bus()

        self.assertIsInstance(bus, InMemoryEventBus)
        self.assertIs(bus, get_event_bus())
