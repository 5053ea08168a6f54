"""Event Publisher Infrastructure Service.

Account events (registrations and logins) leave the process through two
pieces:

- :class:`BoundedEventDispatcher` accepts events without blocking the
  request, holds at most ``EVENT_QUEUE_MAXSIZE`` of them, and publishes them
  one at a time from a single background task;
- an :class:`IEventPublisher` that does the actual send, normally
  :class:`RabbitMQEventPublisher`.

Delivery is at most once and best effort. A full queue drops the event; a
publish that fails or exceeds ``EVENT_PUBLISH_TIMEOUT_SECONDS`` is logged and
not retried. Every outcome is counted in :class:`DispatcherStats`.
"""

import asyncio
from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional

import aio_pika
from aio_pika import DeliveryMode, ExchangeType, Message
from aio_pika.abc import AbstractChannel, AbstractExchange, AbstractRobustConnection

from src.core.logging import BoundLogger, get_component_logger
from src.domain.events.authentication_events import (
    AccountEvent,
    UserLoggedInEvent,
    UserRegisteredEvent,
)
from src.domain.interfaces.services import IEventDispatcher, IEventPublisher

DEFAULT_ROUTING_KEYS: Dict[str, str] = {
    UserRegisteredEvent.event_type: "user.registered",
    UserLoggedInEvent.event_type: "user.logged_in",
}


class RabbitMQEventPublisher(IEventPublisher):
    """Publishes account events as JSON to a durable topic exchange.

    The routing key is looked up by the event's ``event_type``.
    """

    def __init__(
        self,
        amqp_url: str,
        exchange_name: str = "user.events",
        routing_keys: Optional[Mapping[str, str]] = None,
        logger: Optional[BoundLogger] = None,
    ):
        self._amqp_url = amqp_url
        self._exchange_name = exchange_name
        self._routing_keys: Dict[str, str] = {**DEFAULT_ROUTING_KEYS, **(routing_keys or {})}
        self._connection: Optional[AbstractRobustConnection] = None
        self._channel: Optional[AbstractChannel] = None
        self._exchange: Optional[AbstractExchange] = None
        self._logger = logger or get_component_logger("event_publisher", __name__)

    @property
    def is_connected(self) -> bool:
        return self._connection is not None and not self._connection.is_closed

    def routing_key_for(self, event: AccountEvent) -> str:
        return self._routing_keys[event.event_type]

    async def connect(self) -> None:
        """Open the connection, channel and exchange.

        A half-open connection is closed again before the error propagates,
        including on cancellation by a publish timeout.
        """
        if self.is_connected and self._exchange is not None:
            return
        # Leftovers from an earlier failed attempt.
        await self.close()

        try:
            self._connection = await aio_pika.connect_robust(self._amqp_url)
            self._channel = await self._connection.channel()
            self._exchange = await self._channel.declare_exchange(
                self._exchange_name,
                ExchangeType.TOPIC,
                durable=True,
            )
        except BaseException:
            await self.close()
            raise
        self._logger.info("RabbitMQ connected", exchange=self._exchange_name)

    async def close(self) -> None:
        connection = self._connection
        self._connection = None
        self._channel = None
        self._exchange = None
        if connection is not None and not connection.is_closed:
            await connection.close()
            self._logger.info("RabbitMQ connection closed")

    async def publish(self, event: AccountEvent) -> None:
        await self.connect()

        routing_key = self.routing_key_for(event)
        message = Message(
            body=event.to_json(),
            content_type="application/json",
            delivery_mode=DeliveryMode.PERSISTENT,
            correlation_id=event.correlation_id,
            type=event.event_type,
        )
        await self._exchange.publish(message, routing_key=routing_key)
        self._logger.info(
            "Event published",
            event_type=event.event_type,
            routing_key=routing_key,
            user_id=event.user_id,
        )


class InMemoryEventPublisher(IEventPublisher):
    """Keeps published events in memory.

    Used when ``EVENTS_ENABLED`` is off and in tests.
    """

    def __init__(self, logger: Optional[BoundLogger] = None):
        self.published_events: List[AccountEvent] = []
        self._logger = logger or get_component_logger("event_publisher", __name__)

    async def publish(self, event: AccountEvent) -> None:
        self.published_events.append(event)
        self._logger.debug("Event recorded in memory", event_type=event.event_type)

    def clear_events(self) -> None:
        self.published_events.clear()


@dataclass(frozen=True)
class DispatcherStats:
    dispatched: int
    published: int
    dropped: int
    failed: int
    pending: int


class BoundedEventDispatcher(IEventDispatcher):
    """Bounded queue in front of an event publisher, drained by one worker task."""

    def __init__(
        self,
        publisher: IEventPublisher,
        maxsize: int = 1000,
        publish_timeout: float = 5.0,
        logger: Optional[BoundLogger] = None,
    ):
        self._publisher = publisher
        self._queue: "asyncio.Queue[AccountEvent]" = asyncio.Queue(maxsize=maxsize)
        self._publish_timeout = publish_timeout
        self._worker: Optional[asyncio.Task] = None
        self._logger = logger or get_component_logger("event_dispatcher", __name__)
        self._dispatched = 0
        self._published = 0
        self._dropped = 0
        self._failed = 0

    @property
    def publisher(self) -> IEventPublisher:
        return self._publisher

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    @property
    def stats(self) -> DispatcherStats:
        return DispatcherStats(
            dispatched=self._dispatched,
            published=self._published,
            dropped=self._dropped,
            failed=self._failed,
            pending=self._queue.qsize(),
        )

    def dispatch(self, event: AccountEvent) -> bool:
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            self._dropped += 1
            self._logger.warning(
                "Event dropped: queue full",
                event_type=event.event_type,
                user_id=event.user_id,
                dropped_total=self._dropped,
            )
            return False
        self._dispatched += 1
        return True

    def start(self) -> None:
        if self.is_running:
            return
        self._worker = asyncio.create_task(self._run(), name="event-dispatcher")
        self._logger.info("Event dispatcher started", maxsize=self._queue.maxsize)

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Publish what is already queued (bounded by `drain_timeout`), then stop."""
        if self._worker is None:
            return
        if not self._worker.done():
            try:
                await asyncio.wait_for(self._queue.join(), timeout=drain_timeout)
            except asyncio.TimeoutError:
                self._logger.warning(
                    "Event dispatcher stopped with undelivered events",
                    pending=self._queue.qsize(),
                )
            self._worker.cancel()
        await asyncio.gather(self._worker, return_exceptions=True)
        self._worker = None
        self._logger.info("Event dispatcher stopped", **self._stats_fields())

    def _stats_fields(self) -> dict:
        stats = self.stats
        return {
            "dispatched": stats.dispatched,
            "published": stats.published,
            "dropped": stats.dropped,
            "failed": stats.failed,
        }

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await asyncio.wait_for(self._publisher.publish(event), timeout=self._publish_timeout)
                self._published += 1
            except asyncio.CancelledError:
                raise
            except asyncio.TimeoutError:
                self._failed += 1
                self._logger.error(
                    "Event publish timed out",
                    event_type=event.event_type,
                    user_id=event.user_id,
                    timeout_seconds=self._publish_timeout,
                    failed_total=self._failed,
                )
            except Exception as exc:
                self._failed += 1
                self._logger.error(
                    "Event publish failed",
                    event_type=event.event_type,
                    user_id=event.user_id,
                    error=str(exc),
                    error_type=type(exc).__name__,
                    failed_total=self._failed,
                )
            finally:
                self._queue.task_done()
