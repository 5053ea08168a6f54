"""Startup and shutdown of the app's resources.

On startup the users table is created and the registration-event dispatcher
is started (connecting to the broker when events are enabled). Shutdown
drains the dispatcher, closes the broker connection and disposes the engine.
"""

import asyncio
from contextlib import asynccontextmanager

from aio_pika.exceptions import AMQPError
from fastapi import FastAPI
from structlog import get_logger

from src.core.config.settings import settings
from src.core.logging import get_component_logger
from src.domain.events.authentication_events import UserLoggedInEvent, UserRegisteredEvent
from src.infrastructure.database.async_db import create_async_db_and_tables, dispose_engine
from src.infrastructure.services.event_publisher import (
    BoundedEventDispatcher,
    InMemoryEventPublisher,
    RabbitMQEventPublisher,
)

logger = get_logger(__name__)


def build_event_dispatcher() -> BoundedEventDispatcher:
    """Create the dispatcher and the publisher selected by settings."""
    if settings.EVENTS_ENABLED:
        publisher = RabbitMQEventPublisher(
            settings.RABBITMQ_URL,
            exchange_name=settings.USER_EVENTS_EXCHANGE,
            routing_keys={
                UserRegisteredEvent.event_type: settings.USER_REGISTERED_ROUTING_KEY,
                UserLoggedInEvent.event_type: settings.USER_LOGGED_IN_ROUTING_KEY,
            },
            logger=get_component_logger("event_publisher"),
        )
    else:
        publisher = InMemoryEventPublisher(logger=get_component_logger("event_publisher"))
    return BoundedEventDispatcher(
        publisher,
        maxsize=settings.EVENT_QUEUE_MAXSIZE,
        publish_timeout=settings.EVENT_PUBLISH_TIMEOUT_SECONDS,
        logger=get_component_logger("event_dispatcher"),
    )


def create_lifespan_manager():
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # An unreachable database aborts startup. A down broker does not:
        # registration events are dropped and counted until it comes back.
        try:
            await create_async_db_and_tables()
        except Exception as exc:
            logger.error("database_unavailable_on_startup", error=str(exc))
            raise RuntimeError("Database unavailable") from exc

        dispatcher = build_event_dispatcher()
        publisher = dispatcher.publisher
        if isinstance(publisher, RabbitMQEventPublisher):
            try:
                await asyncio.wait_for(
                    publisher.connect(), timeout=settings.EVENT_PUBLISH_TIMEOUT_SECONDS
                )
            except (AMQPError, OSError, asyncio.TimeoutError) as exc:
                logger.warning("event_broker_unavailable_on_startup", error=str(exc))
        dispatcher.start()
        app.state.event_dispatcher = dispatcher

        logger.info("application_startup", env=settings.APP_ENV, version=settings.VERSION)

        yield

        await dispatcher.stop(drain_timeout=settings.EVENT_PUBLISH_TIMEOUT_SECONDS)
        if isinstance(publisher, RabbitMQEventPublisher):
            await publisher.close()
        await dispose_engine()
        logger.info("application_shutdown", env=settings.APP_ENV, stats=dispatcher.stats)

    return lifespan
