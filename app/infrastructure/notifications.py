"""Notification Dispatch: post-commit, fire-and-forget delivery of lifecycle events.

Invariants:
    - publish() never blocks and never raises into the caller
    - Services call publish() only after their transaction has committed
    - Delivery failures are logged and dropped; they never roll anything back
    - One worker task per process, started and stopped by the FastAPI lifespan

Design Decisions:
    - Bounded asyncio.Queue between request handlers and the worker: a slow or
      unreachable sink cannot add latency to a transfer (ADR: decoupled post-commit hook)
    - Publisher is pluggable, chosen from settings: KafkaPublisher (aiokafka, one
      message per email on the topic) when bootstrap servers are set,
      WebhookPublisher (httpx) when a URL is set, LogPublisher otherwise
    - publish_after_commit is the only way services hand events over: a sink
      that raises is logged, the committed transition still succeeds
"""

import asyncio
import logging
from typing import Protocol

import httpx
from aiokafka import AIOKafkaProducer

from app.core.notification_events import NotificationEvent
from app.core.repository_protocols import NotificationSink

logger = logging.getLogger(__name__)


class NotificationPublisher(Protocol):
    async def send(self, event: NotificationEvent) -> None: ...
    async def aclose(self) -> None: ...


class LogPublisher:
    """Writes each event to the application log."""

    async def send(self, event: NotificationEvent) -> None:
        logger.info(
            f"Notification {event.topic.value}: {', '.join(event.emails)}",
            extra={"topic": event.topic.value},
        )

    async def aclose(self) -> None:
        return None


class WebhookPublisher:
    """POSTs each event as JSON to a configured URL."""

    def __init__(self, url: str, timeout_seconds: float = 5.0):
        self.url = url
        self._client = httpx.AsyncClient(timeout=timeout_seconds)

    async def send(self, event: NotificationEvent) -> None:
        response = await self._client.post(self.url, json=event.to_payload())
        response.raise_for_status()

    async def aclose(self) -> None:
        await self._client.aclose()


class KafkaPublisher:
    """Produces one message per email address to the event's topic."""

    def __init__(self, bootstrap_servers: str, client_id: str = "game-exchange"):
        self.bootstrap_servers = bootstrap_servers
        self.client_id = client_id
        self._producer: AIOKafkaProducer | None = None

    async def _started(self) -> AIOKafkaProducer:
        if self._producer is None:
            producer = AIOKafkaProducer(
                bootstrap_servers=self.bootstrap_servers, client_id=self.client_id,
            )
            try:
                await producer.start()
            except Exception:
                await producer.stop()
                raise
            self._producer = producer
        return self._producer

    async def send(self, event: NotificationEvent) -> None:
        producer = await self._started()
        for email in event.emails:
            await producer.send_and_wait(event.topic.value, email.encode())

    async def aclose(self) -> None:
        if self._producer is not None:
            await self._producer.stop()
            self._producer = None


class NotificationDispatcher:
    """Queue + single worker; implements the core NotificationSink protocol."""

    def __init__(
        self, publisher: NotificationPublisher, max_queue_size: int = 1000,
    ):
        self._publisher = publisher
        self._queue: asyncio.Queue[NotificationEvent] = asyncio.Queue(
            maxsize=max_queue_size,
        )
        self._worker: asyncio.Task | None = None

    def publish(self, event: NotificationEvent) -> None:
        """Enqueue without waiting; a full queue drops the event."""
        try:
            self._queue.put_nowait(event)
        except asyncio.QueueFull:
            logger.warning(
                f"Notification queue full, dropping {event.topic.value}",
                extra={"topic": event.topic.value},
            )

    def start(self) -> None:
        if self._worker is None:
            self._worker = asyncio.create_task(self._run())

    async def stop(self, drain_timeout: float = 5.0) -> None:
        """Give queued events a chance to go out, then stop the worker."""
        if self._worker is None:
            return
        try:
            await asyncio.wait_for(self._queue.join(), drain_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                f"Notification drain timed out with {self._queue.qsize()} pending",
            )
        self._worker.cancel()
        try:
            await self._worker
        except asyncio.CancelledError:
            pass
        self._worker = None
        await self._publisher.aclose()

    async def _run(self) -> None:
        while True:
            event = await self._queue.get()
            try:
                await self._publisher.send(event)
            except Exception as e:
                logger.error(
                    f"Notification delivery failed: {e}",
                    extra={"topic": event.topic.value},
                )
            finally:
                self._queue.task_done()


def build_publisher(
    webhook_url: str, timeout_seconds: float, kafka_bootstrap_servers: str = "",
) -> NotificationPublisher:
    if kafka_bootstrap_servers:
        return KafkaPublisher(kafka_bootstrap_servers)
    if webhook_url:
        return WebhookPublisher(webhook_url, timeout_seconds)
    return LogPublisher()


# Singleton (initialized on startup)
notifier: NotificationDispatcher | None = None


def init_notifier(
    webhook_url: str = "",
    timeout_seconds: float = 5.0,
    max_queue_size: int = 1000,
    kafka_bootstrap_servers: str = "",
) -> NotificationDispatcher:
    global notifier
    notifier = NotificationDispatcher(
        build_publisher(webhook_url, timeout_seconds, kafka_bootstrap_servers),
        max_queue_size,
    )
    return notifier


def get_notifier() -> NotificationDispatcher:
    """FastAPI dependency for the notification sink."""
    if not notifier:
        raise RuntimeError("Notifier not initialized")
    return notifier


def publish_after_commit(sink: NotificationSink, event: NotificationEvent) -> None:
    """Hand a committed transition's event to the sink; never raises."""
    try:
        sink.publish(event)
    except Exception as e:
        logger.error(
            f"Notification publish failed: {e}",
            extra={"topic": event.topic.value},
            exc_info=True,
        )
