"""
In-process channel registry for project-update notifications.

One registry is created at application startup and lives on
``app.state.realtime_registry``. It knows nothing about WebSockets: each
subscriber owns an outbound queue, and whatever transport is attached
drains that queue in order. All methods are synchronous, so on a single
event loop a join, publish or disconnect is applied atomically with
respect to the others.

Channel membership is a routing mechanism only. Nothing here checks that a
subscriber may see the project it joins.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class Subscriber:
    connection_id: str
    outbox: asyncio.Queue
    channels: set[str] = field(default_factory=set)


class ChannelRegistry:
    def __init__(self, queue_size: int = 256):
        self.queue_size = queue_size
        self._subscribers: dict[str, Subscriber] = {}
        self._channels: dict[str, set[str]] = {}

    def connect(self, connection_id: str | None = None) -> Subscriber:
        """Register a new connection with no channel memberships."""
        subscriber = Subscriber(
            connection_id=connection_id or uuid4().hex,
            outbox=asyncio.Queue(maxsize=self.queue_size),
        )
        self._subscribers[subscriber.connection_id] = subscriber
        logger.info("Connection %s opened", subscriber.connection_id)
        return subscriber

    def join(self, connection_id: str, project_id: str) -> None:
        """Add a connection to a project's channel. Joining twice is a no-op."""
        subscriber = self._subscribers.get(connection_id)
        if subscriber is None:
            logger.warning("Join from unknown connection %s ignored", connection_id)
            return
        channel = str(project_id)
        self._channels.setdefault(channel, set()).add(connection_id)
        subscriber.channels.add(channel)
        logger.info("Connection %s joined project %s", connection_id, channel)

    def publish(self, sender_id: str, project_id: str, payload: Any) -> int:
        """Queue ``payload`` for every channel member except the sender.

        Fire-and-forget: returns how many subscribers it was queued for.
        A subscriber whose queue is full misses the message.
        """
        channel = str(project_id)
        delivered = 0
        for connection_id in self._channels.get(channel, ()):
            if connection_id == sender_id:
                continue
            subscriber = self._subscribers[connection_id]
            try:
                subscriber.outbox.put_nowait(payload)
                delivered += 1
            except asyncio.QueueFull:
                logger.warning(
                    "Dropping update for slow connection %s on project %s",
                    connection_id,
                    channel,
                )
        return delivered

    def disconnect(self, connection_id: str) -> None:
        """Remove a connection from every channel it joined."""
        subscriber = self._subscribers.pop(connection_id, None)
        if subscriber is None:
            return
        for channel in subscriber.channels:
            members = self._channels.get(channel)
            if members is None:
                continue
            members.discard(connection_id)
            if not members:
                del self._channels[channel]
        subscriber.channels.clear()
        logger.info("Connection %s closed", connection_id)

    def members(self, project_id: str) -> set[str]:
        return set(self._channels.get(str(project_id), ()))

    def is_connected(self, connection_id: str) -> bool:
        return connection_id in self._subscribers

    @property
    def connection_count(self) -> int:
        return len(self._subscribers)
