"""
WebSocket relay for project-update notifications.

Frames are JSON objects ``{"event": ..., "data": ...}``:

* ``join-project``   data is the project id
* ``project-update`` data is an object carrying ``projectId``; it is sent to
  the other members of that project's channel as ``project-updated``

Notifications are hints to re-fetch over HTTP, not a copy of the new state.
"""

import asyncio
import json
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from projecthub.realtime import ChannelRegistry, Subscriber

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Realtime"])

JOIN_EVENT = "join-project"
UPDATE_EVENT = "project-update"
UPDATED_EVENT = "project-updated"


def _project_id_of(data: Any) -> str | None:
    if isinstance(data, dict):
        data = data.get("projectId")
    if isinstance(data, (str, int)) and not isinstance(data, bool) and str(data):
        return str(data)
    return None


def handle_frame(registry: ChannelRegistry, connection_id: str, frame: dict) -> None:
    event = frame.get("event")
    data = frame.get("data")

    if event == JOIN_EVENT:
        project_id = _project_id_of(data)
        if project_id is None:
            logger.warning("join-project without a project id from %s", connection_id)
            return
        registry.join(connection_id, project_id)
    elif event == UPDATE_EVENT:
        project_id = _project_id_of(data) if isinstance(data, dict) else None
        if project_id is None:
            logger.warning("project-update without projectId from %s", connection_id)
            return
        registry.publish(connection_id, project_id, data)
    else:
        logger.warning("Ignoring unknown event %r from %s", event, connection_id)


async def _pump(websocket: WebSocket, subscriber: Subscriber) -> None:
    """Forward queued notifications to the socket, one at a time, in order."""
    while True:
        payload = await subscriber.outbox.get()
        await websocket.send_json({"event": UPDATED_EVENT, "data": payload})


def get_registry(websocket: WebSocket) -> ChannelRegistry:
    return websocket.app.state.realtime_registry


@router.websocket("/ws")
async def realtime_socket(websocket: WebSocket):
    registry = get_registry(websocket)
    await websocket.accept()
    subscriber = registry.connect()
    writer = asyncio.create_task(_pump(websocket, subscriber))

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            text = message.get("text")
            if text is None:
                logger.warning("Binary frame from %s ignored", subscriber.connection_id)
                continue
            try:
                frame = json.loads(text)
            except json.JSONDecodeError:
                logger.warning("Malformed frame from %s", subscriber.connection_id)
                continue
            if not isinstance(frame, dict):
                logger.warning("Non-object frame from %s", subscriber.connection_id)
                continue
            handle_frame(registry, subscriber.connection_id, frame)
    except WebSocketDisconnect:
        pass
    finally:
        registry.disconnect(subscriber.connection_id)
        writer.cancel()
        await asyncio.gather(writer, return_exceptions=True)
