from fastapi import WebSocket
from starlette.websockets import WebSocketState
from typing import Dict
import asyncio
import logging
from datetime import datetime, timedelta

logger = logging.getLogger(__name__)

class ConnectionManager:
    """Open WebSocket connections that receive live roster snapshots."""

    def __init__(self, max_connections: int = 1000):
        self.active_connections: Dict[str, WebSocket] = {}
        self.connection_timestamps: Dict[str, datetime] = {}
        self.max_connections = max_connections  # Prevent memory exhaustion
        self.connection_timeout = timedelta(hours=24)  # Auto-cleanup stale connections
        self._cleanup_task = None

    def start(self):
        """Start the stale-connection sweep; needs a running loop"""
        if self._cleanup_task is None:
            self._cleanup_task = asyncio.create_task(self._cleanup_stale_connections())

    async def stop(self):
        if self._cleanup_task is not None:
            self._cleanup_task.cancel()
            try:
                await self._cleanup_task
            except asyncio.CancelledError:
                pass
            self._cleanup_task = None
        for connection_id in list(self.active_connections):
            await self._force_disconnect(connection_id)

    async def connect(self, connection_id: str, websocket: WebSocket):
        if len(self.active_connections) >= self.max_connections:
            logger.warning(f"Connection limit reached ({self.max_connections}), rejecting {connection_id}")
            await websocket.close(code=1013, reason="Server overloaded")
            return False

        await websocket.accept()

        # A client reconnecting replaces its previous socket
        if connection_id in self.active_connections:
            await self._force_disconnect(connection_id)

        self.active_connections[connection_id] = websocket
        self.connection_timestamps[connection_id] = datetime.utcnow()

        logger.info(f"{connection_id} connected. Total connections: {len(self.active_connections)}")
        return True

    async def disconnect(self, connection_id: str):
        await self._force_disconnect(connection_id)

    async def _force_disconnect(self, connection_id: str):
        ws = self.active_connections.pop(connection_id, None)
        self.connection_timestamps.pop(connection_id, None)
        if ws is None:
            return
        try:
            if ws.client_state != WebSocketState.DISCONNECTED:
                await ws.close()
        except Exception as e:
            logger.warning(f"Error closing websocket for {connection_id}: {e}")
        logger.info(f"{connection_id} disconnected. Total connections: {len(self.active_connections)}")

    async def notify(self, connection_id: str, payload: dict):
        ws = self.active_connections.get(connection_id)
        if ws is None:
            return False
        try:
            await ws.send_json(payload)
            return True
        except Exception as e:
            logger.warning(f"Failed to send message to {connection_id}: {e}")
            await self._force_disconnect(connection_id)
            return False

    async def broadcast(self, payload: dict):
        disconnected = []
        successful_sends = 0

        for connection_id, ws in list(self.active_connections.items()):
            try:
                await ws.send_json(payload)
                successful_sends += 1
            except Exception as e:
                logger.warning(f"Broadcast failed for {connection_id}: {e}")
                disconnected.append(connection_id)

        for connection_id in disconnected:
            await self._force_disconnect(connection_id)

        logger.debug(f"Broadcast sent to {successful_sends}/{successful_sends + len(disconnected)} connections")
        return successful_sends

    async def _cleanup_stale_connections(self):
        while True:
            await asyncio.sleep(300)  # Check every 5 minutes
            current_time = datetime.utcnow()
            stale = [
                connection_id for connection_id, timestamp in self.connection_timestamps.items()
                if current_time - timestamp > self.connection_timeout
            ]
            for connection_id in stale:
                logger.info(f"Cleaning up stale connection {connection_id}")
                await self._force_disconnect(connection_id)

    def get_connection_stats(self) -> dict:
        return {
            "active_connections": len(self.active_connections),
            "max_connections": self.max_connections,
        }
