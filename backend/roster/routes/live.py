from fastapi import APIRouter, WebSocket, WebSocketDisconnect
from typing import Optional
import secrets
import logging

logger = logging.getLogger(__name__)

router = APIRouter()

@router.websocket("/ws/roster")
async def roster_updates(websocket: WebSocket, token: Optional[str] = None):
    """Push a fresh snapshot of users and skills every time either changes."""
    context = websocket.app.state.roster
    session = context.session_provider()
    await session.restore(token)
    if session.current_user is None:
        await websocket.close(code=1008, reason="Not signed in")
        return

    # one user may have several tabs open
    connection_id = f"{session.current_user['id']}:{secrets.token_hex(4)}"
    if not await context.connections.connect(connection_id, websocket):
        return

    try:
        for cache in (context.users, context.skills):
            await context.connections.notify(connection_id, context.snapshot_message(cache))
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        await context.connections.disconnect(connection_id)
