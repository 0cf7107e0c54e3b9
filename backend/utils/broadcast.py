"""Broadcast utilities"""

import logging
from typing import Dict, Any
from core.state import session_subscribers, unsubscribe

logger = logging.getLogger(__name__)

async def broadcast_session_update(session_id: str, message: Dict[str, Any]) -> int:
    """Broadcast message to every WebSocket subscribed to a code session.

    Returns the number of subscribers that received it.
    """
    delivered = 0
    for websocket in list(session_subscribers.get(session_id, [])):
        try:
            await websocket.send_json(message)
            delivered += 1
        except Exception as e:
            logger.error(f"Broadcast error on session {session_id}: {e}")
            unsubscribe(session_id, websocket)
    return delivered
