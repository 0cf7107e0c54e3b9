from fastapi import WebSocket
from typing import Optional
import logging

from core.state import session_subscribers, subscribe, unsubscribe
from models.code_session import CodeEditorSession
from utils.broadcast import broadcast_session_update

logger = logging.getLogger(__name__)

class CodeRoomHandler:
    """
    Track the WebSocket subscribers of each code session and fan out
    every stored write to them.
    """

    async def connect(
        self,
        websocket: WebSocket,
        session_id: str,
        record: Optional[CodeEditorSession]
    ):
        """
        Accept a participant and send the current record (room entry pull).

        Args:
            websocket: WebSocket connection
            session_id: Code session to subscribe to
            record: Current shared record, None for a fresh room
        """
        await websocket.accept()
        subscribe(session_id, websocket)

        logger.info(f"WebSocket connected: session={session_id}, participants={self.participant_count(session_id)}")

        await websocket.send_json({
            "type": "session_snapshot",
            "session": record.to_dict() if record else None
        })

    def disconnect(self, websocket: WebSocket, session_id: str):
        unsubscribe(session_id, websocket)
        logger.info(f"WebSocket disconnected: session={session_id}")

    async def publish(self, record: CodeEditorSession) -> int:
        """
        Broadcast a stored record to every subscriber of its session.

        Returns:
            Number of participants reached
        """
        delivered = await broadcast_session_update(record.session_id, {
            "type": "session_update",
            "session": record.to_dict()
        })
        logger.debug(f"Session update published: session={record.session_id}, delivered={delivered}")
        return delivered

    def participant_count(self, session_id: str) -> int:
        return len(session_subscribers.get(session_id, []))

# Global handler instance
room_handler = CodeRoomHandler()
