import json
import logging
from typing import Optional

import websockets

from services.session_sync import CodeSessionSync

logger = logging.getLogger(__name__)

class CodeSessionClient:
    """
    WebSocket participant of a live code session.

    Connects to /ws/code/{session_id}, adopts the room snapshot on entry,
    reconciles every broadcast update and carries the local writes.
    """

    def __init__(
        self,
        server_url: str,
        session_id: str,
        user_id: str,
        debounce_seconds: Optional[float] = None
    ):
        self.url = f"{server_url.rstrip('/')}/ws/code/{session_id}"
        self.ws = None
        self.sync = CodeSessionSync(
            session_id=session_id,
            user_id=user_id,
            transport=self,
            debounce_seconds=debounce_seconds,
        )

    async def connect(self):
        """Open the socket and apply the room snapshot"""
        try:
            self.ws = await websockets.connect(self.url)
            logger.info(f"✅ Connected to code session {self.sync.session_id}")

            snapshot = json.loads(await self.ws.recv())
            if snapshot.get("type") == "session_snapshot":
                self.sync.enter_room(snapshot.get("session"))

        except Exception as e:
            logger.error(f"Failed to join code session: {e}")
            raise

    async def disconnect(self):
        if self.ws:
            await self.sync.flush()
            self.sync.close()
            await self.ws.close()
            logger.info(f"🔌 Left code session {self.sync.session_id}")

    async def listen(self):
        """Generator that reconciles and yields every server message"""
        if not self.ws: return

        async for raw in self.ws:
            message = json.loads(raw)
            message_type = message.get("type")

            if message_type == "session_update":
                message["applied"] = self.sync.apply_remote(message.get("session"))

            elif message_type == "error":
                logger.error(f"Code session error: {message.get('message')}")

            yield message

    async def _send(self, message: dict):
        if not self.ws:
            raise RuntimeError("Code session client is not connected")
        await self.ws.send(json.dumps(message))

    # ============ Transport used by CodeSessionSync ============

    async def update_code(self, session_id: str, code: str, language: str, question_id: str, user_id: str):
        await self._send({
            "type": "update_code",
            "code": code,
            "language": language,
            "question_id": question_id,
            "user_id": user_id,
        })

    async def update_language(self, session_id: str, language: str, user_id: str):
        await self._send({
            "type": "update_language",
            "language": language,
            "user_id": user_id,
        })

    async def update_question(self, session_id: str, question_id: str, code: str, user_id: str):
        await self._send({
            "type": "update_question",
            "question_id": question_id,
            "code": code,
            "user_id": user_id,
        })
