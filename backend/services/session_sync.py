"""
Client-side reconciliation of a local editor buffer with the shared code session.

Local edits update the buffer at once and reach the store through a debounce
window. Remote updates overwrite the buffer only when they carry different,
non-empty code. Language and question travel one way: they are pushed when the
local participant changes them and pulled only on room entry.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, NamedTuple, Optional

from config.settings import settings
from core.languages import DEFAULT_LANGUAGE, is_supported
from core.questions import DEFAULT_QUESTION_ID, get_question, starter_code

logger = logging.getLogger(__name__)


class Debouncer:
    """
    Delay a coroutine callback until calls stop for `delay` seconds.

    Each call cancels the pending one and schedules a new task; only a task
    whose sleep completes runs the callback, with the last call's arguments.
    Must be called from inside a running event loop.
    """

    def __init__(
        self,
        delay: float,
        callback: Callable[..., Awaitable[Any]],
        on_error: Optional[Callable[[Exception], None]] = None
    ):
        self.delay = delay
        self.callback = callback
        self.on_error = on_error
        self._task: Optional[asyncio.Task] = None
        self._args: tuple = ()

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def __call__(self, *args):
        self.cancel()
        self._args = args
        self._task = asyncio.create_task(self._fire(args))

    async def _fire(self, args: tuple):
        await asyncio.sleep(self.delay)
        # Past this point a new call schedules a fresh task instead of cancelling this one
        self._task = None
        await self._run(args)

    async def _run(self, args: tuple):
        try:
            await self.callback(*args)
        except Exception as e:
            logger.error(f"Debounced write failed: {e}")
            if self.on_error:
                self.on_error(e)

    def cancel(self):
        if self._task is not None and not self._task.done():
            self._task.cancel()
        self._task = None

    async def flush(self):
        """Run the pending call now instead of waiting for the window to elapse."""
        if not self.pending:
            return
        args = self._args
        self.cancel()
        await self._run(args)


class CursorPosition(NamedTuple):
    """1-based editor cursor"""
    line: int
    column: int


class CodeSessionSync:
    """
    Local side of one participant in a shared code session.

    `transport` is any object with coroutine methods update_code,
    update_language and update_question taking the same keyword arguments
    as CodeSessionService (CodeSessionClient is the WebSocket one).
    """

    def __init__(
        self,
        session_id: str,
        user_id: str,
        transport,
        debounce_seconds: Optional[float] = None,
        question_id: str = DEFAULT_QUESTION_ID,
        language: str = DEFAULT_LANGUAGE,
        on_error: Optional[Callable[[Exception], None]] = None
    ):
        if debounce_seconds is None:
            debounce_seconds = settings.CODE_SYNC_DEBOUNCE_MS / 1000

        self.session_id = session_id
        self.user_id = user_id
        self.transport = transport
        self.question_id = question_id
        self.language = language
        self.code = starter_code(question_id, language)
        self.cursor: Optional[CursorPosition] = None
        self._push_code = Debouncer(debounce_seconds, self._send_code, on_error=on_error)

    @property
    def has_pending_write(self) -> bool:
        return self._push_code.pending

    def snapshot(self) -> dict:
        return {
            "session_id": self.session_id,
            "code": self.code,
            "language": self.language,
            "question_id": self.question_id,
        }

    # ============ Pull ============

    def enter_room(self, record: Optional[dict]) -> bool:
        """
        Adopt the shared record when joining a room.

        This is the only place language and question are taken from the store.
        Returns False when the room has no record yet.
        """
        if not record:
            return False

        question_id = record.get("question_id")
        if question_id and get_question(question_id):
            self.question_id = question_id

        language = record.get("language")
        if language and is_supported(language):
            self.language = language

        self.code = record.get("code") or starter_code(self.question_id, self.language)

        logger.info(f"Entered room {self.session_id}: question={self.question_id}, language={self.language}")

        return True

    def apply_remote(self, record: Optional[dict]) -> bool:
        """
        Reconcile a remote update with the local buffer.

        Only the code is taken. An empty remote buffer is ignored, and the
        cursor is carried over (clamped to the new text), which can land in
        the wrong spot when the remote edit changed text before it.

        Returns True when the local buffer was overwritten.
        """
        if not record:
            return False

        remote_code = record.get("code") or ""
        if not remote_code or remote_code == self.code:
            return False

        position = self.cursor
        self.code = remote_code
        if position is not None:
            self.cursor = self._clamp(position)

        return True

    def _clamp(self, position: CursorPosition) -> CursorPosition:
        lines = self.code.split("\n")
        line = min(max(position.line, 1), len(lines))
        column = min(max(position.column, 1), len(lines[line - 1]) + 1)
        return CursorPosition(line, column)

    # ============ Push ============

    def local_edit(self, code: str, cursor: Optional[CursorPosition] = None):
        """Apply a keystroke locally and schedule the debounced store write."""
        self.code = code
        if cursor is not None:
            self.cursor = cursor
        self._push_code(code, self.language, self.question_id)

    async def _send_code(self, code: str, language: str, question_id: str):
        await self.transport.update_code(
            session_id=self.session_id,
            code=code,
            language=language,
            question_id=question_id,
            user_id=self.user_id,
        )

    async def change_language(self, language: str):
        """Switch language, reset to the question's starter code and push both."""
        if not is_supported(language):
            raise ValueError(f"Unsupported language: {language}")

        self._push_code.cancel()
        self.language = language
        self.code = starter_code(self.question_id, language)

        await self.transport.update_language(
            session_id=self.session_id,
            language=language,
            user_id=self.user_id,
        )
        await self._send_code(self.code, self.language, self.question_id)

    async def change_question(self, question_id: str):
        """Switch question, reset to its starter code and push."""
        if not get_question(question_id):
            raise ValueError(f"Unknown question: {question_id}")

        self._push_code.cancel()
        self.question_id = question_id
        self.code = starter_code(question_id, self.language)

        await self.transport.update_question(
            session_id=self.session_id,
            question_id=question_id,
            code=self.code,
            user_id=self.user_id,
        )

    async def flush(self):
        await self._push_code.flush()

    def close(self):
        self._push_code.cancel()
