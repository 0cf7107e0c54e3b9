from sqlalchemy import Column, String, Text, BigInteger
from database.db import Base
from core.languages import DEFAULT_LANGUAGE
import time
import uuid

def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds"""
    return int(time.time() * 1000)

class CodeEditorSession(Base):
    """
    Shared code editor state for one live interview room.
    Exactly one row per session_id; every write overwrites the previous one.
    """
    __tablename__ = "code_editor_sessions"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    """Unique record ID (UUID)"""

    session_id = Column(String, nullable=False, unique=True, index=True)
    """Opaque room identifier, the reconciliation key"""

    code = Column(Text, nullable=False, default="")
    """Full editor buffer (last write wins)"""

    language = Column(String(20), nullable=False, default=DEFAULT_LANGUAGE)
    """Selected language: javascript, python or java"""

    question_id = Column(String(100), nullable=False)
    """Question bank entry currently shown in the room"""

    last_updated = Column(BigInteger, nullable=False, default=now_ms)
    """Epoch milliseconds of the last write (advisory only)"""

    user_id = Column(String, nullable=False)
    """Last writer (advisory only)"""

    def __repr__(self):
        return f"<CodeEditorSession(session_id={self.session_id}, language={self.language}, question={self.question_id})>"

    def to_dict(self) -> dict:
        return {
            "session_id": self.session_id,
            "code": self.code,
            "language": self.language,
            "question_id": self.question_id,
            "last_updated": self.last_updated,
            "user_id": self.user_id,
        }
