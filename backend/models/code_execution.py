from sqlalchemy import Column, Integer, String, Text, DateTime
from database.db import Base
from datetime import datetime

class CodeExecution(Base):
    """
    Append-only history entry for one "run" of the shared editor.
    Created exactly once per attempt and never updated or deleted.
    """
    __tablename__ = "code_executions"

    # Autoincrement key doubles as insertion order for the history query
    id = Column(Integer, primary_key=True, autoincrement=True)

    session_id = Column(String, nullable=False, index=True)
    """Code editor session the attempt belongs to"""

    user_id = Column(String, nullable=False)
    """Participant who pressed run"""

    # Submission
    code = Column(Text, nullable=False, default="")
    language = Column(String(20), nullable=False)
    input = Column(Text, nullable=False, default="")

    # Outcome
    output = Column(Text, nullable=False, default="")
    error = Column(Text, nullable=False, default="")

    status = Column(String(30), nullable=False)
    """Finished, Runtime Error, Compilation Error or Error"""

    execution_time = Column(Integer, nullable=False, default=0)
    """Wall-clock milliseconds measured by the caller"""

    memory = Column(Integer, nullable=False, default=0)
    """Memory reported by the run stage"""

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<CodeExecution(id={self.id}, session_id={self.session_id}, status={self.status})>"
