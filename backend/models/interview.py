from sqlalchemy import Column, String, DateTime, Integer, JSON, Text
from database.db import Base
from datetime import datetime
import uuid
import enum

class InterviewStatus(str, enum.Enum):
    """Interview status enumeration"""
    UPCOMING = "upcoming"
    LIVE = "live"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

class InterviewResult(str, enum.Enum):
    """Interview outcome enumeration"""
    PASSED = "passed"
    FAILED = "failed"

class Interview(Base):
    """
    Interview model for scheduled video interviews.
    One row per scheduled call between a candidate and its interviewers.
    """
    __tablename__ = "interviews"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    """Unique interview ID (UUID)"""

    title = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)

    # Interview timing
    start_time = Column(DateTime, nullable=False)
    """Scheduled start"""

    end_time = Column(DateTime, nullable=True)
    """Set when the interview is completed"""

    status = Column(String(20), default=InterviewStatus.UPCOMING.value, index=True)
    """Interview status: upcoming, live, completed or cancelled"""

    stream_call_id = Column(String, nullable=False, index=True)
    """Video call identifier, also used as the code editor session id"""

    # Participants (identity provider subjects)
    candidate_id = Column(String, nullable=False, index=True)
    candidate_email = Column(String(100), nullable=True)
    candidate_name = Column(String(100), nullable=True)

    interviewer_ids = Column(JSON, default=list)
    """
    Interviewers attending the call.
    Format: ["user_abc", "user_def", ...]
    """

    # Outcome
    result = Column(String(10), nullable=True)
    """passed or failed, once rated"""

    overall_rating = Column(Integer, nullable=True)
    """Overall rating from 1 to 5"""

    created_at = Column(DateTime, default=datetime.utcnow)

    def __repr__(self):
        return f"<Interview(id={self.id}, title={self.title}, status={self.status})>"
