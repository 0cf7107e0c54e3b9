from sqlalchemy import Column, String, DateTime, Integer, ForeignKey, Text
from sqlalchemy.orm import relationship
from database.db import Base
from datetime import datetime
import uuid

class Comment(Base):
    """
    Interviewer feedback on an interview.
    Each interviewer leaves at most one comment per interview.
    """
    __tablename__ = "comments"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    """Unique comment ID (UUID)"""

    # Foreign key
    interview_id = Column(String, ForeignKey("interviews.id"), nullable=False, index=True)
    """Reference to the rated interview"""

    interviewer_id = Column(String, nullable=False)
    """Identity provider subject of the interviewer"""

    content = Column(Text, nullable=False)
    """Freeform feedback about the candidate's performance"""

    rating = Column(Integer, nullable=False)
    """Rating from 1 to 5; 3 and above counts as a pass"""

    created_at = Column(DateTime, default=datetime.utcnow)

    # Relationship
    interview = relationship("Interview", backref="comments")

    def __repr__(self):
        return f"<Comment(id={self.id}, interview_id={self.interview_id}, rating={self.rating})>"
