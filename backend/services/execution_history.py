from sqlalchemy.orm import Session
from typing import List, Optional
from models.code_execution import CodeExecution
from services.execution_gateway import ExecutionResult
from config.settings import settings
import logging

logger = logging.getLogger(__name__)

class ExecutionHistoryService:
    """
    Append-only log of execution attempts per code session.
    Nothing is pruned; only the read side is bounded.
    """

    @staticmethod
    def record(
        db: Session,
        session_id: str,
        user_id: str,
        code: str,
        language: str,
        input: Optional[str],
        result: ExecutionResult
    ) -> CodeExecution:
        """
        Store one attempt, whatever its outcome.

        Args:
            db: Database session
            session_id: Code session the run belongs to
            user_id: Participant who ran the code
            code: Submitted source
            language: Submitted language
            input: Submitted stdin
            result: Normalized outcome, with time filled in

        Returns:
            Created CodeExecution row
        """
        try:
            execution = CodeExecution(
                session_id=session_id,
                user_id=user_id,
                code=code,
                language=language,
                input=input or "",
                output=result.output,
                error=result.error,
                status=result.status,
                execution_time=result.time,
                memory=result.memory,
            )

            db.add(execution)
            db.commit()
            db.refresh(execution)

            logger.info(f"Execution recorded: session={session_id}, status={result.status}")

            return execution

        except Exception as e:
            logger.error(f"Failed to record execution for session {session_id}: {str(e)}")
            db.rollback()
            raise

    @staticmethod
    def recent(
        db: Session,
        session_id: str,
        limit: Optional[int] = None
    ) -> List[CodeExecution]:
        """Most recent attempts of a session, newest first."""
        if limit is None:
            limit = settings.EXECUTION_HISTORY_LIMIT

        return (
            db.query(CodeExecution)
            .filter(CodeExecution.session_id == session_id)
            .order_by(CodeExecution.created_at.desc(), CodeExecution.id.desc())
            .limit(limit)
            .all()
        )
