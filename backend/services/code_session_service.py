from sqlalchemy.orm import Session
from typing import Optional
from models.code_session import CodeEditorSession, now_ms
from core.languages import DEFAULT_LANGUAGE
import logging

logger = logging.getLogger(__name__)

class CodeSessionService:
    """
    Read and upsert the shared code editor record of a live interview room.

    Writes are unconditional overwrites: there is no version check and no
    merge, so whichever write reaches the store last wins.
    """

    @staticmethod
    def get(db: Session, session_id: str) -> Optional[CodeEditorSession]:
        """
        Look up the record for a session.

        Args:
            db: Database session
            session_id: Room identifier

        Returns:
            The record, or None if the room has no shared state yet
        """
        return db.query(CodeEditorSession).filter(
            CodeEditorSession.session_id == session_id
        ).first()

    @staticmethod
    def upsert_code(
        db: Session,
        session_id: str,
        code: str,
        language: str,
        question_id: str,
        user_id: str
    ) -> CodeEditorSession:
        """
        Overwrite code, language and question, creating the record if needed.

        Args:
            db: Database session
            session_id: Room identifier
            code: Full editor buffer
            language: Selected language
            question_id: Selected question
            user_id: Writer

        Returns:
            The stored record
        """
        try:
            record = CodeSessionService.get(db, session_id)

            if record:
                record.code = code
                record.language = language
                record.question_id = question_id
                record.user_id = user_id
                record.last_updated = now_ms()
            else:
                record = CodeEditorSession(
                    session_id=session_id,
                    code=code,
                    language=language,
                    question_id=question_id,
                    user_id=user_id,
                    last_updated=now_ms(),
                )

            db.add(record)
            db.commit()
            db.refresh(record)

            logger.debug(f"Code saved: session={session_id}, user={user_id}, len={len(code)}")

            return record

        except Exception as e:
            logger.error(f"Failed to save code for session {session_id}: {str(e)}")
            db.rollback()
            raise

    @staticmethod
    def upsert_language(
        db: Session,
        session_id: str,
        language: str,
        user_id: str
    ) -> Optional[CodeEditorSession]:
        """
        Patch the language of an existing record.

        A room without a record is left untouched and None is returned;
        the code write that follows a language switch creates it.
        """
        try:
            record = CodeSessionService.get(db, session_id)

            if not record:
                logger.debug(f"Language change ignored, no record yet: session={session_id}")
                return None

            record.language = language
            record.user_id = user_id
            record.last_updated = now_ms()

            db.add(record)
            db.commit()
            db.refresh(record)

            logger.info(f"Language changed: session={session_id}, language={language}")

            return record

        except Exception as e:
            logger.error(f"Failed to change language for session {session_id}: {str(e)}")
            db.rollback()
            raise

    @staticmethod
    def upsert_question(
        db: Session,
        session_id: str,
        question_id: str,
        code: str,
        user_id: str
    ) -> CodeEditorSession:
        """
        Patch question and code, or create the record with the default language.

        Args:
            db: Database session
            session_id: Room identifier
            question_id: Newly selected question
            code: Starter code for the new question
            user_id: Writer

        Returns:
            The stored record
        """
        try:
            record = CodeSessionService.get(db, session_id)

            if record:
                record.question_id = question_id
                record.code = code
                record.user_id = user_id
                record.last_updated = now_ms()
            else:
                record = CodeEditorSession(
                    session_id=session_id,
                    code=code,
                    language=DEFAULT_LANGUAGE,
                    question_id=question_id,
                    user_id=user_id,
                    last_updated=now_ms(),
                )

            db.add(record)
            db.commit()
            db.refresh(record)

            logger.info(f"Question changed: session={session_id}, question={question_id}")

            return record

        except Exception as e:
            logger.error(f"Failed to change question for session {session_id}: {str(e)}")
            db.rollback()
            raise
