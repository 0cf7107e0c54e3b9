from sqlalchemy.orm import Session
from typing import Dict, List, Optional, Tuple
from models.interview import Interview, InterviewStatus, InterviewResult
from models.comment import Comment
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

PASSING_RATING = 3

class InterviewService:
    """
    Business logic for interview scheduling, results and feedback.
    """

    @staticmethod
    def create_interview(
        db: Session,
        title: str,
        start_time: datetime,
        stream_call_id: str,
        candidate_id: str,
        interviewer_ids: List[str],
        description: str = None,
        candidate_email: str = None,
        candidate_name: str = None,
        status: str = InterviewStatus.UPCOMING.value
    ) -> Interview:
        """
        Create a new interview record.

        Args:
            db: Database session
            title: Interview title (position)
            start_time: Scheduled start
            stream_call_id: Video call identifier
            candidate_id: Candidate identity
            interviewer_ids: Interviewer identities
            description: Optional description
            candidate_email: Candidate email (optional)
            candidate_name: Candidate name (optional)
            status: Initial status

        Returns:
            Created Interview object
        """
        try:
            interview = Interview(
                title=title,
                description=description,
                start_time=start_time,
                status=status,
                stream_call_id=stream_call_id,
                candidate_id=candidate_id,
                candidate_email=candidate_email,
                candidate_name=candidate_name,
                interviewer_ids=interviewer_ids,
            )

            db.add(interview)
            db.commit()
            db.refresh(interview)

            logger.info(f"Interview created: {interview.id} for candidate {candidate_id}")

            return interview

        except Exception as e:
            logger.error(f"Failed to create interview: {str(e)}")
            db.rollback()
            raise

    @staticmethod
    def get_interview(db: Session, interview_id: str) -> Optional[Interview]:
        return db.query(Interview).filter(Interview.id == interview_id).first()

    @staticmethod
    def get_by_stream_call_id(db: Session, stream_call_id: str) -> Optional[Interview]:
        return db.query(Interview).filter(
            Interview.stream_call_id == stream_call_id
        ).first()

    @staticmethod
    def list_all(db: Session) -> List[Interview]:
        return db.query(Interview).order_by(Interview.start_time.desc()).all()

    @staticmethod
    def list_for_candidate(db: Session, candidate_id: str) -> List[Interview]:
        return db.query(Interview).filter(
            Interview.candidate_id == candidate_id
        ).order_by(Interview.start_time.desc()).all()

    @staticmethod
    def update_status(db: Session, interview_id: str, status: str) -> Optional[Interview]:
        """
        Change the status; completing an interview stamps its end time.

        Returns:
            Updated Interview object, or None if not found
        """
        try:
            interview = InterviewService.get_interview(db, interview_id)

            if not interview:
                logger.error(f"Interview not found: {interview_id}")
                return None

            interview.status = status
            if status == InterviewStatus.COMPLETED.value:
                interview.end_time = datetime.utcnow()

            db.add(interview)
            db.commit()
            db.refresh(interview)

            logger.info(f"Interview status updated: {interview_id} -> {status}")

            return interview

        except Exception as e:
            logger.error(f"Failed to update interview status: {str(e)}")
            db.rollback()
            raise

    @staticmethod
    def update_result(
        db: Session,
        interview_id: str,
        result: str,
        overall_rating: int = None
    ) -> Optional[Interview]:
        """
        Record the outcome. The interview is marked completed.

        Returns:
            Updated Interview object, or None if not found
        """
        try:
            interview = InterviewService.get_interview(db, interview_id)

            if not interview:
                logger.error(f"Interview not found: {interview_id}")
                return None

            interview.result = result
            if overall_rating is not None:
                interview.overall_rating = overall_rating
            interview.status = InterviewStatus.COMPLETED.value
            interview.end_time = datetime.utcnow()

            db.add(interview)
            db.commit()
            db.refresh(interview)

            logger.info(f"Interview result recorded: {interview_id} -> {result}")

            return interview

        except Exception as e:
            logger.error(f"Failed to update interview result: {str(e)}")
            db.rollback()
            raise

    @staticmethod
    def result_for_rating(rating: int) -> str:
        """Ratings of 3 and above pass"""
        if rating >= PASSING_RATING:
            return InterviewResult.PASSED.value
        return InterviewResult.FAILED.value

    @staticmethod
    def submit_feedback(
        db: Session,
        interview_id: str,
        interviewer_id: str,
        content: str,
        rating: int
    ) -> Optional[Tuple[Interview, Comment]]:
        """
        Store interviewer feedback and the result it decides, in one commit.

        The rating sets the result, the interview is marked completed and
        the comment is added. Either all of it is stored or none of it.

        Args:
            db: Database session
            interview_id: Rated interview
            interviewer_id: Author
            content: Feedback text
            rating: 1 to 5

        Returns:
            (updated Interview, created Comment), or None if not found
        """
        try:
            interview = InterviewService.get_interview(db, interview_id)

            if not interview:
                logger.error(f"Interview not found: {interview_id}")
                return None

            interview.result = InterviewService.result_for_rating(rating)
            interview.overall_rating = rating
            interview.status = InterviewStatus.COMPLETED.value
            interview.end_time = datetime.utcnow()

            comment = Comment(
                interview_id=interview_id,
                interviewer_id=interviewer_id,
                content=content,
                rating=rating,
            )

            db.add(interview)
            db.add(comment)
            db.commit()
            db.refresh(interview)
            db.refresh(comment)

            logger.info(f"Feedback added: {comment.id} on interview {interview_id} -> {interview.result}")

            return interview, comment

        except Exception as e:
            logger.error(f"Failed to submit feedback: {str(e)}")
            db.rollback()
            raise

    @staticmethod
    def list_comments(db: Session, interview_id: str) -> List[Comment]:
        return db.query(Comment).filter(
            Comment.interview_id == interview_id
        ).order_by(Comment.created_at.asc()).all()

    @staticmethod
    def has_commented(db: Session, interview_id: str, interviewer_id: str) -> bool:
        return db.query(Comment).filter(
            Comment.interview_id == interview_id,
            Comment.interviewer_id == interviewer_id
        ).first() is not None

    @staticmethod
    def candidate_dashboard(db: Session, candidate_id: str) -> List[Dict]:
        """
        Candidate's interviews, each with its comments attached.
        """
        interviews = InterviewService.list_for_candidate(db, candidate_id)
        if not interviews:
            return []

        comments = db.query(Comment).filter(
            Comment.interview_id.in_([interview.id for interview in interviews])
        ).order_by(Comment.created_at.asc()).all()

        comments_by_interview: Dict[str, List[Comment]] = {}
        for comment in comments:
            comments_by_interview.setdefault(comment.interview_id, []).append(comment)

        return [
            {
                "interview": interview,
                "comments": comments_by_interview.get(interview.id, []),
            }
            for interview in interviews
        ]
