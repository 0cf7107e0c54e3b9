from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr, Field
from typing import List, Optional
from datetime import datetime
from database.db import get_db
from models.interview import Interview, InterviewStatus, InterviewResult
from services.interview_service import InterviewService
from services.notification_service import NotificationService, get_notification_service
from utils.security import Identity, get_current_identity, require_interviewer
import logging

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/interviews", tags=["interviews"])

# ============ Request/Response Models ============

class CreateInterviewRequest(BaseModel):
    """Interview scheduling request"""
    title: str
    description: Optional[str] = None
    start_time: datetime
    stream_call_id: str
    candidate_id: str
    candidate_email: Optional[EmailStr] = None
    candidate_name: Optional[str] = None
    interviewer_ids: List[str] = []
    status: InterviewStatus = InterviewStatus.UPCOMING

    class Config:
        json_schema_extra = {
            "example": {
                "title": "Senior Backend Engineer",
                "description": "Live coding round",
                "start_time": "2026-11-02T15:00:00",
                "stream_call_id": "call_8f2d",
                "candidate_id": "user_candidate",
                "candidate_email": "alice@example.com",
                "candidate_name": "Alice",
                "interviewer_ids": ["user_interviewer"]
            }
        }

class UpdateStatusRequest(BaseModel):
    status: InterviewStatus

class UpdateResultRequest(BaseModel):
    result: InterviewResult
    overall_rating: Optional[int] = Field(default=None, ge=1, le=5)

class AddCommentRequest(BaseModel):
    content: str = Field(min_length=1)
    rating: int = Field(ge=1, le=5)

class CommentResponse(BaseModel):
    id: str
    interview_id: str
    interviewer_id: str
    content: str
    rating: int
    created_at: datetime

    class Config:
        from_attributes = True

class InterviewResponse(BaseModel):
    id: str
    title: str
    description: Optional[str]
    start_time: datetime
    end_time: Optional[datetime]
    status: str
    stream_call_id: str
    candidate_id: str
    candidate_email: Optional[str]
    candidate_name: Optional[str]
    interviewer_ids: List[str]
    result: Optional[str]
    overall_rating: Optional[int]

    class Config:
        from_attributes = True

class InterviewWithCommentsResponse(InterviewResponse):
    comments: List[CommentResponse] = []

# ============ Helpers ============

def _get_or_404(db: Session, interview_id: str) -> Interview:
    interview = InterviewService.get_interview(db, interview_id)
    if not interview:
        logger.warning(f"Interview not found: {interview_id}")
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Interview not found"
        )
    return interview

# ============ Create / Read ============

@router.post("", response_model=InterviewResponse, status_code=status.HTTP_201_CREATED)
async def create_interview(
    request: CreateInterviewRequest,
    background_tasks: BackgroundTasks,
    identity: Identity = Depends(require_interviewer),
    notifications: NotificationService = Depends(get_notification_service),
    db: Session = Depends(get_db)
):
    """
    Schedule an interview. The candidate is emailed when an address is known.

    Raises:
        HTTPException 403: Caller is not an interviewer
        HTTPException 500: Failed to save interview
    """
    try:
        interview = InterviewService.create_interview(
            db,
            title=request.title,
            description=request.description,
            start_time=request.start_time,
            stream_call_id=request.stream_call_id,
            candidate_id=request.candidate_id,
            candidate_email=request.candidate_email,
            candidate_name=request.candidate_name,
            interviewer_ids=request.interviewer_ids or [identity.user_id],
            status=request.status.value,
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create interview"
        )

    if interview.candidate_email:
        background_tasks.add_task(
            notifications.send_interview_scheduled,
            candidate_email=interview.candidate_email,
            candidate_name=interview.candidate_name or "Candidate",
            interview_title=interview.title,
            interview_date=interview.start_time.strftime("%A, %B %d, %Y"),
            interview_time=interview.start_time.strftime("%H:%M"),
            interviewer_name=identity.name or "Interviewer",
        )

    return interview

@router.get("", response_model=List[InterviewResponse])
async def list_interviews(
    identity: Identity = Depends(require_interviewer),
    db: Session = Depends(get_db)
):
    """All interviews (interviewers only)"""
    return InterviewService.list_all(db)

@router.get("/mine", response_model=List[InterviewResponse])
async def my_interviews(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Interviews where the caller is the candidate"""
    return InterviewService.list_for_candidate(db, identity.user_id)

@router.get("/dashboard/candidate", response_model=List[InterviewWithCommentsResponse])
async def candidate_dashboard(
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """The caller's interviews with their feedback attached"""
    rows = InterviewService.candidate_dashboard(db, identity.user_id)
    return [
        InterviewWithCommentsResponse(
            **InterviewResponse.model_validate(row["interview"]).model_dump(),
            comments=[CommentResponse.model_validate(comment) for comment in row["comments"]],
        )
        for row in rows
    ]

@router.get("/stream/{stream_call_id}", response_model=Optional[InterviewResponse])
async def get_by_stream_call_id(
    stream_call_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Interview attached to a video call, or null"""
    return InterviewService.get_by_stream_call_id(db, stream_call_id)

# ============ Status / Result ============

@router.patch("/{interview_id}/status", response_model=InterviewResponse)
async def update_status(
    interview_id: str,
    request: UpdateStatusRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    """Change the status; completing stamps the end time"""
    _get_or_404(db, interview_id)

    try:
        return InterviewService.update_status(db, interview_id, request.status.value)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update interview status"
        )

@router.patch("/{interview_id}/result", response_model=InterviewResponse)
async def update_result(
    interview_id: str,
    request: UpdateResultRequest,
    background_tasks: BackgroundTasks,
    identity: Identity = Depends(require_interviewer),
    notifications: NotificationService = Depends(get_notification_service),
    db: Session = Depends(get_db)
):
    """Record passed/failed, complete the interview and email the candidate"""
    _get_or_404(db, interview_id)

    try:
        interview = InterviewService.update_result(
            db,
            interview_id,
            result=request.result.value,
            overall_rating=request.overall_rating,
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update interview result"
        )

    if interview.candidate_email and interview.overall_rating:
        background_tasks.add_task(
            notifications.send_interview_result,
            candidate_email=interview.candidate_email,
            candidate_name=interview.candidate_name or "Candidate",
            interview_title=interview.title,
            result=interview.result,
            rating=interview.overall_rating,
            interviewer_name=identity.name or "Interviewer",
        )

    return interview

# ============ Feedback ============

@router.get("/{interview_id}/comments", response_model=List[CommentResponse])
async def list_comments(
    interview_id: str,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
):
    _get_or_404(db, interview_id)
    return InterviewService.list_comments(db, interview_id)

@router.post("/{interview_id}/comments", response_model=CommentResponse, status_code=status.HTTP_201_CREATED)
async def add_comment(
    interview_id: str,
    request: AddCommentRequest,
    background_tasks: BackgroundTasks,
    identity: Identity = Depends(require_interviewer),
    notifications: NotificationService = Depends(get_notification_service),
    db: Session = Depends(get_db)
):
    """
    Submit interviewer feedback.

    The rating decides the result (3 and above passes), the interview is
    completed, and the candidate receives the feedback by email.

    Raises:
        HTTPException 404: Interview not found
        HTTPException 400: Feedback already submitted by this interviewer
        HTTPException 500: Failed to save feedback
    """
    interview = _get_or_404(db, interview_id)

    if not request.content.strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Please enter comment"
        )

    if InterviewService.has_commented(db, interview_id, identity.user_id):
        logger.warning(f"Feedback already submitted: interview={interview_id}, interviewer={identity.user_id}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Feedback already submitted for this interview"
        )

    try:
        interview, comment = InterviewService.submit_feedback(
            db,
            interview_id=interview_id,
            interviewer_id=identity.user_id,
            content=request.content.strip(),
            rating=request.rating,
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to submit feedback"
        )

    if interview.candidate_email:
        background_tasks.add_task(
            notifications.send_feedback_added,
            candidate_email=interview.candidate_email,
            candidate_name=interview.candidate_name or "Candidate",
            interview_title=interview.title,
            interviewer_name=identity.name or "Interviewer",
            feedback=comment.content,
            result=interview.result,
        )

    return comment
