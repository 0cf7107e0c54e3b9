"""Code editor routes - shared session REST API and WebSocket room"""

import logging
from typing import Callable, Dict, List, Optional, Tuple, Type
from fastapi import APIRouter, Depends, HTTPException, WebSocket, WebSocketDisconnect, status
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session

from core.languages import Language
from core.questions import CODING_QUESTIONS
from database.db import get_db
from services.code_session_service import CodeSessionService
from websocket.handler import room_handler

logger = logging.getLogger(__name__)

router = APIRouter(tags=["code-editor"])

# ============ Request/Response Models ============

class UpdateCodeRequest(BaseModel):
    """Full overwrite of the shared buffer"""
    code: str
    language: Language
    question_id: str
    user_id: str

    class Config:
        json_schema_extra = {
            "example": {
                "code": "function twoSum(nums, target) {\n  return [];\n}\n",
                "language": "javascript",
                "question_id": "two-sum",
                "user_id": "user_2abc"
            }
        }

class UpdateLanguageRequest(BaseModel):
    language: Language
    user_id: str

class UpdateQuestionRequest(BaseModel):
    question_id: str
    code: str
    user_id: str

class CodeSessionResponse(BaseModel):
    """Shared code editor record"""
    session_id: str
    code: str
    language: str
    question_id: str
    last_updated: int
    user_id: str

    class Config:
        from_attributes = True

# ============ Store writes shared by REST and WebSocket ============

def _write_code(db: Session, session_id: str, request: UpdateCodeRequest):
    return CodeSessionService.upsert_code(
        db,
        session_id=session_id,
        code=request.code,
        language=request.language.value,
        question_id=request.question_id,
        user_id=request.user_id,
    )

def _write_language(db: Session, session_id: str, request: UpdateLanguageRequest):
    return CodeSessionService.upsert_language(
        db,
        session_id=session_id,
        language=request.language.value,
        user_id=request.user_id,
    )

def _write_question(db: Session, session_id: str, request: UpdateQuestionRequest):
    return CodeSessionService.upsert_question(
        db,
        session_id=session_id,
        question_id=request.question_id,
        code=request.code,
        user_id=request.user_id,
    )

# WebSocket message type -> (payload model, store write)
SOCKET_WRITES: Dict[str, Tuple[Type[BaseModel], Callable]] = {
    "update_code": (UpdateCodeRequest, _write_code),
    "update_language": (UpdateLanguageRequest, _write_language),
    "update_question": (UpdateQuestionRequest, _write_question),
}

# ============ Question Bank ============

@router.get("/api/questions")
async def list_questions() -> List[dict]:
    """Static coding question bank"""
    return CODING_QUESTIONS

# ============ REST API ENDPOINTS ============

@router.get("/api/code-sessions/{session_id}", response_model=CodeSessionResponse)
async def get_code_session(session_id: str, db: Session = Depends(get_db)):
    """
    Get the shared editor record of a room.

    Raises:
        HTTPException 404: Room has no record yet
    """
    record = CodeSessionService.get(db, session_id)
    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Code session not found"
        )
    return record

@router.put("/api/code-sessions/{session_id}/code", response_model=CodeSessionResponse)
async def update_code(
    session_id: str,
    request: UpdateCodeRequest,
    db: Session = Depends(get_db)
):
    """Overwrite code, language and question (creates the record if needed)"""
    try:
        record = _write_code(db, session_id, request)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to save code"
        )

    await room_handler.publish(record)
    return record

@router.put("/api/code-sessions/{session_id}/language", response_model=Optional[CodeSessionResponse])
async def update_language(
    session_id: str,
    request: UpdateLanguageRequest,
    db: Session = Depends(get_db)
):
    """Patch the language; returns null and changes nothing if the room has no record"""
    try:
        record = _write_language(db, session_id, request)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to change language"
        )

    if record is not None:
        await room_handler.publish(record)
    return record

@router.put("/api/code-sessions/{session_id}/question", response_model=CodeSessionResponse)
async def update_question(
    session_id: str,
    request: UpdateQuestionRequest,
    db: Session = Depends(get_db)
):
    """Patch question and code (creates the record with the default language if needed)"""
    try:
        record = _write_question(db, session_id, request)
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to change question"
        )

    await room_handler.publish(record)
    return record

# ============ WEBSOCKET ENDPOINT ============

@router.websocket("/ws/code/{session_id}")
async def code_session_socket(
    websocket: WebSocket,
    session_id: str,
    db: Session = Depends(get_db)
):
    """
    Live code room.

    Server -> client:
        session_snapshot: {type, session} once, on connect
        session_update: {type, session} after every stored write
        error: {type, message}
        pong

    Client -> server:
        update_code: {type, code, language, question_id, user_id}
        update_language: {type, language, user_id}
        update_question: {type, question_id, code, user_id}
        ping
    """
    await room_handler.connect(websocket, session_id, CodeSessionService.get(db, session_id))

    try:
        while True:
            message = await websocket.receive_json()
            message_type = message.get("type")

            # ===== PING =====
            if message_type == "ping":
                await websocket.send_json({"type": "pong"})
                continue

            write = SOCKET_WRITES.get(message_type)
            if not write:
                logger.warning(f"Unknown message type: {message_type}")
                await websocket.send_json({"type": "error", "message": f"Unknown message type: {message_type}"})
                continue

            payload_model, store = write

            try:
                request = payload_model(**message)
            except ValidationError:
                await websocket.send_json({"type": "error", "message": f"Invalid {message_type} message"})
                continue

            try:
                record = store(db, session_id, request)
            except Exception:
                await websocket.send_json({"type": "error", "message": "Failed to save changes"})
                continue

            if record is not None:
                await room_handler.publish(record)

    except WebSocketDisconnect:
        logger.info(f"Client left code session: {session_id}")
    except Exception as e:
        logger.error(f"WebSocket error on session {session_id}: {str(e)}")
    finally:
        room_handler.disconnect(websocket, session_id)
