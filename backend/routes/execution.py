"""Code execution routes - remote run gateway and execution history"""

import logging
from datetime import datetime
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.orm import Session

from database.db import get_db
from services.execution_gateway import (
    ExecutionGateway,
    ExecutionResult,
    ExecutionTransportError,
    UnsupportedLanguageError,
    STATUS_FINISHED,
    error_result,
    get_execution_gateway,
)
from services.execution_history import ExecutionHistoryService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["execution"])

# ============ Request/Response Models ============

class ExecuteCodeRequest(BaseModel):
    """Code submission"""
    code: str
    language: str
    input: Optional[str] = ""

    class Config:
        json_schema_extra = {
            "example": {
                "code": "print(int(input()) * 2)",
                "language": "python",
                "input": "21"
            }
        }

class RunCodeRequest(ExecuteCodeRequest):
    """Submission from a participant of a code session"""
    user_id: str

class RecordExecutionRequest(BaseModel):
    """Outcome computed elsewhere, stored as-is"""
    user_id: str
    code: str
    language: str
    input: Optional[str] = ""
    output: str
    error: str
    status: str
    execution_time: int
    memory: int

class ExecutionRecordResponse(BaseModel):
    """One history entry"""
    id: int
    session_id: str
    user_id: str
    code: str
    language: str
    input: str
    output: str
    error: str
    status: str
    execution_time: int
    memory: int
    created_at: datetime

    class Config:
        from_attributes = True

# ============ Stateless Gateway ============

@router.post("/api/execute-code", response_model=ExecutionResult)
async def execute_code(
    request: ExecuteCodeRequest,
    gateway: ExecutionGateway = Depends(get_execution_gateway)
):
    """
    Run code on the remote execution service.

    Always answers with a normalized body:
        200: the run happened (even if the program failed)
        400: unsupported language, nothing was sent
        500: the execution service could not be reached
    """
    try:
        return await gateway.submit(request.code, request.language, request.input or "")
    except UnsupportedLanguageError as e:
        logger.warning(str(e))
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=error_result(str(e)).model_dump()
        )
    except ExecutionTransportError as e:
        logger.error(f"Code execution error: {str(e)}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=error_result(str(e)).model_dump()
        )

# ============ Session Runs ============

@router.post("/api/code-sessions/{session_id}/run", response_model=ExecutionResult)
async def run_code(
    session_id: str,
    request: RunCodeRequest,
    gateway: ExecutionGateway = Depends(get_execution_gateway),
    db: Session = Depends(get_db)
):
    """
    The "run" action of a code room: execute, then record the attempt.

    Every outcome is recorded, including unsupported languages and
    transport failures.
    """
    result = await gateway.execute(request.code, request.language, request.input or "")

    try:
        ExecutionHistoryService.record(
            db,
            session_id=session_id,
            user_id=request.user_id,
            code=request.code,
            language=request.language,
            input=request.input,
            result=result,
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record execution"
        )

    return result

@router.post("/api/code-sessions/{session_id}/executions", response_model=ExecutionResult, status_code=status.HTTP_201_CREATED)
async def record_execution(
    session_id: str,
    request: RecordExecutionRequest,
    db: Session = Depends(get_db)
):
    """Store an execution outcome produced by another runner"""
    result = ExecutionResult(
        success=request.status == STATUS_FINISHED,
        output=request.output,
        error=request.error,
        status=request.status,
        memory=request.memory,
        time=request.execution_time,
    )

    try:
        ExecutionHistoryService.record(
            db,
            session_id=session_id,
            user_id=request.user_id,
            code=request.code,
            language=request.language,
            input=request.input,
            result=result,
        )
    except Exception:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record execution"
        )

    return result

@router.get("/api/code-sessions/{session_id}/executions", response_model=List[ExecutionRecordResponse])
async def execution_history(session_id: str, db: Session = Depends(get_db)):
    """Most recent executions of a room, newest first"""
    return ExecutionHistoryService.recent(db, session_id)
