"""
Shared pytest fixtures.

The application engine is pointed at an in-memory database before any
backend module is imported; every test gets its own fresh schema through
the `engine` fixture and the `get_db` override.
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("RESEND_API_KEY", "")

import json
from typing import Callable, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from core.state import session_subscribers
from database.db import Base, get_db
from main import app
from models.code_execution import CodeExecution  # noqa: F401
from models.code_session import CodeEditorSession  # noqa: F401
from models.comment import Comment  # noqa: F401
from models.interview import Interview  # noqa: F401
from services.execution_gateway import ExecutionGateway, get_execution_gateway
from services.notification_service import get_notification_service
from utils.security import create_access_token

PISTON_URL = "https://piston.test/api/v2/piston/execute"


class PistonStub:
    """Fake execution service: records request bodies, answers with `response`."""

    def __init__(self):
        self.requests: List[dict] = []
        self.response = httpx.Response(
            200,
            json={"run": {"stdout": "5\n", "stderr": "", "code": 0, "memory": 1234}},
        )
        self.error: Optional[Callable[[httpx.Request], Exception]] = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(json.loads(request.content))
        if self.error is not None:
            raise self.error(request)
        return self.response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


class RecordingNotifications:
    """Stand-in for NotificationService that keeps every email it was asked to send."""

    def __init__(self):
        self.sent: List[tuple] = []

    async def send_interview_scheduled(self, **kwargs):
        self.sent.append(("scheduled", kwargs))
        return {"success": True}

    async def send_feedback_added(self, **kwargs):
        self.sent.append(("feedback", kwargs))
        return {"success": True}

    async def send_interview_result(self, **kwargs):
        self.sent.append(("result", kwargs))
        return {"success": True}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def piston():
    return PistonStub()


@pytest.fixture
def gateway(piston):
    return ExecutionGateway(api_url=PISTON_URL, timeout=5, transport=piston.transport)


@pytest.fixture
def notifications():
    return RecordingNotifications()


@pytest.fixture
def client(session_factory, gateway, notifications):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_execution_gateway] = lambda: gateway
    app.dependency_overrides[get_notification_service] = lambda: notifications

    yield TestClient(app)

    app.dependency_overrides.clear()
    session_subscribers.clear()


@pytest.fixture
def auth_headers():
    def make(user_id: str, role: str = "interviewer", **claims) -> dict:
        token = create_access_token({"sub": user_id, "role": role, **claims})
        return {"Authorization": f"Bearer {token}"}
    return make
