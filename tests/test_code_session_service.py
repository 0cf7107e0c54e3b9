import asyncio
from unittest.mock import patch

import pytest

from core.languages import DEFAULT_LANGUAGE
from models.code_session import CodeEditorSession
from services.code_session_service import CodeSessionService


def _fields(record):
    return (record.session_id, record.code, record.language, record.question_id, record.user_id)


def test_get_returns_none_for_unknown_session(db):
    assert CodeSessionService.get(db, "room-1") is None


def test_upsert_code_inserts_then_overwrites(db):
    CodeSessionService.upsert_code(db, "room-1", "let a = 1;", "javascript", "two-sum", "alice")
    first_update = CodeSessionService.get(db, "room-1").last_updated

    CodeSessionService.upsert_code(db, "room-1", "class Main {}", "java", "reverse-string", "bob")

    record = CodeSessionService.get(db, "room-1")
    assert db.query(CodeEditorSession).count() == 1
    assert _fields(record) == ("room-1", "class Main {}", "java", "reverse-string", "bob")
    assert record.last_updated >= first_update


def test_upsert_code_is_idempotent(db):
    CodeSessionService.upsert_code(db, "room-1", "print(1)", "python", "two-sum", "alice")
    once = _fields(CodeSessionService.get(db, "room-1"))

    CodeSessionService.upsert_code(db, "room-1", "print(1)", "python", "two-sum", "alice")

    assert db.query(CodeEditorSession).count() == 1
    assert _fields(CodeSessionService.get(db, "room-1")) == once


def test_upsert_language_without_record_is_a_noop(db):
    assert CodeSessionService.upsert_language(db, "room-1", "python", "alice") is None
    assert CodeSessionService.get(db, "room-1") is None


def test_upsert_language_patches_only_language_and_writer(db):
    CodeSessionService.upsert_code(db, "room-1", "code", "javascript", "two-sum", "alice")

    record = CodeSessionService.upsert_language(db, "room-1", "python", "bob")

    assert _fields(record) == ("room-1", "code", "python", "two-sum", "bob")


def test_upsert_question_creates_record_with_default_language(db):
    record = CodeSessionService.upsert_question(db, "room-1", "palindrome-number", "starter", "alice")

    assert record.language == DEFAULT_LANGUAGE
    assert _fields(record) == ("room-1", "starter", DEFAULT_LANGUAGE, "palindrome-number", "alice")


def test_upsert_question_keeps_existing_language(db):
    CodeSessionService.upsert_code(db, "room-1", "old", "java", "two-sum", "alice")

    record = CodeSessionService.upsert_question(db, "room-1", "reverse-string", "new", "bob")

    assert _fields(record) == ("room-1", "new", "java", "reverse-string", "bob")


def test_store_failure_is_raised_and_rolled_back(db):
    with patch.object(db, "commit", side_effect=RuntimeError("store unavailable")):
        with pytest.raises(RuntimeError):
            CodeSessionService.upsert_code(db, "room-1", "code", "python", "two-sum", "alice")

    assert CodeSessionService.get(db, "room-1") is None


def test_last_arrived_write_wins(session_factory):
    async def write(code: str, delay: float):
        await asyncio.sleep(delay)
        session = session_factory()
        try:
            CodeSessionService.upsert_code(session, "room-1", code, "javascript", "two-sum", code)
        finally:
            session.close()

    async def race():
        # "issued-first" is dispatched first but reaches the store last
        await asyncio.gather(write("issued-first", 0.05), write("issued-second", 0.0))

    asyncio.run(race())

    session = session_factory()
    try:
        record = CodeSessionService.get(session, "room-1")
        assert record.code == "issued-first"
        assert record.user_id == "issued-first"
    finally:
        session.close()
