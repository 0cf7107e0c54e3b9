from unittest.mock import patch

from services.code_session_service import CodeSessionService


def _code_body(**overrides):
    body = {
        "code": "print('hi')",
        "language": "python",
        "question_id": "two-sum",
        "user_id": "alice",
    }
    body.update(overrides)
    return body


def test_unknown_room_is_not_found(client):
    response = client.get("/api/code-sessions/room-1")

    assert response.status_code == 404


def test_put_code_creates_then_reads_back(client):
    response = client.put("/api/code-sessions/room-1/code", json=_code_body())

    assert response.status_code == 200
    created = response.json()
    assert created["code"] == "print('hi')"
    assert created["last_updated"] > 0

    fetched = client.get("/api/code-sessions/room-1").json()
    assert fetched == created


def test_put_code_rejects_unsupported_language(client):
    response = client.put("/api/code-sessions/room-1/code", json=_code_body(language="ruby"))

    assert response.status_code == 422


def test_put_code_reports_store_failure(client):
    with patch.object(CodeSessionService, "upsert_code", side_effect=RuntimeError("db down")):
        response = client.put("/api/code-sessions/room-1/code", json=_code_body())

    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to save code"


def test_language_change_without_record_returns_null(client):
    response = client.put(
        "/api/code-sessions/room-1/language",
        json={"language": "java", "user_id": "bob"},
    )

    assert response.status_code == 200
    assert response.json() is None
    assert client.get("/api/code-sessions/room-1").status_code == 404


def test_language_change_patches_existing_record(client):
    client.put("/api/code-sessions/room-1/code", json=_code_body())

    response = client.put(
        "/api/code-sessions/room-1/language",
        json={"language": "java", "user_id": "bob"},
    )

    body = response.json()
    assert (body["language"], body["code"], body["user_id"]) == ("java", "print('hi')", "bob")


def test_question_change_creates_record_with_default_language(client):
    response = client.put(
        "/api/code-sessions/room-1/question",
        json={"question_id": "reverse-string", "code": "// start", "user_id": "alice"},
    )

    body = response.json()
    assert response.status_code == 200
    assert (body["question_id"], body["code"], body["language"]) == ("reverse-string", "// start", "javascript")


def test_question_bank_is_served(client):
    questions = client.get("/api/questions").json()

    assert [question["id"] for question in questions] == ["two-sum", "reverse-string", "palindrome-number"]
    assert set(questions[0]["starter_code"]) == {"javascript", "python", "java"}


def test_socket_snapshot_and_update_roundtrip(client):
    client.put("/api/code-sessions/room-1/code", json=_code_body())

    with client.websocket_connect("/ws/code/room-1") as socket:
        snapshot = socket.receive_json()
        assert snapshot["type"] == "session_snapshot"
        assert snapshot["session"]["code"] == "print('hi')"

        socket.send_json({"type": "update_code", **_code_body(code="print('bye')", user_id="bob")})
        update = socket.receive_json()

        assert update["type"] == "session_update"
        assert update["session"]["code"] == "print('bye')"
        assert update["session"]["user_id"] == "bob"

    assert client.get("/api/code-sessions/room-1").json()["code"] == "print('bye')"


def test_socket_snapshot_of_fresh_room_is_empty(client):
    with client.websocket_connect("/ws/code/room-1") as socket:
        assert socket.receive_json() == {"type": "session_snapshot", "session": None}

        socket.send_json({"type": "ping"})
        assert socket.receive_json() == {"type": "pong"}


def test_socket_rejects_bad_messages(client):
    with client.websocket_connect("/ws/code/room-1") as socket:
        socket.receive_json()

        socket.send_json({"type": "delete_everything"})
        assert socket.receive_json() == {"type": "error", "message": "Unknown message type: delete_everything"}

        socket.send_json({"type": "update_code", "code": "x"})
        assert socket.receive_json() == {"type": "error", "message": "Invalid update_code message"}

        socket.send_json({"type": "update_language", "language": "cobol", "user_id": "alice"})
        assert socket.receive_json() == {"type": "error", "message": "Invalid update_language message"}
