import asyncio

import httpx
import pytest

from services.execution_gateway import (
    UNEXPECTED_RESPONSE,
    ExecutionGateway,
    ExecutionTransportError,
    UnsupportedLanguageError,
    normalize_piston_response,
)

PISTON_URL = "https://piston.test/api/v2/piston/execute"


def _without_time(result) -> dict:
    return result.model_dump(exclude={"time"})


# -- normalization --

def test_successful_run_is_normalized():
    result = normalize_piston_response(
        {"run": {"stdout": "5\n", "stderr": "", "code": 0, "memory": 1234}}
    )

    assert _without_time(result) == {
        "success": True,
        "output": "5\n",
        "error": "",
        "status": "Finished",
        "memory": 1234,
    }


def test_compile_error_overrides_runtime_status():
    result = normalize_piston_response({"run": {"code": 1}, "compile": {"stderr": "syntax error"}})

    assert result.status == "Compilation Error"
    assert result.error == "syntax error"
    assert result.success is False


def test_compile_error_without_run_stage():
    result = normalize_piston_response(
        {"compile": {"stdout": "", "stderr": "Main.java:3: error: ';' expected", "code": 1}}
    )

    assert result.status == "Compilation Error"
    assert result.error == "Main.java:3: error: ';' expected"
    assert result.output == ""


def test_run_stderr_is_preferred_over_compile_stderr():
    result = normalize_piston_response(
        {"run": {"stderr": "NullPointerException", "code": 1}, "compile": {"stderr": "warning: unchecked"}}
    )

    assert result.error == "NullPointerException"
    assert result.status == "Compilation Error"


def test_nonzero_exit_is_a_runtime_error():
    result = normalize_piston_response(
        {"run": {"stdout": "partial", "stderr": "Traceback (most recent call last)", "code": 1, "memory": 10}}
    )

    assert _without_time(result) == {
        "success": False,
        "output": "partial",
        "error": "Traceback (most recent call last)",
        "status": "Runtime Error",
        "memory": 10,
    }


def test_stderr_with_zero_exit_is_finished_but_not_successful():
    result = normalize_piston_response({"run": {"stdout": "", "stderr": "deprecated", "code": 0}})

    assert result.status == "Finished"
    assert result.success is False


def test_output_falls_back_to_generic_field():
    result = normalize_piston_response({"run": {"output": "hello", "code": 0}})

    assert result.output == "hello"
    assert result.memory == 0


def test_api_message_without_run_stage():
    result = normalize_piston_response({"message": "python-3.99.0 runtime is unknown"})

    assert _without_time(result) == {
        "success": False,
        "output": "",
        "error": "python-3.99.0 runtime is unknown",
        "status": "Error",
        "memory": 0,
    }


@pytest.mark.parametrize("body", [{}, [], "oops", None, {"run": "not-a-stage"}])
def test_unexpected_bodies_are_errors(body):
    result = normalize_piston_response(body)

    assert result.status == "Error"
    assert result.error == UNEXPECTED_RESPONSE


# -- gateway --

def test_unsupported_language_short_circuits(gateway, piston):
    result = asyncio.run(gateway.execute("puts 1", "ruby"))

    assert _without_time(result) == {
        "success": False,
        "output": "",
        "error": "Unsupported language: ruby",
        "status": "Error",
        "memory": 0,
    }
    assert len(piston.requests) == 0


def test_submit_raises_for_unsupported_language(gateway, piston):
    with pytest.raises(UnsupportedLanguageError):
        asyncio.run(gateway.submit("puts 1", "ruby"))
    assert piston.requests == []


def test_sends_single_file_submission(gateway, piston):
    result = asyncio.run(gateway.execute("print(input())", "python", "42"))

    assert result.status == "Finished"
    assert piston.requests == [
        {
            "language": "python",
            "version": "3.10.0",
            "files": [{"name": "script.py", "content": "print(input())"}],
            "stdin": "42",
            "args": [],
            "compile_timeout": 10000,
            "run_timeout": 10000,
            "compile_memory_limit": -1,
            "run_memory_limit": -1,
        }
    ]


@pytest.mark.parametrize(
    "language, runtime, version, file_name",
    [
        ("javascript", "javascript", "18.15.0", "script.js"),
        ("java", "java", "15.0.2", "Main.java"),
    ],
)
def test_runtime_table(gateway, piston, language, runtime, version, file_name):
    asyncio.run(gateway.execute("code", language))

    sent = piston.requests[0]
    assert (sent["language"], sent["version"], sent["files"][0]["name"]) == (runtime, version, file_name)
    assert sent["stdin"] == ""


def test_http_error_status_is_normalized(gateway, piston):
    piston.response = httpx.Response(503, json={"message": "busy"})

    result = asyncio.run(gateway.execute("print(1)", "python"))

    assert result.success is False
    assert result.status == "Error"
    assert result.error == "API request failed: 503 Service Unavailable"
    assert result.memory == 0


def test_submit_raises_transport_error_on_http_error_status(gateway, piston):
    piston.response = httpx.Response(502)

    with pytest.raises(ExecutionTransportError):
        asyncio.run(gateway.submit("print(1)", "python"))


def test_connection_failure_is_normalized(gateway, piston):
    piston.error = lambda request: httpx.ConnectError("connection refused", request=request)

    result = asyncio.run(gateway.execute("print(1)", "python"))

    assert result.status == "Error"
    assert "connection refused" in result.error


def test_client_side_timeout_is_normalized(gateway, piston):
    piston.error = lambda request: httpx.ReadTimeout("read timed out", request=request)

    result = asyncio.run(gateway.execute("while True: pass", "python"))

    assert result.status == "Error"
    assert result.error == "Execution service timed out after 5s"


def test_non_json_body_is_normalized(gateway, piston):
    piston.response = httpx.Response(200, text="<html>maintenance</html>")

    result = asyncio.run(gateway.execute("print(1)", "python"))

    assert result.status == "Error"
    assert result.error == UNEXPECTED_RESPONSE


def test_wall_clock_time_is_attached():
    async def slow_service(request: httpx.Request) -> httpx.Response:
        await asyncio.sleep(0.05)
        return httpx.Response(200, json={"run": {"stdout": "ok", "stderr": "", "code": 0}})

    gateway = ExecutionGateway(api_url=PISTON_URL, timeout=5, transport=httpx.MockTransport(slow_service))

    result = asyncio.run(gateway.execute("print('ok')", "python"))

    assert result.status == "Finished"
    assert result.time >= 40


def test_compile_warnings_do_not_fail_a_clean_run():
    result = normalize_piston_response(
        {
            "run": {"stdout": "ok", "stderr": "", "code": 0},
            "compile": {"stderr": "Note: Main.java uses unchecked or unsafe operations."},
        }
    )

    assert result.success is True
    assert result.status == "Compilation Error"
    assert result.error == "Note: Main.java uses unchecked or unsafe operations."


@pytest.mark.parametrize(
    "body",
    [
        {"run": {"stdout": 5, "code": 0}},
        {"run": {"code": 0, "memory": "n/a"}},
        {"run": {"code": 1}, "compile": {"stderr": ["boom"]}},
        {"compile": {"stderr": {"line": 3}}},
        {"message": 123},
    ],
)
def test_badly_typed_fields_become_error_results(gateway, piston, body):
    piston.response = httpx.Response(200, json=body)

    result = asyncio.run(gateway.execute("print(1)", "python"))

    assert result.success is False
    assert result.status == "Error"
    assert result.error == UNEXPECTED_RESPONSE
    assert result.time >= 0
