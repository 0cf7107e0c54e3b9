"""Remote code execution gateway (Piston API proxy)"""

import time
import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import BaseModel

from config.settings import settings
from core.languages import RUNTIMES, file_name_for, is_supported

logger = logging.getLogger(__name__)

# Terminal states of one execution attempt
STATUS_FINISHED = "Finished"
STATUS_RUNTIME_ERROR = "Runtime Error"
STATUS_COMPILATION_ERROR = "Compilation Error"
STATUS_ERROR = "Error"

# Resource ceilings sent with every submission (-1 = unlimited)
COMPILE_TIMEOUT_MS = 10000
RUN_TIMEOUT_MS = 10000
MEMORY_UNLIMITED = -1

UNEXPECTED_RESPONSE = "Unexpected response format from execution service"


class ExecutionResult(BaseModel):
    """Normalized outcome of one execution attempt"""
    success: bool
    output: str = ""
    error: str = ""
    status: str
    memory: int = 0
    time: int = 0
    """Wall-clock milliseconds from dispatch to response"""


class ExecutionError(Exception):
    """Base class for failures that never reach the remote runtime"""


class UnsupportedLanguageError(ExecutionError):
    def __init__(self, language: str):
        self.language = language
        super().__init__(f"Unsupported language: {language}")


class ExecutionTransportError(ExecutionError):
    """The execution service could not be reached or answered with a non-2xx status"""


def error_result(message: str, elapsed_ms: int = 0) -> ExecutionResult:
    return ExecutionResult(
        success=False,
        output="",
        error=message,
        status=STATUS_ERROR,
        memory=0,
        time=elapsed_ms,
    )


def _stage(data: Dict[str, Any], name: str) -> Optional[Dict[str, Any]]:
    stage = data.get(name)
    return stage if isinstance(stage, dict) else None


def normalize_piston_response(data: Any) -> ExecutionResult:
    """
    Map the execution service's response onto ExecutionResult.

    The upstream shape varies: a run stage with stdout/stderr/code/memory,
    an optional compile stage, or only a top-level message when the API
    itself rejected the request. Every field is defaulted explicitly, and a
    body whose fields have the wrong types becomes an error result.

    Args:
        data: Decoded JSON body

    Returns:
        Normalized result (time is left at 0 for the caller to fill in)
    """
    if not isinstance(data, dict):
        return error_result(UNEXPECTED_RESPONSE)

    try:
        return _normalize(data)
    except (TypeError, ValueError) as e:
        logger.warning(f"Malformed execution service response: {str(e)}")
        return error_result(UNEXPECTED_RESPONSE)


def _normalize(data: Dict[str, Any]) -> ExecutionResult:
    run = _stage(data, "run")
    compile_stage = _stage(data, "compile") or {}
    compile_error = compile_stage.get("stderr") or ""

    if run is None:
        if compile_error:
            return ExecutionResult(success=False, error=compile_error, status=STATUS_COMPILATION_ERROR)
        return error_result(data.get("message") or UNEXPECTED_RESPONSE)

    run_error = run.get("stderr") or ""
    exit_code = run.get("code")

    status = STATUS_FINISHED if exit_code == 0 else STATUS_RUNTIME_ERROR
    if compile_error:
        status = STATUS_COMPILATION_ERROR

    return ExecutionResult(
        success=not run_error and exit_code == 0,
        output=run.get("stdout") or run.get("output") or "",
        error=run_error or compile_error,
        status=status,
        memory=int(run.get("memory") or 0),
    )


class ExecutionGateway:
    """
    Forward a single-file submission to the execution service.

    Stateless apart from its configuration; one instance is shared by all
    requests. Pass an httpx transport to route requests elsewhere (tests).
    """

    def __init__(
        self,
        api_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.api_url = api_url or settings.PISTON_API_URL
        self.timeout = timeout if timeout is not None else settings.EXECUTION_CLIENT_TIMEOUT
        self.transport = transport

    @staticmethod
    def build_payload(code: str, language: str, stdin: str = "") -> Dict[str, Any]:
        runtime, version = RUNTIMES[language]
        return {
            "language": runtime,
            "version": version,
            "files": [
                {
                    "name": file_name_for(language),
                    "content": code,
                }
            ],
            "stdin": stdin or "",
            "args": [],
            "compile_timeout": COMPILE_TIMEOUT_MS,
            "run_timeout": RUN_TIMEOUT_MS,
            "compile_memory_limit": MEMORY_UNLIMITED,
            "run_memory_limit": MEMORY_UNLIMITED,
        }

    async def submit(self, code: str, language: str, stdin: str = "") -> ExecutionResult:
        """
        Run code remotely.

        Raises:
            UnsupportedLanguageError: language has no runtime; nothing is sent
            ExecutionTransportError: network failure, timeout or non-2xx status
        """
        if not is_supported(language):
            raise UnsupportedLanguageError(language)

        payload = self.build_payload(code, language, stdin)

        logger.info(f"Executing {language} code via Piston API...")
        started = time.perf_counter()

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, json=payload)
        except httpx.TimeoutException as e:
            raise ExecutionTransportError(
                f"Execution service timed out after {self.timeout}s"
            ) from e
        except httpx.HTTPError as e:
            raise ExecutionTransportError(f"Execution service unreachable: {str(e)}") from e

        elapsed_ms = int((time.perf_counter() - started) * 1000)

        if not response.is_success:
            raise ExecutionTransportError(
                f"API request failed: {response.status_code} {response.reason_phrase}"
            )

        try:
            data = response.json()
        except ValueError:
            logger.warning("Execution service returned a non-JSON body")
            return error_result(UNEXPECTED_RESPONSE, elapsed_ms)

        result = normalize_piston_response(data)
        result.time = elapsed_ms

        logger.info(f"Execution finished: language={language}, status={result.status}, time={elapsed_ms}ms")

        return result

    async def execute(self, code: str, language: str, stdin: str = "") -> ExecutionResult:
        """Like submit(), but every failure comes back as a normalized error result."""
        started = time.perf_counter()
        try:
            return await self.submit(code, language, stdin)
        except UnsupportedLanguageError as e:
            logger.warning(str(e))
            return error_result(str(e))
        except ExecutionTransportError as e:
            logger.error(f"Code execution error: {str(e)}")
            return error_result(str(e), int((time.perf_counter() - started) * 1000))


# Global gateway instance
execution_gateway = ExecutionGateway()

def get_execution_gateway() -> ExecutionGateway:
    """Dependency returning the shared gateway"""
    return execution_gateway
