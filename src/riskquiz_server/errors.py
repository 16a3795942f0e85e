"""Global exception handlers — map engine exceptions to HTTP status codes.

The engine raises ``ValueError`` for caller mistakes (unknown session,
duplicate session, answering the wrong question) and ``QuizError``
subclasses for surfaced failures.  Handlers pick the status code so that
route handlers stay on the happy path.
"""

import logging

from fastapi import Request
from fastapi.responses import JSONResponse

from riskquiz_engine.errors import AuthenticationRequired, FetchFailure, QuizError

logger = logging.getLogger(__name__)

# --- Keyword patterns in ValueError messages; first match wins ---
_VALUE_ERROR_PATTERNS: list[tuple[str, int]] = [
    ("already exists", 409),
    ("not found", 404),
    ("already completed", 409),
]

# --- Client-safe messages keyed by HTTP status code ---
# Session ids and other internals stay in the server log.
_SAFE_MESSAGES: dict[int, str] = {
    404: "Resource not found",
    409: "Request conflicts with the current quiz state",
    400: "Invalid request",
}


async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
    """Map engine/registry ``ValueError`` to 404, 409 or 400."""
    msg = str(exc)
    status = 400
    for pattern, code in _VALUE_ERROR_PATTERNS:
        if pattern in msg.lower():
            status = code
            break

    logger.warning("ValueError [%d] at %s: %s", status, request.url, msg)
    safe_detail = _SAFE_MESSAGES.get(status, "Invalid request")
    return JSONResponse(status_code=status, content={"detail": safe_detail})


async def quiz_error_handler(request: Request, exc: QuizError) -> JSONResponse:
    """Map surfaced engine failures to HTTP responses.

    ``AuthenticationRequired`` → 401; ``FetchFailure`` → 503 (retryable);
    anything else → 500.  Fetch failures may wrap driver errors, so the
    client gets a generic message for them.
    """
    if isinstance(exc, AuthenticationRequired):
        status = 401
    elif isinstance(exc, FetchFailure):
        status = 503
    else:
        status = 500

    logger.warning("%s [%d] at %s: %s", exc.kind, status, request.url, exc)
    detail = str(exc)
    if status == 503:
        detail = "Quiz data is unavailable, please try again later"
    return JSONResponse(
        status_code=status,
        content={"detail": detail, "kind": exc.kind},
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions — log full traceback, return 500."""
    logger.exception("Unhandled exception at %s", request.url)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )
