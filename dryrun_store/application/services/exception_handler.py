"""Rendering of exceptions into caller-facing error responses."""

import logging
from dataclasses import dataclass
from typing import Any

from dryrun_store.domain.exceptions import AppError, ServerError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ErrorResponse:
    """Status code plus the ``{"error": message}`` body."""

    status_code: int
    payload: dict[str, Any]


def handle_exception(exc: BaseException) -> ErrorResponse:
    """Render any exception as an error response.

    Unrecognized exceptions become a 500 ``ServerError``. The ``raw``
    diagnostic is logged and never placed in the payload.
    """
    if isinstance(exc, AppError):
        error = exc
    else:
        error = ServerError("Internal server error", raw=str(exc) or repr(exc))

    logger.error(f"[ERROR {error.status_code}] {error.message}")
    if error.raw and error.raw != error.message:
        logger.error(f"RAW: {error.raw}")

    return ErrorResponse(status_code=error.status_code, payload=error.to_payload())
