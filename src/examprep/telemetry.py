"""Structured lifecycle events for ingestion and generation steps."""

from __future__ import annotations

import logging
import time
import traceback
from contextlib import contextmanager
from typing import Any, Iterator, Optional

LOGGER = logging.getLogger("examprep.telemetry")


def _format_exception(error: BaseException) -> str:
    return "".join(traceback.format_exception(error.__class__, error, error.__traceback__))


def log_event(
    logger: Optional[logging.Logger],
    step: str,
    *,
    level: str = "info",
    req_id: str | None = None,
    duration_ms: float | None = None,
    exc: BaseException | str | None = None,
    details: dict[str, Any] | None = None,
    **payload: Any,
) -> None:
    """Emit a structured log event with the agreed-upon schema."""

    logger = logger or LOGGER
    event: dict[str, Any] = {"step": step, "module": logger.name}
    if req_id:
        event["req_id"] = req_id
    if duration_ms is not None:
        event["duration_ms"] = round(duration_ms, 3)
    if details is not None:
        event["details"] = details
    event.update(payload)

    exc_info = None
    if exc is not None:
        if isinstance(exc, BaseException):
            event["exc"] = _format_exception(exc)
            exc_info = (exc.__class__, exc, exc.__traceback__)
        else:
            event["exc"] = str(exc)

    log_method = getattr(logger, level.lower(), logger.info)
    log_method(event, exc_info=exc_info)


def emit_ingest_event(
    step: str,
    *,
    file_name: str,
    size_bytes: int | None = None,
    document_format: str | None = None,
    duration_ms: float | None = None,
    content_chars: int | None = None,
    reason: str | None = None,
) -> None:
    details = {
        "file": file_name,
        "size_bytes": size_bytes,
        "format": document_format,
        "content_chars": content_chars,
    }
    if reason:
        details["reason"] = reason
    log_event(LOGGER, step, duration_ms=duration_ms, details=details)


def emit_completion_request(*, operation: str, prompt: str) -> None:
    details = {"prompt_preview": prompt[:120], "prompt_len": len(prompt)}
    log_event(LOGGER, f"completion.{operation}.request", details=details)


def emit_completion_result(*, operation: str, duration_ms: float, response: str) -> None:
    details = {"response_preview": response[:120], "response_len": len(response)}
    log_event(LOGGER, f"completion.{operation}.result", duration_ms=duration_ms, details=details)


def emit_fallback_event(*, operation: str, reason: str) -> None:
    log_event(LOGGER, f"{operation}.fallback", level="warning", details={"reason": reason})


def emit_exception(*, module: str, error: BaseException, suggestion: str | None = None) -> None:
    details = {"module": module}
    if suggestion:
        details["suggestion"] = suggestion
    log_event(LOGGER, "exception", level="error", details=details, exc=error)


@contextmanager
def traced_duration(step: str, *, logger: Optional[logging.Logger] = None, **fields: Any) -> Iterator[None]:
    start = time.perf_counter()
    log_event(logger or LOGGER, f"{step}.start", details=fields)
    try:
        yield
    except Exception as error:
        log_event(logger or LOGGER, f"{step}.error", level="error", details=fields, exc=error)
        raise
    finally:
        end = time.perf_counter()
        log_event(
            logger or LOGGER,
            f"{step}.complete",
            duration_ms=(end - start) * 1000.0,
            details=fields,
        )
