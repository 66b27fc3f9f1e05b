"""Observability helpers for instrumenting outfit tool calls."""

from __future__ import annotations

import inspect
import logging
import time
from functools import wraps
from typing import Any, Callable, Dict, ParamSpec, TypeVar

from pydantic import BaseModel, ValidationError

from outfit_app.logging_config import ensure_correlation_id, get_logger, log_event, redact_for_log

LOGGER = get_logger(__name__)
P = ParamSpec("P")
R = TypeVar("R")

MAX_PREVIEW_IDS = 5


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _preview_arguments(arguments: Dict[str, Any]) -> Dict[str, Any]:
    """Shorten long id lists so a large outfit request stays one readable line."""

    preview: Dict[str, Any] = {}
    for key, value in arguments.items():
        if isinstance(value, list) and len(value) > MAX_PREVIEW_IDS:
            preview[key] = value[:MAX_PREVIEW_IDS] + [f"... {len(value) - MAX_PREVIEW_IDS} more"]
        else:
            preview[key] = value
    return redact_for_log(preview)


def _result_status(result: Any) -> Any:
    return result.get("status") if isinstance(result, dict) else None


def instrument_tool(
    tool_name: str,
    input_model: type[BaseModel] | None = None,
    on_validation_error: Callable[[ValidationError], R] | None = None,
) -> Callable[[Callable[P, R]], Callable[P, R]]:
    """Wrap a tool method with argument validation and start/finish logs.

    Arguments are bound against the method signature so positional and
    keyword calls validate the same way. Validated values, not the raw ones,
    reach the method.
    """

    def decorator(func: Callable[P, R]) -> Callable[P, R]:
        signature = inspect.signature(func)

        @wraps(func)
        def wrapper(self, *args: P.args, **kwargs: P.kwargs) -> R:
            correlation_id = ensure_correlation_id()
            start = time.perf_counter()
            arguments = dict(signature.bind(self, *args, **kwargs).arguments)
            arguments.pop("self", None)

            if input_model is not None:
                try:
                    arguments = input_model.model_validate(arguments).model_dump()
                except ValidationError as exc:
                    log_event(
                        LOGGER,
                        logging.WARNING,
                        "tool_validation_failed",
                        tool=tool_name,
                        correlation_id=correlation_id,
                        errors=[f"{'.'.join(map(str, error['loc']))}: {error['msg']}" for error in exc.errors()],
                    )
                    if on_validation_error is None:
                        raise
                    return on_validation_error(exc)

            log_event(
                LOGGER,
                logging.INFO,
                "tool_call_started",
                tool=tool_name,
                correlation_id=correlation_id,
                arguments=_preview_arguments(arguments),
            )
            try:
                result = func(self, **arguments)
            except Exception:
                log_event(
                    LOGGER,
                    logging.ERROR,
                    "tool_call_failed",
                    tool=tool_name,
                    correlation_id=correlation_id,
                    duration_ms=_elapsed_ms(start),
                    exc_info=True,
                )
                raise
            log_event(
                LOGGER,
                logging.INFO,
                "tool_call_completed",
                tool=tool_name,
                correlation_id=correlation_id,
                status=_result_status(result),
                duration_ms=_elapsed_ms(start),
            )
            return result

        return wrapper

    return decorator


__all__ = ["instrument_tool"]
