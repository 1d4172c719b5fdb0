"""Logging and error boundary for CLI commands."""

from __future__ import annotations

import functools
import logging
import time
from typing import Any, Callable, TypeVar

import click

from omnifocus_mcp.cli.output import emit_exception
from omnifocus_mcp.core.context import generate_correlation_id, sync_request_context
from omnifocus_mcp.core.errors import ERROR_MAPPINGS

F = TypeVar("F", bound=Callable[..., Any])

_DOMAIN_ERRORS = tuple(ERROR_MAPPINGS)


def get_cli_logger() -> logging.Logger:
    return logging.getLogger("omnifocus_mcp.cli")


def cli_command(name: str) -> Callable[[F], F]:
    """Run a command inside a request context and turn domain errors into envelopes.

    Usage:
        @click.command("list")
        @click.pass_context
        @cli_command("tasks-list")
        def list_cmd(ctx): ...
    """
    logger = get_cli_logger()

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            with sync_request_context(generate_correlation_id("cli")) as corr_id:
                start = time.perf_counter()
                logger.debug("Command %s started", name, extra={"command": name, "correlation_id": corr_id})
                try:
                    return func(*args, **kwargs)
                except _DOMAIN_ERRORS as exc:
                    logger.debug("Command %s failed: %s", name, exc)
                    emit_exception(exc)
                except Exception as exc:
                    logger.exception("Command %s raised an unexpected error", name)
                    emit_exception(exc)
                finally:
                    logger.debug(
                        "Command %s finished",
                        name,
                        extra={"command": name, "duration_ms": round((time.perf_counter() - start) * 1000, 2)},
                    )

        return wrapper  # type: ignore[return-value]

    return decorator
