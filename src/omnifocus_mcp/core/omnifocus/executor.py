"""Script execution gateway.

Writes a rendered bridge program to a temporary file, runs the interpreter
on it with a hard timeout, and decodes the result envelope into data or a
typed exception. The temporary file is removed on every exit path.
"""

from __future__ import annotations

import json
import logging
import os
import subprocess
import tempfile
import threading
from typing import Any, Callable, Dict, List, Optional, Tuple, Type

from omnifocus_mcp.core.errors import (
    AmbiguousMatchError,
    BridgeError,
    BridgeOutputError,
    BridgeTimeoutError,
    NotFoundError,
    PreconditionError,
    ValidationError,
)
from omnifocus_mcp.core.omnifocus.nodes import Script, wrap_for_bridge

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
PERSPECTIVE_TIMEOUT = 60.0
MAX_OUTPUT_BYTES = 10 * 1024 * 1024

# kind -> (exception class, detail keys passed through as keyword arguments)
_KIND_ERRORS: Dict[str, Tuple[Type[Exception], Tuple[str, ...]]] = {
    "not_found": (NotFoundError, ("kind", "identifier")),
    "ambiguous": (AmbiguousMatchError, ("candidates",)),
    "precondition": (PreconditionError, ()),
    "validation": (ValidationError, ("field",)),
    "bridge": (BridgeError, ()),
}


def raise_for_failure(error: Dict[str, Any]) -> None:
    """Raise the exception matching a failed envelope's ``kind``.

    Known keys of the optional ``details`` object become attributes of the
    exception, so the error envelope can report them.
    """
    kind = error.get("kind") or "bridge"
    message = error.get("message") or "OmniFocus reported an error without a message"
    exc_class, detail_keys = _KIND_ERRORS.get(kind, (BridgeError, ()))
    details = error.get("details")
    if not isinstance(details, dict):
        details = {}
    raise exc_class(message, **{key: details[key] for key in detail_keys if details.get(key) is not None})


def decode_envelope(output: str) -> Any:
    """Parse a script's stdout and return its payload, or raise its typed failure."""
    try:
        envelope = json.loads(output)
    except json.JSONDecodeError as exc:
        raise BridgeOutputError(f"OmniFocus returned invalid JSON: {exc.msg}") from exc

    if not isinstance(envelope, dict) or "ok" not in envelope:
        raise BridgeOutputError("OmniFocus returned an unexpected result shape")
    if envelope["ok"]:
        return envelope.get("data")
    raise_for_failure(envelope.get("error") or {})


_STDERR_BYTES = 64 * 1024
_CHUNK_BYTES = 64 * 1024


def _drain(stream, limit: int, sink: List[bytes]) -> None:
    # Keep at most limit + 1 bytes, then drain the pipe until EOF.
    sink.append(stream.read(limit + 1))
    while stream.read(_CHUNK_BYTES):
        pass


def run_bounded(
    args: List[str],
    *,
    timeout: float,
    max_output_bytes: int = MAX_OUTPUT_BYTES,
) -> subprocess.CompletedProcess:
    """Run *args* keeping at most ``max_output_bytes + 1`` bytes of stdout in memory.

    Output past the ceiling is read and discarded, so a longer stdout shows up
    as ``max_output_bytes + 1`` bytes for the caller to reject. Raises
    :class:`subprocess.TimeoutExpired` after killing the child on timeout.
    """
    stdout: List[bytes] = []
    stderr: List[bytes] = []
    with subprocess.Popen(args, stdin=subprocess.DEVNULL, stdout=subprocess.PIPE, stderr=subprocess.PIPE) as process:
        readers = [
            threading.Thread(target=_drain, args=(process.stdout, max_output_bytes, stdout), daemon=True),
            threading.Thread(target=_drain, args=(process.stderr, _STDERR_BYTES, stderr), daemon=True),
        ]
        for reader in readers:
            reader.start()
        try:
            returncode = process.wait(timeout=timeout)
        except subprocess.TimeoutExpired:
            process.kill()
            raise
        finally:
            for reader in readers:
                reader.join()

    return subprocess.CompletedProcess(
        args,
        returncode,
        stdout=b"".join(stdout).decode("utf-8", errors="replace"),
        stderr=b"".join(stderr).decode("utf-8", errors="replace"),
    )


class ScriptRunner:
    """Runs bridge programs through an external interpreter.

    Args:
        interpreter: Interpreter executable (``osascript`` on macOS).
        application: Application whose evaluator runs the inner script.
        timeout: Default timeout in seconds.
        max_output_bytes: Ceiling on captured standard output.
        run: Subprocess entry point with the :func:`run_bounded` signature,
            replaceable in tests.
    """

    def __init__(
        self,
        interpreter: str = "osascript",
        application: str = "OmniFocus",
        timeout: float = DEFAULT_TIMEOUT,
        max_output_bytes: int = MAX_OUTPUT_BYTES,
        run: Callable[..., subprocess.CompletedProcess] = run_bounded,
    ) -> None:
        self.interpreter = interpreter
        self.application = application
        self.timeout = timeout
        self.max_output_bytes = max_output_bytes
        self._run = run

    def execute(self, script: Script, timeout: Optional[float] = None) -> Any:
        """Render, run and decode *script*; return its payload."""
        program = wrap_for_bridge(script, application=self.application)
        return decode_envelope(self.run_program(program, timeout=timeout))

    def run_program(self, program: str, timeout: Optional[float] = None) -> str:
        """Run an interpreter-level *program* and return its trimmed stdout."""
        effective_timeout = timeout if timeout is not None else self.timeout
        handle = tempfile.NamedTemporaryFile(
            mode="w", encoding="utf-8", prefix="omnifocus-", suffix=".js", delete=False
        )
        path = handle.name
        try:
            with handle:
                handle.write(program)

            logger.debug(
                "Running bridge script",
                extra={"script_bytes": len(program), "timeout": effective_timeout},
            )
            try:
                completed = self._run(
                    [self.interpreter, "-l", "JavaScript", path],
                    timeout=effective_timeout,
                    max_output_bytes=self.max_output_bytes,
                )
            except subprocess.TimeoutExpired as exc:
                raise BridgeTimeoutError(
                    f"OmniFocus did not respond within {effective_timeout:g} seconds",
                    timeout=effective_timeout,
                ) from exc
            except OSError as exc:
                raise BridgeError(f"Could not start {self.interpreter}: {exc}") from exc

            stdout = completed.stdout or ""
            stderr = (completed.stderr or "").strip()
            if stderr:
                logger.warning("Bridge stderr: %s", stderr)
            if completed.returncode != 0:
                raise BridgeError(
                    stderr or f"{self.interpreter} exited with status {completed.returncode}",
                    returncode=completed.returncode,
                    stderr=stderr,
                )
            if len(stdout.encode("utf-8")) > self.max_output_bytes:
                raise BridgeOutputError(f"OmniFocus output exceeded {self.max_output_bytes} bytes")
            return stdout.strip()
        finally:
            try:
                os.unlink(path)
            except OSError as exc:
                logger.debug("Could not remove bridge script %s: %s", path, exc)
