"""Tests for the script execution gateway."""

import json
import os
import subprocess
import sys
from unittest.mock import MagicMock, patch

import pytest

from omnifocus_mcp.core.errors import (
    AmbiguousMatchError,
    BridgeError,
    BridgeOutputError,
    BridgeTimeoutError,
    NotFoundError,
    PreconditionError,
    ValidationError,
    error_to_response,
)
from omnifocus_mcp.core.omnifocus.executor import (
    DEFAULT_TIMEOUT,
    MAX_OUTPUT_BYTES,
    ScriptRunner,
    decode_envelope,
    run_bounded,
)
from omnifocus_mcp.core.omnifocus.nodes import Code, Return, Script


def _completed(stdout="", stderr="", returncode=0):
    return subprocess.CompletedProcess(args=[], returncode=returncode, stdout=stdout, stderr=stderr)


class TestDecodeEnvelope:
    def test_ok_returns_data(self):
        assert decode_envelope('{"ok": true, "data": [1, 2]}') == [1, 2]

    def test_ok_with_null_data(self):
        assert decode_envelope('{"ok": true, "data": null}') is None

    @pytest.mark.parametrize(
        "kind, exc_class",
        [
            ("not_found", NotFoundError),
            ("ambiguous", AmbiguousMatchError),
            ("precondition", PreconditionError),
            ("validation", ValidationError),
            ("bridge", BridgeError),
            ("something_else", BridgeError),
        ],
    )
    def test_failure_kinds_map_to_exceptions(self, kind, exc_class):
        with pytest.raises(exc_class, match="boom"):
            decode_envelope('{"ok": false, "error": {"kind": "%s", "message": "boom"}}' % kind)

    def test_not_found_details_reach_the_error_envelope(self):
        output = json.dumps(
            {
                "ok": False,
                "error": {
                    "kind": "not_found",
                    "message": "Tag not found: abc",
                    "details": {"kind": "Tag", "identifier": "abc"},
                },
            }
        )
        with pytest.raises(NotFoundError) as exc_info:
            decode_envelope(output)
        assert (exc_info.value.kind, exc_info.value.identifier) == ("Tag", "abc")

        response = error_to_response(exc_info.value)
        assert response["data"]["error_code"] == "NOT_FOUND"
        assert response["data"]["details"] == {"kind": "Tag", "identifier": "abc"}

    def test_ambiguous_candidates_reach_the_error_envelope(self):
        candidates = ["Work/Errand (id: t1)", "Home/Errand (id: t2)", "Personal/Errand (id: t3)"]
        output = json.dumps(
            {
                "ok": False,
                "error": {"kind": "ambiguous", "message": "Multiple tags", "details": {"candidates": candidates}},
            }
        )
        with pytest.raises(AmbiguousMatchError) as exc_info:
            decode_envelope(output)

        response = error_to_response(exc_info.value)
        assert response["data"]["error_code"] == "AMBIGUOUS_MATCH"
        assert response["data"]["details"] == {"candidates": candidates}

    def test_validation_field_detail(self):
        output = '{"ok": false, "error": {"kind": "validation", "message": "bad", "details": {"field": "status"}}}'
        with pytest.raises(ValidationError) as exc_info:
            decode_envelope(output)
        assert exc_info.value.field == "status"

    def test_unknown_detail_keys_are_ignored(self):
        output = '{"ok": false, "error": {"kind": "precondition", "message": "no window", "details": {"x": 1}}}'
        with pytest.raises(PreconditionError, match="no window"):
            decode_envelope(output)

    def test_invalid_json(self):
        with pytest.raises(BridgeOutputError, match="invalid JSON"):
            decode_envelope("not json")

    def test_unexpected_shape(self):
        with pytest.raises(BridgeOutputError):
            decode_envelope("[1, 2, 3]")


class TestScriptRunner:
    def test_defaults(self):
        runner = ScriptRunner()
        assert runner.timeout == DEFAULT_TIMEOUT == 30.0
        assert runner.max_output_bytes == MAX_OUTPUT_BYTES == 10 * 1024 * 1024

    def test_runs_interpreter_on_temp_file_and_removes_it(self):
        seen = {}

        def fake_run(cmd, **kwargs):
            seen["cmd"] = cmd
            seen["kwargs"] = kwargs
            seen["exists"] = os.path.exists(cmd[-1])
            with open(cmd[-1], encoding="utf-8") as handle:
                seen["program"] = handle.read()
            return _completed(stdout='  {"ok": true, "data": 7}\n')

        runner = ScriptRunner(run=fake_run)
        assert runner.execute(Script((Return(Code("7")),), include_helpers=False)) == 7

        assert seen["cmd"][:3] == ["osascript", "-l", "JavaScript"]
        assert seen["exists"] is True
        assert "evaluateJavascript" in seen["program"]
        assert seen["kwargs"]["timeout"] == 30.0
        assert seen["kwargs"]["max_output_bytes"] == MAX_OUTPUT_BYTES
        assert not os.path.exists(seen["cmd"][-1])

    def test_timeout_override(self):
        run = MagicMock(return_value=_completed(stdout="ok"))
        ScriptRunner(run=run).run_program("x", timeout=60.0)
        assert run.call_args.kwargs["timeout"] == 60.0

    def test_output_is_trimmed(self):
        run = MagicMock(return_value=_completed(stdout="\n result \n"))
        assert ScriptRunner(run=run).run_program("x") == "result"

    def test_timeout_raises_and_cleans_up(self):
        paths = []

        def fake_run(cmd, **kwargs):
            paths.append(cmd[-1])
            raise subprocess.TimeoutExpired(cmd, kwargs["timeout"])

        with pytest.raises(BridgeTimeoutError) as exc_info:
            ScriptRunner(run=fake_run, timeout=5).run_program("x")
        assert exc_info.value.timeout == 5
        assert not os.path.exists(paths[0])

    def test_nonzero_exit_raises_bridge_error_with_stderr(self):
        run = MagicMock(return_value=_completed(stderr="execution error: -1743", returncode=1))
        with pytest.raises(BridgeError, match="-1743") as exc_info:
            ScriptRunner(run=run).run_program("x")
        assert exc_info.value.returncode == 1

    def test_missing_interpreter(self):
        run = MagicMock(side_effect=FileNotFoundError("osascript"))
        with pytest.raises(BridgeError, match="Could not start osascript"):
            ScriptRunner(run=run).run_program("x")

    def test_output_over_limit(self):
        run = MagicMock(return_value=_completed(stdout="x" * 11))
        with pytest.raises(BridgeOutputError, match="exceeded 10 bytes"):
            ScriptRunner(run=run, max_output_bytes=10).run_program("x")

    def test_cleanup_failure_is_not_raised(self):
        paths = []

        def fake_run(cmd, **kwargs):
            paths.append(cmd[-1])
            return _completed(stdout="ok")

        with patch("omnifocus_mcp.core.omnifocus.executor.os.unlink", side_effect=OSError("busy")):
            assert ScriptRunner(run=fake_run).run_program("x") == "ok"
        os.remove(paths[0])


class TestRunBounded:
    def test_captures_output_and_exit_status(self):
        completed = run_bounded(
            [sys.executable, "-c", "import sys; sys.stdout.write('out'); sys.stderr.write('err'); sys.exit(3)"],
            timeout=30,
        )
        assert (completed.stdout, completed.stderr, completed.returncode) == ("out", "err", 3)

    def test_keeps_at_most_one_byte_past_the_ceiling(self):
        completed = run_bounded(
            [sys.executable, "-c", "import sys; sys.stdout.write('x' * 200000)"],
            timeout=30,
            max_output_bytes=100,
        )
        assert completed.returncode == 0
        assert len(completed.stdout) == 101

    def test_oversized_output_is_rejected_by_the_runner(self):
        program = "import sys; sys.stdout.write('x' * 200000)"

        def bounded_python(cmd, **kwargs):
            return run_bounded([sys.executable, "-c", program], **kwargs)

        with pytest.raises(BridgeOutputError, match="exceeded 100 bytes"):
            ScriptRunner(run=bounded_python, max_output_bytes=100).run_program("x")

    def test_timeout_kills_the_child(self):
        with pytest.raises(subprocess.TimeoutExpired):
            run_bounded([sys.executable, "-c", "import time; time.sleep(30)"], timeout=0.5)
