"""Tests for the script IR and its renderers."""

import json

import pytest

from omnifocus_mcp.core.omnifocus.helpers import HELPER_NAMES, render_helpers
from omnifocus_mcp.core.omnifocus.literals import literal
from omnifocus_mcp.core.omnifocus.nodes import (
    Assign,
    Bind,
    Code,
    Collect,
    HelperCall,
    Invoke,
    Return,
    Script,
    Skip,
    render_nodes,
    wrap_for_bridge,
)
from omnifocus_mcp.core.omnifocus.store import Store


class TestCode:
    def test_fill_accepts_code_and_literals(self):
        code = Code.fill("{v}.name === {n}", v=Code("task"), n=literal("Errand"))
        assert str(code) == 'task.name === "Errand"'

    def test_fill_rejects_raw_strings(self):
        with pytest.raises(TypeError, match="Placeholder 'n'"):
            Code.fill("{v}.name === {n}", v=Code("task"), n="Errand")

    def test_braces_in_user_text_are_not_placeholders(self):
        code = Code.fill("x = {n}", n=literal("{v}"))
        assert str(code) == 'x = "{v}"'


class TestNodeRendering:
    def test_skip(self):
        assert Skip(Code("task.completed")).render() == "if (task.completed) continue;"

    def test_assign_with_literal(self):
        assert Assign("task", "note", literal("a\nb")).render() == 'task.note = "a\\nb";'

    def test_invoke_without_args(self):
        assert Invoke("task", "markComplete").render() == "task.markComplete();"

    def test_helper_call_with_bind(self):
        call = HelperCall("findTask", (literal("t1"),), bind="task")
        assert call.render() == 'const task = findTask("t1");'
        assert str(call.expression()) == 'findTask("t1")'

    def test_helper_call_without_bind(self):
        assert HelperCall("deleteObject", (Code("target"),)).render() == "deleteObject(target);"

    def test_bind_and_return(self):
        assert Bind("x", Code("1")).render() == "const x = 1;"
        assert Return(Code("x")).render() == "return x;"

    def test_collect_renders_loop_with_skips(self):
        node = Collect(
            "task",
            "flattenedTasks",
            Code("serializeTask(task)"),
            skips=(Skip(Code("task.completed")), Skip(Code("!task.flagged"))),
        )
        assert node.render().splitlines() == [
            "const results = [];",
            "for (const task of flattenedTasks) {",
            "  if (task.completed) continue;",
            "  if (!task.flagged) continue;",
            "  results.push(serializeTask(task));",
            "}",
        ]

    def test_render_nodes_indents_every_line(self):
        text = render_nodes([Collect("t", "xs", Code("t")), Return(Code("results"))], depth=1)
        assert all(line.startswith("  ") for line in text.splitlines())


class TestScript:
    def test_render_wraps_body_in_result_envelope(self):
        text = Script((Return(Code("42")),), include_helpers=False).render()
        assert "return 42;" in text
        assert "JSON.stringify({ ok: true" in text
        assert "ok: false, error: failure" in text
        assert "failure.details = error.details;" in text

    def test_helpers_rendered_against_store(self):
        store = Store(tasks="fakeTasks", tags="fakeTags")
        text = Script((Return(Code("null")),), store=store).render()
        assert "findByIdOrName(fakeTasks," in text
        assert "for (const tag of fakeTags)" in text
        assert "findByIdOrName(flattenedTasks" not in text

    def test_every_helper_name_is_defined(self):
        text = render_helpers(Store())
        for name in HELPER_NAMES:
            assert f"function {name}(" in text

    def test_wrap_for_bridge_embeds_script_as_json_string(self):
        script = Script((Return(literal('quote " inside')),), include_helpers=False)
        program = wrap_for_bridge(script, application="OmniFocus")
        assert program.startswith('const app = Application("OmniFocus");')
        source_line = next(line for line in program.splitlines() if "evaluateJavascript" in line)
        embedded = source_line[len("const result = app.evaluateJavascript(") : -len(");")]
        assert json.loads(embedded) == script.render().strip()
