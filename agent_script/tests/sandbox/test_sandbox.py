# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for script execution in the Sandbox."""
import asyncio
import pytest

from agent_script.errors import AgentError, AgentErrorCode
from agent_script.sandbox import Sandbox
from agent_script.types.sandbox_types import CallableResult


def returning(value, name: str, summary: str | None = None):
    async def host_callable(*args, **kwargs):
        return CallableResult(return_value=value, return_value_summary=summary, callable=name)

    return host_callable


class TestSandbox:
    """Test suite for the Sandbox class."""

    def setup_method(self):
        self.sandbox = Sandbox()

    @pytest.mark.asyncio
    async def test_call_without_return(self):
        self.sandbox.register("f", returning("r", "f"))

        result = await self.sandbox.execute_script("await f()")

        assert result.return_value is None
        assert result.calls == [
            CallableResult(return_value="r", return_value_summary=None, callable="f")
        ]

    @pytest.mark.asyncio
    async def test_return_value(self):
        self.sandbox.register("testFunction", returning("test result", "testFunction"))

        result = await self.sandbox.execute_script("return await testFunction()")

        assert result.return_value == "test result"

    @pytest.mark.asyncio
    async def test_variables_persist(self):
        await self.sandbox.execute_script("x = 5")
        result = await self.sandbox.execute_script("return x + 1")
        assert result.return_value == 6

    @pytest.mark.asyncio
    async def test_definitions_and_imports_persist(self):
        await self.sandbox.execute_script(
            "import math\n\ndef double(n):\n    return n * 2\n\nclass Box:\n    size = 3"
        )
        result = await self.sandbox.execute_script("return double(Box.size) + math.floor(0.5)")
        assert result.return_value == 6

    @pytest.mark.asyncio
    async def test_annotations_and_globals_tolerated(self):
        result = await self.sandbox.execute_script("global count\ncount: int = 3\nreturn count")
        assert result.return_value == 3
        assert self.sandbox.namespace["count"] == 3

    @pytest.mark.asyncio
    async def test_nested_scopes_stay_local(self):
        await self.sandbox.execute_script(
            "def helper():\n    inner = 1\n    return inner\n\nsquares = [i * i for i in range(3)]"
        )
        assert "helper" in self.sandbox.namespace
        assert self.sandbox.namespace["squares"] == [0, 1, 4]
        assert "inner" not in self.sandbox.namespace
        assert "i" not in self.sandbox.namespace

    @pytest.mark.asyncio
    async def test_print_is_captured(self):
        result = await self.sandbox.execute_script("print('hello', 'world')\nprint(1, 2, sep='-')")
        assert result.output == "hello world\n1-2\n"

    @pytest.mark.asyncio
    async def test_ansi_codes_stripped(self):
        result = await self.sandbox.execute_script("print('\\x1b[31mred\\x1b[0m')")
        assert result.output == "red\n"

    @pytest.mark.asyncio
    async def test_output_is_per_execution(self):
        await self.sandbox.execute_script("print('first')")
        result = await self.sandbox.execute_script("print('second')")
        assert result.output == "second\n"

    @pytest.mark.asyncio
    async def test_syntax_error(self):
        with pytest.raises(AgentError) as exc_info:
            await self.sandbox.execute_script("def broken(:")
        assert exc_info.value.code == AgentErrorCode.SCRIPT_EXECUTION_FAILED
        assert exc_info.value.message.startswith("Script execution failed: SyntaxError")

    @pytest.mark.asyncio
    async def test_runtime_error(self):
        with pytest.raises(AgentError) as exc_info:
            await self.sandbox.execute_script("raise ValueError('bad value')")
        assert exc_info.value.message == "Script execution failed: ValueError: bad value"

    @pytest.mark.asyncio
    async def test_failing_callable(self):
        async def failing(*args, **kwargs):
            raise ValueError("nope")

        self.sandbox.register("f", failing)

        with pytest.raises(AgentError) as exc_info:
            await self.sandbox.execute_script("await f()")
        assert "Error calling function f: nope" in exc_info.value.message

    @pytest.mark.asyncio
    async def test_sync_callable_and_arguments(self):
        def echo(params=None, **kwargs):
            return CallableResult(
                return_value=params or kwargs, return_value_summary=None, callable="echo"
            )

        self.sandbox.register("echo", echo)

        result = await self.sandbox.execute_script(
            "a = await echo({'q': 1})\nb = await echo(q=2)\nreturn [a, b]"
        )
        assert result.return_value == [{"q": 1}, {"q": 2}]

    @pytest.mark.asyncio
    async def test_call_history_buckets(self):
        self.sandbox.register("f", returning(1, "f"))

        await self.sandbox.execute_script("await f()\nawait f()")
        await self.sandbox.execute_script("await f()")

        assert [len(bucket) for bucket in self.sandbox.call_history] == [2, 1]

    @pytest.mark.asyncio
    async def test_call_results_labelled(self):
        self.sandbox.register("testFn", returning("result", "testFn"))

        result = await self.sandbox.execute_script("testFnResult = await testFn()")

        assert '// testFn -> \ntestFnResult = "result"' in result.output

    @pytest.mark.asyncio
    async def test_none_results_not_labelled(self):
        self.sandbox.register("nothing", returning(None, "nothing"))

        result = await self.sandbox.execute_script("empty = None\nvalue = await nothing()")

        assert result.output == "// nothing -> \nnull\n"

    @pytest.mark.asyncio
    async def test_summary_replaces_value(self):
        self.sandbox.register("search", returning([1, 2, 3], "search", summary="3 items found"))

        result = await self.sandbox.execute_script("items = await search()")

        assert "// search -> \nitems = 3 items found" in result.output

    @pytest.mark.asyncio
    async def test_background_task_errors_trapped(self):
        loop = asyncio.get_running_loop()
        previous_handler = loop.get_exception_handler()

        result = await self.sandbox.execute_script(
            "import asyncio\n"
            "\n"
            "async def boom():\n"
            "    raise ValueError('background failure')\n"
            "\n"
            "asyncio.create_task(boom())\n"
            "await asyncio.sleep(0.01)"
        )

        assert (
            "Unhandled exception in background task: ValueError: background failure"
            in result.output
        )
        assert loop.get_exception_handler() is previous_handler

    @pytest.mark.asyncio
    async def test_awaiting_cancelled_task_fails_script(self):
        with pytest.raises(AgentError) as exc_info:
            await self.sandbox.execute_script(
                "import asyncio\n"
                "t = asyncio.create_task(asyncio.sleep(10))\n"
                "await asyncio.sleep(0)\n"
                "t.cancel()\n"
                "await t"
            )
        assert exc_info.value.code == AgentErrorCode.SCRIPT_EXECUTION_FAILED
        assert exc_info.value.message.startswith("Script execution failed: CancelledError")

    @pytest.mark.asyncio
    async def test_cancelling_the_caller_propagates(self):
        task = asyncio.create_task(
            self.sandbox.execute_script("import asyncio\nawait asyncio.sleep(10)")
        )
        await asyncio.sleep(0.01)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task


class TestFormatScriptCallResults:
    """Rendering of call results."""

    def setup_method(self):
        self.sandbox = Sandbox(call_result_max_length=100)

    def test_blocks_joined_by_blank_lines(self):
        calls = [
            CallableResult(return_value={"a": 1}, return_value_summary=None, callable="one"),
            CallableResult(return_value=2, return_value_summary=None, callable="two"),
        ]

        formatted = self.sandbox.format_script_call_results([], calls)

        assert formatted == '// one -> \n{\n  "a": 1\n}\n\n// two -> \n2'

    def test_compact_rendering(self):
        calls = [CallableResult(return_value={"a": [1, 2]}, return_value_summary=None, callable="f")]

        formatted = self.sandbox.format_script_call_results([], calls, indented=False)

        assert formatted == '// f -> \n{"a": [1, 2]}'

    def test_truncation_marker(self):
        value = "a" * 5000
        calls = [CallableResult(return_value=value, return_value_summary=None, callable="big")]

        formatted = self.sandbox.format_script_call_results([], calls)

        header, body = formatted.split("\n", 1)
        # The JSON string is the 5000 characters plus its two quotes
        assert header == "// big -> (Truncated. Full size is 4.88 KB)"
        assert formatted.count("Truncated.") == 1
        assert len(body) <= 100 + len("\n...\n")
        assert "\n...\n" in body

    def test_truncation_counts_bytes(self):
        value = "é" * 200
        calls = [CallableResult(return_value=value, return_value_summary=None, callable="big")]

        formatted = self.sandbox.format_script_call_results([], calls)

        # 200 two-byte characters plus two quotes
        assert formatted.startswith("// big -> (Truncated. Full size is 402 Bytes)")

    def test_summary_truncated_at_tail(self):
        calls = [
            CallableResult(return_value=None, return_value_summary="x" * 150, callable="f")
        ]

        formatted = self.sandbox.format_script_call_results([], calls)

        assert formatted == "// f -> \n" + "x" * 100 + " ... (truncated)"

    def test_explicit_limit_overrides_default(self):
        calls = [CallableResult(return_value="abc", return_value_summary=None, callable="f")]

        formatted = self.sandbox.format_script_call_results([], calls, call_result_max_length=3)

        assert formatted.startswith("// f -> (Truncated. Full size is 5 Bytes)")
