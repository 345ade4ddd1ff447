# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import asyncio
import inspect
import logging
import builtins

from typing import Any, Awaitable, Callable

from .compiler import SCRIPT_FUNCTION_NAME, compile_script
from .encoding import dumps_result
from .buffer_console import BufferConsole
from ..errors import AgentError, AgentErrorCode
from ..types.sandbox_types import CallableResult, ScriptResult
from ..utils.formatting import format_bytes, truncate_content_tail

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

DEFAULT_CALL_RESULT_MAX_LENGTH = 2000

HostCallable = Callable[..., CallableResult | Awaitable[CallableResult]]


class Sandbox:
    """
    A persistent execution context for model-written scripts.

    One sandbox belongs to one agent. Names bound by a script stay in
    ``namespace`` for the scripts that follow, and every call a script makes
    to a registered callable is recorded in ``call_history``, one bucket per
    ``execute_script`` invocation.

    This is not a security boundary: scripts run in the host interpreter.
    """

    def __init__(self, call_result_max_length: int = DEFAULT_CALL_RESULT_MAX_LENGTH):
        self.namespace: dict[str, Any] = {
            "__builtins__": builtins,
            "__name__": "__agent_script__",
        }
        self.call_history: list[list[CallableResult]] = []
        self.call_result_max_length = call_result_max_length

    def register(self, callable_name: str, fn: HostCallable) -> None:
        """Bind ``fn`` into the namespace as ``callable_name``.

        ``fn`` must produce a CallableResult; the script only ever sees its
        ``return_value``.
        """

        async def host_callable(*args: Any, **kwargs: Any) -> Any:
            try:
                result = fn(*args, **kwargs)
                if inspect.isawaitable(result):
                    result = await result
            except Exception as e:
                raise RuntimeError(f"Error calling function {callable_name}: {e}") from e

            if not self.call_history:
                self.call_history.append([])
            self.call_history[-1].append(result)
            return result.return_value

        host_callable.__name__ = callable_name
        self.namespace[callable_name] = host_callable

    def _trap_unhandled_exception(
        self,
        console: BufferConsole,
        loop: asyncio.AbstractEventLoop,
        context: dict[str, Any],
    ) -> None:
        error = context.get("exception")
        reason = f"{type(error).__name__}: {error}" if error else context.get("message")
        console.log(f"Unhandled exception in background task: {reason}")

    async def execute_script(self, script: str) -> ScriptResult:
        """Run ``script`` in the persistent namespace.

        Raises:
            AgentError: SCRIPT_EXECUTION_FAILED on any syntax or runtime error.
        """
        console = BufferConsole()
        self.namespace["print"] = console.print

        current_calls: list[CallableResult] = []
        self.call_history.append(current_calls)

        loop = asyncio.get_running_loop()
        previous_handler = loop.get_exception_handler()
        loop.set_exception_handler(
            lambda loop, context: self._trap_unhandled_exception(console, loop, context)
        )

        try:
            existing_variables = set(self.namespace)

            exec(compile_script(script), self.namespace)
            script_function = self.namespace.pop(SCRIPT_FUNCTION_NAME)
            return_value = await script_function()

            new_variables = [
                name
                for name in self.namespace
                if name not in existing_variables and not name.startswith("__")
            ]
            call_results = self.format_script_call_results(new_variables, current_calls)
            if call_results:
                console.log(call_results)

            return ScriptResult(
                calls=current_calls,
                return_value=return_value,
                output=console.get_output(),
            )
        except asyncio.CancelledError as e:
            # Only a cancellation of the agent's own task propagates
            task = asyncio.current_task()
            if task is not None and task.cancelling():
                raise
            logger.debug("Script execution failed: awaited a cancelled task")
            raise AgentError(
                f"Script execution failed: {type(e).__name__}: {e}",
                AgentErrorCode.SCRIPT_EXECUTION_FAILED,
            ) from e
        except (Exception, SystemExit) as e:
            logger.debug(f"Script execution failed: {e}")
            raise AgentError(
                f"Script execution failed: {type(e).__name__}: {e}",
                AgentErrorCode.SCRIPT_EXECUTION_FAILED,
            ) from e
        finally:
            self.namespace.pop(SCRIPT_FUNCTION_NAME, None)
            loop.set_exception_handler(previous_handler)

    def _find_label(self, variables: list[str], return_value: Any) -> str | None:
        if return_value is None:
            return None
        for variable in variables:
            if self.namespace.get(variable) is return_value:
                return variable
        return None

    def format_script_call_results(
        self,
        variables: list[str],
        call_results: list[CallableResult],
        indented: bool = True,
        call_result_max_length: int | None = None,
    ) -> str:
        """Render the calls a script made, the way the model reads them back.

        Each block looks like ``// name -> \\nlabel = value``. A UDF supplied
        summary replaces the JSON value when present.
        """
        max_length = call_result_max_length or self.call_result_max_length

        blocks = []
        for call in call_results:
            marker = ""
            if call.return_value_summary is not None:
                value = truncate_content_tail(call.return_value_summary, max_length)
            else:
                value = dumps_result(call.return_value, indented=indented)
                if len(value) > max_length:
                    marker = f"(Truncated. Full size is {format_bytes(len(value.encode('utf-8')))})"
                    half = max_length // 2
                    value = f"{value[:half]}\n...\n{value[-half:]}"

            label = self._find_label(variables, call.return_value)
            assignment = f"{label} = " if label else ""
            blocks.append(f"// {call.callable} -> {marker}\n{assignment}{value}")

        return "\n\n".join(blocks)
