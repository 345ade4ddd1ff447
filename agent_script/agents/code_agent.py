# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The code agent: asks a model for Python scripts that call UDFs, runs them in a
sandbox, and loops on the observations until a stopping UDF is called.
"""
import json
import time
import inspect
import logging

from typing import Any

from .agent_logger import AgentLogger
from ..config import config
from ..errors import AgentError, AgentErrorCode
from ..llm.base import ChatModelInterface, to_chat_completion_messages
from ..llm.chat_model import ChatModel
from ..memory import ActionStep, AgentMemory, PlanningStep, TaskStep
from ..prompts import CodeAgentPrompt, default_code_agent_prompt, render_template
from ..sandbox import Sandbox
from ..schemas import SchemaValidator, schema_to_type_string, to_json_schema, walk_schema
from ..types.agent_types import AgentInterface, CodeAgentInterface
from ..types.common import LogLevel, Observation, TextObservation
from ..types.llm_types import ChatMessage
from ..types.sandbox_types import CallableResult, ExecutionResult
from ..types.udf_types import JsonSchema, UdfInterface, is_stopping_udf
from ..udf.call_agent import CallAgentUdf
from ..utils.formatting import truncate_content
from ..utils.parsing import find_imported_modules, parse_code_output, strip_stop_token
from ..utils.stop_tokens import CODE_STOP_SEQUENCES, PLAN_STOP_TOKEN

logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

CIRCUIT_BREAKER_THRESHOLD = 3


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


class CodeAgent(CodeAgentInterface):
    """
    An agent that solves tasks by writing and running Python scripts.

    Each step renders the memory into chat messages, asks the model for a
    script, runs it in the agent's sandbox and records what happened in an
    ActionStep. The run ends when a script calls a stopping UDF, when
    ``max_steps`` steps have been taken, or when the same error repeats three
    steps in a row.

    Any CodeAgent can be given to another as a managed agent, in which case
    the owner gets a ``call{AgentName}`` UDF delegating to it.
    """

    def __init__(
        self,
        name: str,
        description: str,
        udfs: list[UdfInterface],
        max_steps: int | None = None,
        model: ChatModelInterface | None = None,
        sandbox: Sandbox | None = None,
        prompts: CodeAgentPrompt | None = None,
        memory: AgentMemory | None = None,
        managed_agents: list[AgentInterface] | None = None,
        output_schema: Any = None,
        planning_interval: int | None = None,
        should_run_planning: bool = False,
        logger: AgentLogger | None = None,
        authorized_imports: list[str] | None = None,
        max_output_length: int | None = None,
    ):
        self.name = name
        self.description = description
        self.max_steps = max_steps if max_steps is not None else config.max_steps
        self.model = model or ChatModel()
        self.sandbox = sandbox or Sandbox(config.call_result_max_length)
        self.prompts = prompts or default_code_agent_prompt()
        self.managed_agents = list(managed_agents or [])
        self.output_schema = to_json_schema(output_schema) if output_schema is not None else None
        self.planning_interval = planning_interval
        self.should_run_planning = should_run_planning
        self.logger = logger or AgentLogger()
        self.authorized_imports = authorized_imports
        self.max_output_length = max_output_length or config.max_output_length

        self.task = ""
        self.step_number = 0
        self._has_planned = False

        self.udfs = list(udfs)
        self.udfs.extend(CallAgentUdf(agent) for agent in self.managed_agents)
        self.validate()

        self._stopping_udf_names = {udf.name for udf in self.udfs if is_stopping_udf(udf)}
        self._input_validators = {
            udf.name: SchemaValidator(to_json_schema(udf.input_schema)) for udf in self.udfs
        }

        self.memory = memory or AgentMemory(self._render_system_prompt())

        for udf in self.udfs:
            self.sandbox.register(udf.name, self._make_host_callable(udf.name))

    def validate(self) -> None:
        """Check the UDF set; warn about undocumented primitive input fields.

        Raises:
            AgentError: VALIDATION_ERROR on duplicate names, UDF_NOT_FOUND
                without any stopping UDF.
        """
        names = [udf.name for udf in self.udfs]
        if len(names) > len(set(names)):
            raise AgentError("UDF names must be unique.", AgentErrorCode.VALIDATION_ERROR)

        if not any(is_stopping_udf(udf) for udf in self.udfs):
            raise AgentError(
                "The CodeAgent requires at least one stopping UDF, such as finalAnswer or terminate.",
                AgentErrorCode.UDF_NOT_FOUND,
            )

        warnings: list[str] = []
        for udf in self.udfs:

            def check_documented(schema: JsonSchema, schema_path: str, udf_name: str = udf.name) -> None:
                if not schema.get("description"):
                    warnings.append(
                        f"UDF {udf_name} has an input schema {schema_path} that is a "
                        "primitive type but has no description."
                    )

            walk_schema(to_json_schema(udf.input_schema), check_documented)

        if warnings:
            logger.warning("\n".join(warnings))

    def _make_host_callable(self, udf_name: str):
        async def host_callable(params: Any = None, **kwargs: Any) -> CallableResult:
            if params is None:
                params = kwargs
            output = await self.call_udf(udf_name, params)
            udf = self._get_udf(udf_name)
            summary = None
            if udf is not None and hasattr(udf, "get_call_result_summary"):
                summary = await _maybe_await(udf.get_call_result_summary(output))
            return CallableResult(
                return_value=output, return_value_summary=summary, callable=udf_name
            )

        return host_callable

    def _get_udf(self, udf_name: str) -> UdfInterface | None:
        return next((udf for udf in self.udfs if udf.name == udf_name), None)

    def _template_variables(self) -> dict[str, Any]:
        return {
            "udfs": self.udfs,
            "managed_agents": self.managed_agents,
            "task": self.task,
            "description": self.description or "",
            "authorized_imports": self.authorized_imports,
        }

    def _render_system_prompt(self) -> str:
        return render_template(self.prompts.system_prompt, **self._template_variables())

    def write_memory_to_messages(self, summary_mode: bool = False) -> list[ChatMessage]:
        return self.memory.to_messages(summary_mode=summary_mode)

    async def call_udf(self, udf_name: str, input: Any) -> Any:
        """Validate ``input`` and invoke a UDF with its lifecycle hooks.

        Raises:
            AgentError: UDF_NOT_FOUND for an unknown name, UDF_EXECUTION_ERROR
                for invalid input or any failure of the UDF itself.
        """
        udf = self._get_udf(udf_name)
        if udf is None:
            raise AgentError(f"UDF {udf_name} not found", AgentErrorCode.UDF_NOT_FOUND)

        in_call = False
        try:
            validator = self._input_validators.get(udf_name) or SchemaValidator(
                to_json_schema(udf.input_schema)
            )
            validator.validate(input)

            await _maybe_await(udf.on_before_call(input, self))
            in_call = True
            output = await _maybe_await(udf.call(input, self))
            in_call = False
            await _maybe_await(udf.on_after_call(input, output, self))
            return output
        except Exception as e:
            on_call_error = getattr(udf, "on_call_error", None)
            if in_call and on_call_error is not None:
                try:
                    await _maybe_await(on_call_error(input, e, self))
                except Exception as cleanup_error:
                    logger.warning(f"on_call_error of UDF {udf_name} failed: {cleanup_error}")

            message = e.message if isinstance(e, AgentError) else str(e)
            raise AgentError(
                f"Error when calling UDF {udf_name} with arguments "
                f"{json.dumps(input, default=str)}: {type(e).__name__}: {message}\n"
                "You should only call this UDF with a correct input.\n"
                f"As a reminder, this UDF's description is the following: '{udf.description}'.\n"
                f"It takes inputs: {json.dumps(to_json_schema(udf.input_schema))} "
                f"and returns output type {schema_to_type_string(to_json_schema(udf.output_schema))}",
                AgentErrorCode.UDF_EXECUTION_ERROR,
            ) from e

    async def run(self, task: str, observations: list[Observation] | None = None) -> Any:
        """Solve ``task``, returning the final answer or None when giving up."""
        self.task = task
        self.step_number = 1
        self._has_planned = False
        self.memory.system_prompt.system_prompt = self._render_system_prompt()
        self.logger.log_task(task)
        self.memory.steps.append(TaskStep(task=task, observations=list(observations or [])))

        if self.planning_interval:
            self.update_should_run_planning()

        final_answer = None
        done = False
        while (
            not done
            and self.step_number <= self.max_steps
            and not self.error_circuit_breaker()
        ):
            if self.should_run_planning:
                await self.planning_step()
                continue

            memory_step = ActionStep(step_number=self.step_number, start_time=time.time())
            self.memory.steps.append(memory_step)
            try:
                self.logger.log_rule(f"Step {self.step_number}", LogLevel.INFO)
                await self.before_step()
                final_answer = await self.step(memory_step)
                done = memory_step.is_final_answer
                await self.after_step()
            except AgentError as error:
                memory_step.error = error
                logger.info(f"Step {self.step_number} failed: {error.message}")
            finally:
                memory_step.end_time = time.time()
                memory_step.duration = memory_step.end_time - memory_step.start_time
                self.step_number += 1

        if not done and self.step_number > self.max_steps:
            now = time.time()
            self.memory.steps.append(
                ActionStep(
                    step_number=self.step_number,
                    error=AgentError("Reached max steps", AgentErrorCode.MAX_STEPS_REACHED),
                    start_time=now,
                    end_time=now,
                    duration=0.0,
                )
            )

        return final_answer if done else None

    async def call(self, task: str, **kwargs: Any) -> str:
        """Run as a managed agent, wrapping the task and answer for the manager."""
        full_task = render_template(
            self.prompts.managed_agent.task, name=self.name, task=task
        )
        report = await self.run(full_task, **kwargs)
        if not isinstance(report, str):
            report = json.dumps(report, default=str, indent=2)
        return render_template(
            self.prompts.managed_agent.report, name=self.name, final_answer=report
        )

    async def before_step(self) -> None:
        pass

    async def after_step(self) -> None:
        # Decide now whether the upcoming step should be preceded by planning
        self.update_should_run_planning(next_step_number=self.step_number + 1)

    def update_should_run_planning(
        self, override: bool | None = None, next_step_number: int | None = None
    ) -> None:
        """Request planning explicitly, or apply the planning cadence.

        With ``planning_interval`` k, planning precedes the steps numbered n
        where n % k == 1 (every step when k is 1).
        """
        if override is not None:
            self.should_run_planning = override
            return
        if not self.planning_interval:
            return
        step = next_step_number if next_step_number is not None else self.step_number
        if self.planning_interval == 1 or step % self.planning_interval == 1:
            self.should_run_planning = True

    def error_circuit_breaker(self) -> bool:
        """True when the last three action steps of this run failed with the same message"""
        action_steps = []
        for memory_step in reversed(self.memory.steps):
            if isinstance(memory_step, TaskStep):
                break
            if isinstance(memory_step, ActionStep):
                action_steps.append(memory_step)
            if len(action_steps) == CIRCUIT_BREAKER_THRESHOLD:
                break
        recent = action_steps
        if len(recent) < CIRCUIT_BREAKER_THRESHOLD:
            return False
        if any(step.error is None for step in recent):
            return False
        return len({step.error.message for step in recent}) == 1

    def parse_code_output(self, content: str) -> str:
        return parse_code_output(content)

    def _check_imports(self, script: str) -> None:
        if self.authorized_imports is None:
            return
        modules = find_imported_modules(script)
        if not modules:
            return
        unauthorized = sorted(modules - set(self.authorized_imports))
        if unauthorized:
            raise AgentError(
                f"Import of {', '.join(unauthorized)} is not allowed. "
                f"Authorized imports are: {', '.join(self.authorized_imports) or 'none'}",
                AgentErrorCode.INVALID_CODE_PATTERN,
            )

    async def execute_script(self, script: str) -> ExecutionResult:
        result = await self.sandbox.execute_script(script)
        terminating_call = next(
            (call for call in result.calls if call.callable in self._stopping_udf_names),
            None,
        )
        if result.return_value is not None:
            answer = result.return_value
        elif terminating_call is not None:
            answer = terminating_call.return_value
        else:
            answer = None

        return ExecutionResult(
            result=answer,
            output=result.output,
            is_final_answer=terminating_call is not None,
        )

    async def step(self, memory_step: ActionStep) -> Any:
        """Run one think/act/observe cycle and return the answer if it ended the run."""
        memory_messages = self.write_memory_to_messages()
        memory_step.model_input_messages = list(memory_messages)

        try:
            response = await self.model.chat_completion(
                messages=to_chat_completion_messages(memory_messages),
                stop=CODE_STOP_SEQUENCES,
            )
        except Exception as e:
            raise AgentError(
                f"Error generating model output: {e}", AgentErrorCode.MODEL_OUTPUT_ERROR
            ) from e

        memory_step.model_output_message = response.message
        model_output = response.message.content
        memory_step.model_output = model_output
        self.logger.log_markdown(
            content=model_output, title="--- Output message of the LLM ---"
        )

        script = self.parse_code_output(model_output)
        self._check_imports(script)

        try:
            result = await self.execute_script(script)
        except AgentError:
            raise
        except Exception as e:
            raise AgentError(
                f"Error executing code: {e}", AgentErrorCode.SCRIPT_EXECUTION_FAILED
            ) from e

        memory_step.action_output = result.result
        memory_step.is_final_answer = result.is_final_answer

        if result.output:
            observation = (
                f"-- Script execution results --\n"
                f"{truncate_content(result.output, self.max_output_length)}"
            )
        else:
            observation = "-- Script execution results --\nNo output from script execution"
        memory_step.observations.append(TextObservation(text=observation))
        self.logger.log_markdown(content=observation, title="-- Script execution results --")

        return result.result if result.is_final_answer else None

    async def planning_step(self) -> None:
        """Write (or rewrite) the facts survey and plan, as a PlanningStep."""
        variables = self._template_variables()

        if not self._has_planned:
            input_messages = [
                ChatMessage(role="system", content=self.prompts.planning.initial_facts),
                ChatMessage(
                    role="user",
                    content=f"Here is the task:\n```\n{self.task}\n```\nNow begin!",
                ),
            ]
            facts_message = await self._planning_completion(input_messages)
            answer_facts = facts_message.content

            plan_prompt = ChatMessage(
                role="user",
                content=render_template(
                    self.prompts.planning.initial_plan, **variables, answer_facts=answer_facts
                ),
            )
            plan_message = await self._planning_completion([plan_prompt], stop=[PLAN_STOP_TOKEN])
            answer_plan = strip_stop_token(plan_message.content, PLAN_STOP_TOKEN)

            plan = f"Here is the plan of action that I will follow to solve the task:\n\n{answer_plan}\n"
            facts = f"Here are the facts that I know so far:\n\n{answer_facts}\n".strip()
            title = "Initial plan"
        else:
            # Summary mode leaves out the system prompt and earlier plans
            memory_messages = self.write_memory_to_messages(summary_mode=True)

            input_messages = [
                ChatMessage(role="system", content=self.prompts.planning.update_facts_pre_messages),
                *memory_messages,
                ChatMessage(role="user", content=self.prompts.planning.update_facts_post_messages),
            ]
            facts_message = await self._planning_completion(input_messages)
            facts_update = facts_message.content

            plan_pre = ChatMessage(
                role="system",
                content=render_template(self.prompts.planning.update_plan_pre_messages, **variables),
            )
            plan_post = ChatMessage(
                role="user",
                content=render_template(
                    self.prompts.planning.update_plan_post_messages,
                    **variables,
                    facts_update=facts_update,
                    remaining_steps=self.max_steps - self.step_number,
                ),
            )
            plan_message = await self._planning_completion(
                [plan_pre, *memory_messages, plan_post], stop=[PLAN_STOP_TOKEN]
            )
            updated_plan = strip_stop_token(plan_message.content, PLAN_STOP_TOKEN)

            plan = (
                f"I still need to solve the task I was given:\n```\n{self.task}\n```\n\n"
                f"Here is my new/updated plan of action to solve the task:\n```\n{updated_plan}\n```"
            )
            facts = f"Here is the updated list of the facts that I know:\n```\n{facts_update}\n```"
            title = "Updated plan"

        self.memory.steps.append(
            PlanningStep(
                model_input_messages=input_messages,
                facts=facts,
                plan=plan,
                model_output_message_facts=facts_message,
                model_output_message_plan=plan_message,
            )
        )
        self.logger.log_rule(title, LogLevel.INFO)
        self.logger.log(plan)

        self._has_planned = True
        self.should_run_planning = False

    async def _planning_completion(
        self, messages: list[ChatMessage], stop: list[str] | None = None
    ) -> ChatMessage:
        try:
            response = await self.model.chat_completion(
                messages=to_chat_completion_messages(messages), stop=stop
            )
        except Exception as e:
            raise AgentError(
                f"Error generating planning output: {e}", AgentErrorCode.MODEL_OUTPUT_ERROR
            ) from e
        return response.message

    async def provide_final_answer(self, task: str | None = None) -> str:
        """Ask the model to answer from memory alone, e.g. after a run gave up"""
        messages = [
            ChatMessage(role="system", content=self.prompts.final_answer.pre_messages),
            *self.memory.get_succinct_steps(),
            ChatMessage(
                role="user",
                content=render_template(
                    self.prompts.final_answer.post_messages, task=task or self.task
                ),
            ),
        ]
        try:
            response = await self.model.chat_completion(
                messages=to_chat_completion_messages(messages)
            )
        except Exception as e:
            raise AgentError(
                f"Error generating final answer: {e}", AgentErrorCode.MODEL_OUTPUT_ERROR
            ) from e
        return response.message.content
