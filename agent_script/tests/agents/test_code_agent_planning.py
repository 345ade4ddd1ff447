# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for CodeAgent planning steps and their cadence."""
import pytest
from unittest.mock import AsyncMock, Mock

from agent_script.agents import CodeAgent
from agent_script.llm.base import ChatModelInterface
from agent_script.memory import ActionStep, PlanningStep, TaskStep
from agent_script.types.llm_types import ChatCompletionResult, ChatMessage
from agent_script.udf import FinalAnswerUdf, ThinkUdf
from agent_script.utils.stop_tokens import PLAN_STOP_TOKEN


def completion(content: str) -> ChatCompletionResult:
    return ChatCompletionResult(message=ChatMessage(role="assistant", content=content))


class PlanningModel:
    """Answers facts, plan and code requests, told apart by their stop sequences"""

    def __init__(self, scripts: list[str]):
        self.scripts = list(scripts)
        self.facts_requests = 0
        self.plan_requests = 0

    def __call__(self, messages, stop=None, **params):
        if stop == [PLAN_STOP_TOKEN]:
            self.plan_requests += 1
            return completion(f"1. plan number {self.plan_requests}\n<end_plan>")
        if stop is None:
            self.facts_requests += 1
            return completion(f"facts number {self.facts_requests}")
        return completion(f"```py\n{self.scripts.pop(0)}\n```")


def make_agent(scripts: list[str], **kwargs) -> tuple[CodeAgent, PlanningModel]:
    responder = PlanningModel(scripts)
    model = Mock(spec=ChatModelInterface)
    model.chat_completion = AsyncMock(side_effect=responder)
    agent = CodeAgent(
        name="Planner",
        description="Plans before acting",
        udfs=[FinalAnswerUdf(answer_schema=str), ThinkUdf()],
        max_steps=kwargs.pop("max_steps", 5),
        model=model,
        **kwargs,
    )
    return agent, responder


class TestPlanningCadence:
    def setup_method(self):
        self.agent, _ = make_agent([], planning_interval=3)

    @pytest.mark.parametrize(
        "step_number,expected",
        [(1, True), (2, False), (3, False), (4, True), (7, True)],
        ids=["first", "second", "third", "fourth", "seventh"],
    )
    def test_interval(self, step_number, expected):
        self.agent.should_run_planning = False
        self.agent.update_should_run_planning(next_step_number=step_number)
        assert self.agent.should_run_planning is expected

    def test_interval_of_one_plans_every_step(self):
        agent, _ = make_agent([], planning_interval=1)
        for step_number in range(1, 5):
            agent.should_run_planning = False
            agent.update_should_run_planning(next_step_number=step_number)
            assert agent.should_run_planning

    def test_override(self):
        self.agent.update_should_run_planning(True)
        assert self.agent.should_run_planning
        self.agent.update_should_run_planning(False)
        assert not self.agent.should_run_planning

    def test_no_interval_never_plans(self):
        agent, _ = make_agent([])
        agent.update_should_run_planning(next_step_number=1)
        assert not agent.should_run_planning


class TestPlanningSteps:
    @pytest.mark.asyncio
    async def test_initial_and_update_plans(self):
        agent, responder = make_agent(
            ["print('a')", "print('b')", "await finalAnswer('done')"],
            planning_interval=2,
        )

        result = await agent.run("Solve it")

        assert result == "done"
        kinds = [type(step) for step in agent.memory.steps]
        assert kinds == [
            TaskStep,
            PlanningStep,
            ActionStep,
            ActionStep,
            PlanningStep,
            ActionStep,
        ]
        # Planning does not consume steps
        assert agent.step_number == 4
        assert responder.plan_requests == 2
        assert not agent.should_run_planning

        initial, update = agent.memory.steps[1], agent.memory.steps[4]
        assert initial.facts == "Here are the facts that I know so far:\n\nfacts number 1"
        assert initial.plan == (
            "Here is the plan of action that I will follow to solve the task:\n\n"
            "1. plan number 1\n"
        )
        assert "Here is the updated list of the facts that I know:" in update.facts
        assert "facts number 2" in update.facts
        assert "Here is my new/updated plan of action to solve the task:" in update.plan
        assert "1. plan number 2" in update.plan
        assert PLAN_STOP_TOKEN not in update.plan

    @pytest.mark.asyncio
    async def test_update_uses_summarised_memory(self):
        agent, _ = make_agent(
            ["print('a')", "print('b')", "await finalAnswer('done')"],
            planning_interval=2,
        )

        await agent.run("Solve it")

        update = agent.memory.steps[4]
        contents = [m.content for m in update.model_input_messages]
        assert agent.memory.system_prompt.system_prompt not in contents
        assert not any(c.startswith("[PLAN]:") for c in contents)
        assert any(c.startswith("[FACTS LIST]:") for c in contents)

    @pytest.mark.asyncio
    async def test_action_step_sees_plan(self):
        agent, _ = make_agent(["await finalAnswer('done')"], planning_interval=5)

        await agent.run("Solve it")

        action = agent.memory.steps[2]
        contents = [m.content for m in action.model_input_messages]
        assert any(c.startswith("[PLAN]:\nHere is the plan of action") for c in contents)

    @pytest.mark.asyncio
    async def test_think_requests_planning(self):
        agent, responder = make_agent(["await think()", "await finalAnswer('done')"])

        assert await agent.run("Think first") == "done"

        kinds = [type(step) for step in agent.memory.steps]
        assert kinds == [TaskStep, ActionStep, PlanningStep, ActionStep]
        assert responder.facts_requests == 1
        # No planning step existed yet for this task, so it is an initial plan
        assert agent.memory.steps[2].facts.startswith("Here are the facts that I know so far")

    @pytest.mark.asyncio
    async def test_explicit_flag_plans_first(self):
        agent, responder = make_agent(["await finalAnswer('done')"], should_run_planning=True)

        await agent.run("Plan first")

        assert isinstance(agent.memory.steps[1], PlanningStep)
        assert responder.plan_requests == 1
