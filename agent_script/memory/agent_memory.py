# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import TYPE_CHECKING

from ..types.llm_types import ChatMessage
from .steps import (
    ActionStep,
    MemoryStep,
    PlanningStep,
    SystemPromptStep,
    TaskStep,
    step_to_messages,
)

if TYPE_CHECKING:
    from ..agents.agent_logger import AgentLogger


class AgentMemory:
    """The ordered, append-only log of one agent's steps"""

    def __init__(self, system_prompt: str):
        self.system_prompt = SystemPromptStep(system_prompt=system_prompt)
        self.steps: list[MemoryStep] = []

    def reset(self) -> None:
        self.steps = []

    def to_messages(self, summary_mode: bool = False) -> list[ChatMessage]:
        messages = step_to_messages(self.system_prompt, summary_mode=summary_mode)
        for step in self.steps:
            messages.extend(step_to_messages(step, summary_mode=summary_mode))
        return messages

    def get_succinct_steps(self) -> list[ChatMessage]:
        return [
            message
            for step in self.steps
            for message in step_to_messages(step, summary_mode=True)
        ]

    def replay(self, logger: "AgentLogger", detailed: bool = False) -> None:
        """Log the whole run again, step by step"""
        logger.log("Replaying the agent's steps:")
        if detailed:
            logger.log_markdown(
                title="System prompt", content=self.system_prompt.system_prompt
            )

        for step in self.steps:
            match step:
                case SystemPromptStep() if detailed:
                    logger.log_markdown(title="System prompt", content=step.system_prompt)
                case TaskStep():
                    logger.log_task(step.task)
                case ActionStep():
                    logger.log_rule(f"Step {step.step_number}")
                    if detailed:
                        logger.log_messages(step.model_input_messages)
                    logger.log_markdown(
                        title="Agent output:", content=step.model_output or ""
                    )
                    if step.error is not None:
                        logger.log_markdown(title="Error:", content=step.error.message)
                case PlanningStep():
                    logger.log_rule("Planning step")
                    if detailed:
                        logger.log_messages(step.model_input_messages)
                    logger.log_markdown(
                        title="Agent output:", content=f"{step.facts}\n{step.plan}"
                    )
