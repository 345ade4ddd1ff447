# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
The steps an agent records in memory, and how each kind is shown to the model.

The set of step kinds is closed: rendering dispatches on the variant with a
single ``match`` rather than through per-class methods.
"""
from typing import Any
from dataclasses import dataclass, field

from ..errors import AgentError
from ..types.common import Observation
from ..types.llm_types import ChatMessage
from ..utils.formatting import observation_to_chat_message

RETRY_INSTRUCTION = (
    "\nNow let's retry: take care not to repeat previous errors! "
    "If you have retried several times, try a completely different approach.\n"
)


@dataclass
class SystemPromptStep:
    system_prompt: str


@dataclass
class TaskStep:
    task: str
    observations: list[Observation] = field(default_factory=list)


@dataclass
class PlanningStep:
    model_input_messages: list[ChatMessage]
    facts: str
    plan: str
    model_output_message_facts: ChatMessage
    model_output_message_plan: ChatMessage


@dataclass
class ActionStep:
    step_number: int
    model_input_messages: list[ChatMessage] | None = None
    model_output_message: ChatMessage | None = None
    model_output: str | None = None
    observations: list[Observation] = field(default_factory=list)
    action_output: Any = None
    is_final_answer: bool = False
    error: AgentError | None = None
    start_time: float | None = None
    end_time: float | None = None
    duration: float | None = None


MemoryStep = SystemPromptStep | TaskStep | PlanningStep | ActionStep


def step_to_messages(
    step: MemoryStep,
    summary_mode: bool = False,
    show_model_input_messages: bool = False,
) -> list[ChatMessage]:
    """Linearise one memory step into chat messages.

    In summary mode the system prompt, raw model outputs and plans are left
    out; this is the view used when the model is asked to re-plan.
    """
    match step:
        case SystemPromptStep(system_prompt=system_prompt):
            if summary_mode:
                return []
            return [ChatMessage(role="system", content=system_prompt)]

        case TaskStep(task=task, observations=observations):
            messages = [ChatMessage(role="user", content=f"New task:\n{task}")]
            messages.extend(observation_to_chat_message(o) for o in observations)
            return messages

        case PlanningStep(facts=facts, plan=plan):
            messages = [
                ChatMessage(role="assistant", content=f"[FACTS LIST]:\n{facts.strip()}")
            ]
            if not summary_mode:
                messages.append(
                    ChatMessage(role="assistant", content=f"[PLAN]:\n{plan.strip()}")
                )
            return messages

        case ActionStep():
            messages = []
            if step.model_input_messages and show_model_input_messages:
                messages.append(
                    ChatMessage(
                        role="system",
                        content="\n".join(m.content for m in step.model_input_messages),
                    )
                )
            if step.model_output and not summary_mode:
                messages.append(
                    ChatMessage(role="assistant", content=step.model_output.strip())
                )
            messages.extend(observation_to_chat_message(o) for o in step.observations)
            if step.error is not None:
                messages.append(
                    ChatMessage(
                        role="user",
                        content=f"Error:\n{step.error.message}{RETRY_INSTRUCTION}",
                    )
                )
            return messages

    raise TypeError(f"Unknown memory step: {type(step).__name__}")
