# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import re

from typing import Any
from pydantic import BaseModel, Field

from .base_udf import BaseUdf
from ..errors import AgentError, AgentErrorCode
from ..schemas import to_json_schema
from ..types.agent_types import AgentInterface, CodeAgentInterface


class CallAgentInput(BaseModel):
    task: str = Field(..., description="The task to be performed by the agent")


def call_agent_udf_name(agent_name: str) -> str:
    """'web researcher' -> 'callWebResearcher'"""
    words = [word for word in re.split(r"\s+", agent_name) if word]
    return "call" + "".join(word[0].upper() + word[1:] for word in words)


class CallAgentUdf(BaseUdf):
    """Delegates a task to a managed agent of the calling agent"""

    input_schema = to_json_schema(CallAgentInput)

    def __init__(self, agent: AgentInterface):
        self.agent_name = agent.name
        self.name = call_agent_udf_name(agent.name)
        self.description = (
            f"Call the {agent.name} agent for help. "
            f"Here's a description of the agent: {agent.description}"
        )
        self.output_schema = to_json_schema(agent.output_schema) if agent.output_schema else {}

    async def call(self, input: Any, agent: CodeAgentInterface) -> Any:
        managed_agent = next(
            (a for a in agent.managed_agents if a.name == self.agent_name), None
        )
        if managed_agent is None:
            raise AgentError(
                f"Managed agent {self.agent_name} not found",
                AgentErrorCode.MANAGED_AGENT_ERROR,
            )
        return await managed_agent.call(input["task"])
