# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from abc import ABC, abstractmethod
from typing import Any, TYPE_CHECKING

from .udf_types import JsonSchema, UdfInterface
from .common import Observation

if TYPE_CHECKING:
    from ..memory import AgentMemory
    from ..sandbox import Sandbox
    from ..llm.base import ChatModelInterface
    from ..agents.agent_logger import AgentLogger


class AgentInterface(ABC):
    """Anything that can be handed a task and produce an answer.

    Both top-level agents and managed sub-agents satisfy this interface, which
    is what lets agents own other agents.
    """

    name: str
    description: str
    output_schema: JsonSchema | None = None

    @abstractmethod
    async def call(self, task: str, **kwargs: Any) -> Any:
        pass


class CodeAgentInterface(AgentInterface):
    """The agent state UDFs are allowed to see"""

    task: str
    udfs: list[UdfInterface]
    managed_agents: list[AgentInterface]
    memory: "AgentMemory"
    sandbox: "Sandbox"
    model: "ChatModelInterface"
    logger: "AgentLogger"
    step_number: int
    max_steps: int

    @abstractmethod
    def update_should_run_planning(self, override: bool | None = None) -> None:
        pass

    @abstractmethod
    async def call_udf(self, udf_name: str, input: Any) -> Any:
        pass

    @abstractmethod
    async def run(
        self, task: str, observations: list[Observation] | None = None
    ) -> Any:
        pass
