# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from abc import ABC, abstractmethod
from typing import Any, ClassVar, TYPE_CHECKING

if TYPE_CHECKING:
    from .agent_types import CodeAgentInterface

JsonSchema = dict[str, Any]


class UdfInterface(ABC):
    """
    The capability set of a user defined function.

    Anything exposing these attributes and methods can be given to an agent;
    subclassing is not required. A UDF whose ``stopping`` attribute is true
    ends the run when the model calls it.
    """

    name: str
    description: str
    input_schema: JsonSchema
    output_schema: JsonSchema
    stopping: ClassVar[bool] = False

    @abstractmethod
    def get_signature(self) -> str:
        """The call signature shown to the model"""
        pass

    @abstractmethod
    async def call(self, input: Any, agent: "CodeAgentInterface") -> Any:
        pass

    async def on_before_call(self, input: Any, agent: "CodeAgentInterface") -> None:
        pass

    async def on_after_call(
        self, input: Any, output: Any, agent: "CodeAgentInterface"
    ) -> None:
        pass

    async def on_call_error(
        self, input: Any, error: Exception, agent: "CodeAgentInterface"
    ) -> None:
        """Release whatever on_before_call acquired when call fails"""
        pass

    async def get_call_result_summary(self, output: Any) -> str | None:
        return None


def is_stopping_udf(udf: Any) -> bool:
    return getattr(udf, "stopping", False) is True
