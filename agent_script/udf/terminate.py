# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import Any
from pydantic import BaseModel, Field

from .base_udf import BaseStoppingUdf
from ..schemas import to_json_schema
from ..types.agent_types import CodeAgentInterface


class TerminateInput(BaseModel):
    reason: str = Field(
        "The task is complete", description="The reason for terminating the task"
    )


class TerminateUdf(BaseStoppingUdf):
    name = "terminate"
    description = "Terminate the agent."
    input_schema = to_json_schema(TerminateInput)
    output_schema = to_json_schema(str)

    def __init__(self):
        self.reason: str | None = None

    async def call(self, input: Any, agent: CodeAgentInterface) -> str:
        self.reason = input.get("reason", "The task is complete")
        return self.reason
