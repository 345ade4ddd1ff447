# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import Any

from .base_udf import BaseUdf
from ..types.agent_types import CodeAgentInterface


class ThinkUdf(BaseUdf):
    """Lets the model ask for a planning step before its next action"""

    name = "think"
    description = (
        "Reflect on the steps taken so far and update the plan if improvements "
        "/ changes should be made"
    )
    input_schema: dict = {}
    output_schema: dict = {}

    async def call(self, input: Any, agent: CodeAgentInterface) -> str:
        agent.update_should_run_planning(True)
        return "Thinking..."
