# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json

from typing import Any
from pydantic import BaseModel, Field

from .base_udf import BaseStoppingUdf
from ..schemas import schema_to_type_string, to_json_schema
from ..sandbox.encoding import ResultEncoder
from ..types.agent_types import CodeAgentInterface


class FinalAnswerInput(BaseModel):
    answer: str = Field(..., description="The final answer to the task")


class FinalAnswerUdf(BaseStoppingUdf):
    """Ends the run with the answer the model passes in.

    A custom ``answer_schema`` (JSON schema or pydantic type) constrains the
    shape of the answer.
    """

    name = "finalAnswer"

    def __init__(self, answer_schema: Any = None, description: str | None = None):
        self.input_schema = to_json_schema(answer_schema or FinalAnswerInput)
        self.output_schema = self.input_schema
        self.description = description or (
            "Provide the final answer in the following format: "
            f"{schema_to_type_string(self.output_schema)}"
        )
        self.output: Any = None

    async def call(self, input: Any, agent: CodeAgentInterface) -> Any:
        self.output = input
        # The caller gets a detached copy
        return json.loads(json.dumps(input, cls=ResultEncoder))
