# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import Any

from .base_udf import BaseUdf
from ..sandbox.encoding import dumps_result
from ..types.agent_types import CodeAgentInterface
from ..utils.formatting import format_bytes


class NotebookWriteUdf(BaseUdf):
    name = "notebookWrite"
    description = "Write strings and objects to the notebook"
    input_schema: dict = {}
    output_schema = {
        "type": "object",
        "properties": {
            "success": {"type": "boolean"},
            "contentSize": {"type": "string"},
        },
    }

    def __init__(self):
        self.content = b""

    async def call(self, input: Any, agent: CodeAgentInterface) -> dict[str, Any]:
        if isinstance(input, (str, int, float, bool)):
            self.content += str(input).encode("utf-8")
        elif input is not None:
            self.content += dumps_result(input, indented=True).encode("utf-8")

        return {"success": True, "contentSize": format_bytes(len(self.content))}
