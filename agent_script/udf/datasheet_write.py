# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import Any

from .base_udf import BaseUdf
from ..schemas import (
    default_instance_from_schema,
    make_object_fields_nullable,
    schema_from_instance,
)
from ..types.agent_types import CodeAgentInterface
from ..utils.formatting import stable_stringify


class DatasheetWriteUdf(BaseUdf):
    """Collects structured entries shaped like an example object.

    The entry schema is inferred from the example, with every field nullable
    so partially known entries can still be written. Duplicate entries are
    ignored.
    """

    name = "datasheetWrite"
    output_schema = {
        "type": "object",
        "properties": {
            "successCount": {"type": "number"},
            "totalSuccessCount": {"type": "number"},
        },
        "required": ["successCount", "totalSuccessCount"],
    }

    def __init__(self, example_object: dict[str, Any]):
        self.entry_schema = make_object_fields_nullable(schema_from_instance(example_object))
        self.input_schema = {
            "type": "array",
            "items": self.entry_schema,
            "default": [default_instance_from_schema(schema_from_instance(example_object))],
        }
        self.description = "Write data entries to the datasheet"
        self._entries: dict[str, Any] = {}

    async def call(self, input: list[Any], agent: CodeAgentInterface) -> dict[str, int]:
        success_count = 0
        for entry in input:
            key = stable_stringify(entry)
            if key in self._entries:
                continue
            self._entries[key] = entry
            success_count += 1

        return {
            "successCount": success_count,
            "totalSuccessCount": len(self._entries),
        }

    def get_entries(self) -> list[Any]:
        return list(self._entries.values())
