# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json
import logging

from typing import Any, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field
from json_repair import repair_json

from .base_udf import BaseUdf
from ..llm.base import ChatModelInterface
from ..llm.chat_model import ChatModel
from ..schemas import schema_from_type_name, schema_to_type_string, to_json_schema
from ..types.agent_types import CodeAgentInterface

logger = logging.getLogger(__name__)

INDEX_PROPERTY_NAMES = {"i", "index", "id", "idx"}


class ItemProperty(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(..., description="Property name")
    description: str = Field(..., description="Property description")
    dataType: Literal["string", "number", "boolean", "null"]


class AnalyzeListInput(BaseModel):
    inputList: list[Any] = Field(..., description="A list of items to analyze")
    itemProperties: list[ItemProperty] = Field(
        ...,
        description="The schema for the properties to extract from the input. Maximum of 5 properties allowed.",
    )
    instructions: Optional[str] = Field(
        None, description="Additional instructions on the analysis"
    )


def build_data_extraction_messages(
    items: list[Any],
    item_properties: list[dict[str, Any]],
    data_schema: dict[str, Any],
    instructions: str | None = None,
) -> list[dict[str, str]]:
    system = (
        "You are a helpful assistant. You are given a list of text items. Your goal is to "
        "extract properties about each item as defined by the following schema: "
        f"{json.dumps(item_properties)}.\n"
        "Ground rules:\n"
        f"- The output data list must have the same length as the input list: ({len(items)})\n"
        "- The maximum length for any property value is 100 characters\n"
        "- Your output must be a valid JSON object that matches the type "
        f"{{ data: {schema_to_type_string(data_schema)} }}."
    )
    if instructions:
        system += f"\nAdditional instructions: {instructions}"

    return [
        {"role": "system", "content": system},
        {
            "role": "user",
            "content": "Analyze the following list of items and return the properties as defined by the schema",
        },
        {
            "role": "user",
            "content": "\n".join(
                f"- Item {i}: {json.dumps(item, default=str)}" for i, item in enumerate(items)
            ),
        },
    ]


class AnalyzeListUdf(BaseUdf):
    """Extracts typed properties from every item of a list with a chat model.

    The output schema is rebuilt on each call from the requested properties.
    """

    name = "analyzeList"
    description = """Perform an analytical task on a list of items and extract properties on each item. Follow these rules:
- properties should be transformative, do not create properties for information already present in a plain way in the input list
- the input list should contain as much relevant information from the original data as possible
- properties should be a single value, not a list
- only include properties whose values are shorter than 100 characters"""
    input_schema = to_json_schema(AnalyzeListInput)

    def __init__(self, model: ChatModelInterface | None = None):
        self.model = model or ChatModel()
        self.output_schema = {
            "type": "array",
            "items": {
                "type": "object",
                "description": "An object with the properties defined in itemProperties",
            },
        }

    async def call(self, input: dict[str, Any], agent: CodeAgentInterface) -> list[dict[str, Any]]:
        item_properties = list(input["itemProperties"])
        if not any(p["name"] in INDEX_PROPERTY_NAMES for p in item_properties):
            item_properties.append(
                {
                    "name": "index",
                    "dataType": "number",
                    "description": "The item number or index as indicated in the input list",
                }
            )

        self.output_schema = {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    p["name"]: schema_from_type_name(p["dataType"]) for p in item_properties
                },
                "required": [p["name"] for p in item_properties],
                "additionalProperties": False,
            },
        }
        response_schema = {
            "type": "object",
            "properties": {"data": self.output_schema},
            "required": ["data"],
            "additionalProperties": False,
        }

        response = await self.model.chat_completion_with_schema(
            messages=build_data_extraction_messages(
                input["inputList"],
                item_properties,
                self.output_schema,
                input.get("instructions"),
            ),
            response_format={
                "type": "json_schema",
                "json_schema": {
                    "name": "analyze_list_response",
                    "schema": response_schema,
                    "strict": True,
                },
            },
        )
        return json.loads(repair_json(response.message.content))["data"]
