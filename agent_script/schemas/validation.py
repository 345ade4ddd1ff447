# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Structural validation of UDF inputs against JSON schemas, backed by pydantic.

A schema is compiled once into a python type (dynamic pydantic models for
objects, strict scalars for primitives) and checked with a TypeAdapter.
"""
import re

from typing import Any, Literal, Optional, Union
from pydantic import (
    ConfigDict,
    Field,
    StrictBool,
    StrictFloat,
    StrictInt,
    StrictStr,
    TypeAdapter,
    ValidationError,
    create_model,
)

from ..errors import AgentError, AgentErrorCode
from ..types.udf_types import JsonSchema

_PRIMITIVES: dict[str, Any] = {
    "string": StrictStr,
    "integer": StrictInt,
    "number": Union[StrictInt, StrictFloat],
    "boolean": StrictBool,
    "null": type(None),
}


def _field_name(key: str, index: int) -> str:
    # Property names may not be valid identifiers; the alias keeps the key
    cleaned = re.sub(r"\W", "_", key)
    return f"f{index}_{cleaned}"


def _object_type(schema: JsonSchema, model_name: str) -> Any:
    properties: dict[str, JsonSchema] = schema.get("properties", {})
    additional = schema.get("additionalProperties", True)

    if not properties:
        if additional is False:
            return create_model(
                model_name, __config__=ConfigDict(extra="forbid")
            )
        if isinstance(additional, dict):
            return dict[str, schema_to_python_type(additional, f"{model_name}Value")]
        return dict[str, Any]

    required = set(schema.get("required", []))
    fields: dict[str, Any] = {}
    for index, (key, value) in enumerate(properties.items()):
        field_type = schema_to_python_type(value, f"{model_name}_{index}")
        if key in required:
            fields[_field_name(key, index)] = (field_type, Field(..., alias=key))
        else:
            fields[_field_name(key, index)] = (
                field_type,
                Field(default=None, alias=key),
            )

    extra = "forbid" if additional is False else "allow"
    return create_model(
        model_name,
        __config__=ConfigDict(extra=extra, populate_by_name=False),
        **fields,
    )


def schema_to_python_type(schema: JsonSchema, model_name: str = "Input") -> Any:
    """Compile a JSON schema node into a type pydantic can validate against."""
    if "const" in schema:
        return Literal[schema["const"]]  # type: ignore[valid-type]
    if schema.get("enum"):
        return Literal[tuple(schema["enum"])]  # type: ignore[valid-type]

    options = schema.get("anyOf") or schema.get("oneOf")
    if options:
        arms = tuple(
            schema_to_python_type(option, f"{model_name}Option{i}")
            for i, option in enumerate(options)
        )
        return arms[0] if len(arms) == 1 else Union[arms]  # type: ignore[valid-type]

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        arms = tuple(
            schema_to_python_type({**schema, "type": t}, f"{model_name}{t.title()}")
            for t in schema_type
        )
        return arms[0] if len(arms) == 1 else Union[arms]  # type: ignore[valid-type]

    if schema_type == "object":
        return _object_type(schema, model_name)
    if schema_type == "array":
        items = schema.get("items")
        if not items:
            return list[Any]
        return list[schema_to_python_type(items, f"{model_name}Item")]  # type: ignore[misc]
    if schema_type in _PRIMITIVES:
        return _PRIMITIVES[schema_type]
    if schema_type is None:
        return Any

    raise AgentError(
        f"Unsupported schema type: {schema_type}",
        AgentErrorCode.INVALID_UDF_INPUT_SCHEMA,
    )


class SchemaValidator:
    """A compiled validator for one JSON schema"""

    def __init__(self, schema: JsonSchema):
        self.schema = schema
        try:
            self._adapter = TypeAdapter(schema_to_python_type(schema))
        except AgentError:
            raise
        except Exception as e:
            raise AgentError(
                f"Invalid schema: {e}", AgentErrorCode.INVALID_UDF_INPUT_SCHEMA
            ) from e

    def validate(self, value: Any) -> None:
        """Raise a VALIDATION_ERROR if ``value`` does not match the schema"""
        try:
            self._adapter.validate_python(value)
        except ValidationError as e:
            raise AgentError(
                f"Input does not match the expected schema: {e}",
                AgentErrorCode.VALIDATION_ERROR,
            ) from e

    def is_valid(self, value: Any) -> bool:
        try:
            self._adapter.validate_python(value)
        except ValidationError:
            return False
        return True


def validate_value(schema: JsonSchema, value: Any) -> None:
    SchemaValidator(schema).validate(value)
