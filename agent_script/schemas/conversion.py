# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Conversions between JSON schemas, pydantic types and example instances.
"""
import copy

from typing import Any
from pydantic import BaseModel, TypeAdapter

from ..errors import AgentError, AgentErrorCode
from ..types.udf_types import JsonSchema

_DROPPED_KEYS = {"title"}


def _inline_refs(node: Any, defs: dict[str, Any], resolving: tuple[str, ...]) -> Any:
    if isinstance(node, list):
        return [_inline_refs(item, defs, resolving) for item in node]
    if not isinstance(node, dict):
        return node

    if "$ref" in node:
        ref = node["$ref"]
        name = ref.rsplit("/", 1)[-1]
        if name in resolving:
            raise AgentError(
                f"Recursive schema reference {ref} cannot be used as a UDF schema",
                AgentErrorCode.INVALID_UDF_INPUT_SCHEMA,
            )
        if name not in defs:
            raise AgentError(
                f"Unresolvable schema reference {ref}",
                AgentErrorCode.INVALID_UDF_INPUT_SCHEMA,
            )
        resolved = _inline_refs(defs[name], defs, resolving + (name,))
        # Sibling keywords (e.g. description) win over the referenced schema
        siblings = {k: v for k, v in node.items() if k != "$ref"}
        return {**resolved, **_inline_refs(siblings, defs, resolving)}

    result = {}
    for key, value in node.items():
        if key in ("$defs", "definitions") or key in _DROPPED_KEYS:
            continue
        if key == "properties" and isinstance(value, dict):
            # Property names are data, not keywords: never drop them
            result[key] = {
                prop: _inline_refs(prop_schema, defs, resolving)
                for prop, prop_schema in value.items()
            }
        else:
            result[key] = _inline_refs(value, defs, resolving)

    # Some pydantic versions wrap a described $ref as allOf: [{$ref}]
    all_of = result.get("allOf")
    if isinstance(all_of, list) and len(all_of) == 1 and isinstance(all_of[0], dict):
        result.pop("allOf")
        result = {**all_of[0], **result}
    return result


def to_json_schema(schema: Any) -> JsonSchema:
    """Normalise a schema declaration into a self-contained JSON schema dict.

    Accepts a JSON schema dict, a pydantic model class, or any type that
    ``pydantic.TypeAdapter`` understands (``str``, ``list[int]``, ...).
    ``$ref`` pointers are inlined and ``title`` keys dropped.
    """
    if schema is None:
        return {}
    if isinstance(schema, dict):
        raw = copy.deepcopy(schema)
    elif isinstance(schema, type) and issubclass(schema, BaseModel):
        raw = schema.model_json_schema()
    else:
        try:
            raw = TypeAdapter(schema).json_schema()
        except Exception as e:
            raise AgentError(
                f"Cannot build a JSON schema from {schema!r}: {e}",
                AgentErrorCode.INVALID_UDF_INPUT_SCHEMA,
            ) from e

    defs = {**raw.get("definitions", {}), **raw.get("$defs", {})}
    return _inline_refs(raw, defs, ())


def schema_from_type_name(type_name: str) -> JsonSchema:
    """Map a primitive type name to its schema; unknown names accept anything."""
    if type_name in ("string", "number", "boolean", "null"):
        return {"type": type_name}
    return {}


def _json_type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def schema_from_instance(instance: Any) -> JsonSchema:
    """Infer the schema of a concrete example value.

    Every key of an object becomes a required property and extra keys are
    rejected. Arrays must be non-empty and hold items of a single JSON type.
    """
    type_name = _json_type_name(instance)

    if type_name in ("null", "boolean", "number", "string"):
        return {"type": type_name}

    if type_name == "array":
        if len(instance) == 0:
            raise AgentError(
                "Cannot infer the item type of an empty array",
                AgentErrorCode.VALIDATION_ERROR,
            )
        item_types = {_json_type_name(item) for item in instance}
        if len(item_types) > 1:
            raise AgentError(
                f"Array items must all share one type, found: {', '.join(sorted(item_types))}",
                AgentErrorCode.VALIDATION_ERROR,
            )
        return {"type": "array", "items": schema_from_instance(instance[0])}

    if type_name == "object":
        return {
            "type": "object",
            "properties": {
                str(key): schema_from_instance(value) for key, value in instance.items()
            },
            "required": [str(key) for key in instance],
            "additionalProperties": False,
        }

    raise AgentError(
        f"Unsupported instance field type: {type_name}",
        AgentErrorCode.VALIDATION_ERROR,
    )


def default_instance_from_schema(schema: JsonSchema) -> Any:
    """Build the smallest representative value for a schema."""
    if "const" in schema:
        return copy.deepcopy(schema["const"])
    if "default" in schema:
        return copy.deepcopy(schema["default"])

    options = schema.get("anyOf") or schema.get("oneOf")
    if options:
        return default_instance_from_schema(options[0])
    if schema.get("enum"):
        return schema["enum"][0]

    schema_type = schema.get("type")
    if isinstance(schema_type, list):
        schema_type = schema_type[0] if schema_type else None

    if schema_type == "object":
        return {
            key: default_instance_from_schema(value)
            for key, value in schema.get("properties", {}).items()
        }
    if schema_type == "array":
        items = schema.get("items")
        return [default_instance_from_schema(items)] if items else []
    if schema_type == "string":
        return ""
    if schema_type in ("number", "integer"):
        return 0
    if schema_type == "boolean":
        return False
    return None


def make_object_fields_nullable(schema: JsonSchema) -> JsonSchema:
    """Let every property of an object schema also accept null"""
    if schema.get("type") != "object":
        return copy.deepcopy(schema)

    nullable = copy.deepcopy(schema)
    nullable["properties"] = {
        key: {"anyOf": [copy.deepcopy(value), {"type": "null"}]}
        for key, value in schema.get("properties", {}).items()
    }
    nullable["additionalProperties"] = False
    return nullable
