# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Renders JSON schemas as the TypeScript-like pseudo types the model reads in
UDF signatures.

The output is embedded verbatim into prompts, so the exact formatting here is
what the few-shot examples are written against.
"""
import json

from typing import Any, Callable

from ..types.udf_types import JsonSchema

PRIMITIVE_TYPE_STRINGS = {
    "string": "string",
    "number": "number",
    "integer": "number",
    "boolean": "boolean",
    "null": "null",
}


def _description_comment(schema: JsonSchema) -> str:
    description = schema.get("description")
    return f" // {description}" if description else ""


def _is_null_schema(schema: JsonSchema) -> bool:
    return schema.get("type") == "null"


def _literal_values(schema: JsonSchema) -> list[Any] | None:
    """The values of a union made only of literals, if it is one"""
    options = schema.get("anyOf") or schema.get("oneOf")
    if options and all("const" in option for option in options):
        return [option["const"] for option in options]
    return None


def _format_literal(value: Any) -> str:
    # Literal unions are rendered with their raw values: // a | b | c;
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def schema_to_type_string(schema: JsonSchema) -> str:
    """Render a schema node, and its children, as a pseudo type string."""
    if "const" in schema:
        return json.dumps(schema["const"])

    description = _description_comment(schema)
    schema_type = schema.get("type")

    if schema_type == "object" and "properties" in schema:
        required = set(schema.get("required", []))
        lines = []
        for key, value in schema["properties"].items():
            optional = "" if key in required else "?"
            rendered = schema_to_type_string(value).replace("\n", "\n  ")
            lines.append(f"{key}{optional}: {rendered}")
        if not lines:
            return f"{{}}{description}"
        return "{\n  " + "\n  ".join(lines) + "\n}" + description

    if schema_type == "array":
        items = schema.get("items") or {}
        return f"Array<{schema_to_type_string(items)}>{description}"

    literals = _literal_values(schema)
    if literals is not None:
        return f"// {' | '.join(_format_literal(v) for v in literals)};{description}"

    options = schema.get("anyOf") or schema.get("oneOf")
    if options:
        non_null = [option for option in options if not _is_null_schema(option)]
        if len(non_null) == 1 and len(options) == 2:
            # Optional[X]: show X, carrying the outer description
            inner = dict(non_null[0])
            if schema.get("description"):
                inner["description"] = schema["description"]
            return schema_to_type_string(inner)
        rendered = " | ".join(schema_to_type_string(o).rstrip(";") for o in options)
        return f"{rendered};{description}"

    if "enum" in schema:
        values = " | ".join(_format_literal(v) for v in schema["enum"])
        return f"// {values};{description}"

    if isinstance(schema_type, list):
        rendered = " | ".join(PRIMITIVE_TYPE_STRINGS.get(t, "unknown") for t in schema_type)
        return f"{rendered};{description}"

    if schema_type in PRIMITIVE_TYPE_STRINGS:
        return f"{PRIMITIVE_TYPE_STRINGS[schema_type]};{description}"

    if schema_type == "object":
        # Objects without declared properties accept any keys
        return f"Record<string, any>;{description}"

    if not set(schema) - {"description", "default", "title", "examples"}:
        return f"any;{description}"

    return f"unknown;{description}"


def walk_schema(
    schema: JsonSchema,
    callback: Callable[[JsonSchema, str], None],
    schema_path: str = "",
) -> None:
    """Call ``callback(node, path)`` on every primitive leaf of the schema.

    Object properties extend the path with ``.key``; array items keep the path
    of their array. Unions are not descended into.
    """
    schema_type = schema.get("type")
    if schema_type == "object":
        for key, value in schema.get("properties", {}).items():
            walk_schema(value, callback, f"{schema_path}.{key}")
    elif schema_type == "array":
        if schema.get("items"):
            walk_schema(schema["items"], callback, schema_path)
    elif schema_type in PRIMITIVE_TYPE_STRINGS:
        callback(schema, schema_path)
