# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Tests for rendering schemas as prompt type strings."""
import pytest
from pydantic import BaseModel, Field

from agent_script.schemas import schema_to_type_string, to_json_schema, walk_schema
from agent_script.udf import render_signature


@pytest.mark.parametrize(
    "schema,expected",
    [
        ({"type": "string"}, "string;"),
        ({"type": "integer"}, "number;"),
        ({"type": "number", "description": "A count"}, "number; // A count"),
        ({"type": "boolean"}, "boolean;"),
        ({"type": "null"}, "null;"),
        ({}, "any;"),
        ({"description": "Anything"}, "any; // Anything"),
        ({"const": "fixed"}, '"fixed"'),
        ({"enum": ["a", "b"]}, "// a | b;"),
        ({"anyOf": [{"const": 1}, {"const": True}]}, "// 1 | true;"),
        ({"type": ["string", "null"]}, "string | null;"),
        ({"type": "object"}, "Record<string, any>;"),
        ({"type": "object", "properties": {}}, "{}"),
        ({"type": "array", "items": {"type": "string"}}, "Array<string;>"),
        ({"type": "array"}, "Array<any;>"),
        (
            {"anyOf": [{"type": "string"}, {"type": "null"}], "description": "Maybe"},
            "string; // Maybe",
        ),
        ({"anyOf": [{"type": "string"}, {"type": "number"}]}, "string | number;"),
        ({"not": {"type": "string"}}, "unknown;"),
    ],
    ids=[
        "string",
        "integer",
        "described",
        "boolean",
        "null",
        "empty",
        "description-only",
        "const",
        "enum",
        "literal-union",
        "type-list",
        "open-object",
        "empty-object",
        "array",
        "array-without-items",
        "nullable",
        "union",
        "unsupported",
    ],
)
def test_schema_to_type_string(schema, expected):
    assert schema_to_type_string(schema) == expected


def test_object_rendering():
    schema = {
        "type": "object",
        "description": "A search query",
        "properties": {
            "query": {"type": "string", "description": "The query"},
            "limit": {"type": "number"},
        },
        "required": ["query"],
    }

    assert schema_to_type_string(schema) == (
        "{\n  query: string; // The query\n  limit?: number;\n} // A search query"
    )


def test_nested_objects_are_indented():
    schema = {
        "type": "object",
        "properties": {
            "outer": {
                "type": "object",
                "properties": {"inner": {"type": "boolean"}},
                "required": ["inner"],
            }
        },
        "required": ["outer"],
    }

    assert schema_to_type_string(schema) == (
        "{\n  outer: {\n    inner: boolean;\n  }\n}"
    )


def test_pydantic_model_rendering():
    class Query(BaseModel):
        text: str = Field(..., description="Search text")
        tags: list[str] = Field(default_factory=list, description="Tags")

    assert schema_to_type_string(to_json_schema(Query)) == (
        "{\n  text: string; // Search text\n  tags?: Array<string;> // Tags\n}"
    )


def test_render_signature():
    signature = render_signature(
        "webSearch",
        "Search the web",
        {"type": "object", "properties": {"q": {"type": "string"}}, "required": ["q"]},
        {"type": "string"},
    )

    assert signature == (
        "// Search the web\n"
        "async function webSearch(params: {\n  q: string;\n}): Promise<string;>"
    )


def test_walk_schema_visits_primitive_leaves():
    schema = {
        "type": "object",
        "properties": {
            "name": {"type": "string"},
            "tags": {"type": "array", "items": {"type": "string"}},
            "nested": {"type": "object", "properties": {"flag": {"type": "boolean"}}},
            "choice": {"anyOf": [{"type": "string"}, {"type": "null"}]},
        },
    }
    visited = []

    walk_schema(schema, lambda node, path: visited.append((path, node["type"])))

    assert visited == [
        (".name", "string"),
        (".tags", "string"),
        (".nested.flag", "boolean"),
    ]
