# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .representation import schema_to_type_string, walk_schema
from .validation import SchemaValidator, schema_to_python_type, validate_value
from .conversion import (
    to_json_schema,
    schema_from_instance,
    schema_from_type_name,
    default_instance_from_schema,
    make_object_fields_nullable,
)

__all__ = [
    "schema_to_type_string",
    "walk_schema",
    "SchemaValidator",
    "schema_to_python_type",
    "validate_value",
    "to_json_schema",
    "schema_from_instance",
    "schema_from_type_name",
    "default_instance_from_schema",
    "make_object_fields_nullable",
]
