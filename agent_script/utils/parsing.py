# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Parsing utilities for model output.
"""
import ast
import re

CODE_BLOCK_PATTERN = re.compile(
    r"```(?:(?:python3|python|py)(?=\s))?[ \t]*\n?([\s\S]*?)\n?```", re.IGNORECASE
)


def extract_before_last(text: str, pattern: str, keep_pattern: bool = False) -> str:
    last_pos = text.rfind(pattern)
    offset = len(pattern) if keep_pattern else 0
    return text[:last_pos + offset] if last_pos != -1 else ""


def strip_stop_token(text: str, token: str) -> str:
    """Drop a trailing stop token some providers echo back"""
    if token in text:
        return extract_before_last(text, token).rstrip()
    return text


def parse_code_output(content: str) -> str:
    """Return the first fenced code block, or the whole text when there is none."""
    match = CODE_BLOCK_PATTERN.search(content)
    if match:
        return match.group(1).strip()
    return content.strip()


def find_imported_modules(code: str) -> set[str] | None:
    """Top-level module names imported anywhere in ``code``.

    Returns None when the code does not parse; reporting the syntax error is
    left to whoever executes it.
    """
    try:
        tree = ast.parse(code)
    except SyntaxError:
        return None

    modules: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            modules.update(alias.name.split(".")[0] for alias in node.names)
        elif isinstance(node, ast.ImportFrom):
            if node.level == 0 and node.module:
                modules.add(node.module.split(".")[0])
        elif (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Name)
            and node.func.id == "__import__"
            and node.args
            and isinstance(node.args[0], ast.Constant)
            and isinstance(node.args[0].value, str)
        ):
            modules.add(node.args[0].value.split(".")[0])
    return modules
