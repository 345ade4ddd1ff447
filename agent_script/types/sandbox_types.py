# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import Any
from dataclasses import dataclass, field


@dataclass
class CallableResult:
    """One host callable invocation made by a script."""

    return_value: Any
    return_value_summary: str | None
    callable: str


@dataclass
class ScriptResult:
    calls: list[CallableResult] = field(default_factory=list)
    return_value: Any = None
    output: str = ""


@dataclass
class ExecutionResult:
    """Outcome of one script execution, from the agent's point of view."""

    result: Any
    output: str
    is_final_answer: bool
