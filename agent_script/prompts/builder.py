# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Assembles prompt templates from their parts, and renders them with jinja2.
"""
from typing import Any
from dataclasses import dataclass, field
from jinja2 import Environment, StrictUndefined

from .parts import CODE_AGENT_RULES

_environment = Environment(
    undefined=StrictUndefined,
    keep_trailing_newline=True,
    autoescape=False,
)


def render_template(template: str, **variables: Any) -> str:
    return _environment.from_string(template).render(**variables)


@dataclass
class CodeAgentRunExampleStep:
    thought: str
    code: str
    result: str


@dataclass
class CodeAgentRunExample:
    task: str
    steps: list[CodeAgentRunExampleStep] = field(default_factory=list)


def build_example_prompt(example: CodeAgentRunExample) -> str:
    steps = []
    for index, step in enumerate(example.steps):
        steps.append(
            f"""
## Step {index + 1}:
-- Your code block start --
```py
# Thought: {step.thought}

{step.code}
```
-- Your code block end --

-- UDF call result --
{step.result}"""
        )
    return f'Task: "{example.task}"\n' + "\n".join(steps)


def build_examples_section_prompt(examples: list[CodeAgentRunExample]) -> str:
    sections = "\n\n".join(
        f"# Example {index + 1}\n\n{build_example_prompt(example)}"
        for index, example in enumerate(examples)
    )
    return f"Here are a few examples using notional UDFs:\n\n{sections}\n"


def build_code_agent_rules_prompt(rules: list[str] = CODE_AGENT_RULES) -> str:
    numbered = "".join(f"{index + 1}. {rule}\n" for index, rule in enumerate(rules))
    return f"Here are the rules you should always follow to solve your task:\n{numbered}"
