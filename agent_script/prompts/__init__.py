# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .builder import (
    CodeAgentRunExample,
    CodeAgentRunExampleStep,
    build_code_agent_rules_prompt,
    build_example_prompt,
    build_examples_section_prompt,
    render_template,
)
from .code_agent_prompt import (
    CodeAgentPrompt,
    FinalAnswerPrompt,
    ManagedAgentPrompt,
    PlanningPrompt,
    default_code_agent_prompt,
)

__all__ = [
    "CodeAgentRunExample",
    "CodeAgentRunExampleStep",
    "build_code_agent_rules_prompt",
    "build_example_prompt",
    "build_examples_section_prompt",
    "render_template",
    "CodeAgentPrompt",
    "FinalAnswerPrompt",
    "ManagedAgentPrompt",
    "PlanningPrompt",
    "default_code_agent_prompt",
]
