# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .agent_logger import AgentLogger
from .code_agent import CodeAgent

__all__ = ["AgentLogger", "CodeAgent"]
