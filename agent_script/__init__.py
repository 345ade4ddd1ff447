# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
A code agent runtime: the model writes Python scripts calling user defined
functions (UDFs), which run in a persistent sandbox until a stopping UDF is
called.
"""
from .agents import AgentLogger, CodeAgent
from .config import AgentScriptConfig, config, load_config
from .errors import AgentError, AgentErrorCode, ChatCompletionError
from .llm import ChatModel, ChatModelInterface
from .memory import AgentMemory
from .sandbox import Sandbox
from .udf import (
    BaseStoppingUdf,
    BaseUdf,
    FinalAnswerUdf,
    TerminateUdf,
    ThinkUdf,
)

__all__ = [
    "AgentLogger",
    "CodeAgent",
    "AgentScriptConfig",
    "config",
    "load_config",
    "AgentError",
    "AgentErrorCode",
    "ChatCompletionError",
    "ChatModel",
    "ChatModelInterface",
    "AgentMemory",
    "Sandbox",
    "BaseStoppingUdf",
    "BaseUdf",
    "FinalAnswerUdf",
    "TerminateUdf",
    "ThinkUdf",
]
