# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""
Agent Script Configuration

Defaults for model access and agent loop budgets. Every field can be set
through an ``AGENT_SCRIPT_*`` environment variable or a ``.env`` file.
"""
import os

from dataclasses import dataclass
from dotenv import load_dotenv


def _env_int(name: str, default: int | None) -> int | None:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return int(value)


@dataclass
class AgentScriptConfig:
    """Configuration for agent runs"""

    # Model access
    provider: str | None = None
    model: str | None = None
    api_key: str | None = None
    base_url: str | None = None

    # Loop budgets
    max_steps: int | None = None
    planning_interval: int | None = None

    # Context window economy
    call_result_max_length: int | None = None
    max_output_length: int | None = None

    log_level: str | None = None

    def __post_init__(self):
        if self.provider is None:
            self.provider = os.getenv("AGENT_SCRIPT_PROVIDER", "openai")
        if self.model is None:
            self.model = os.getenv("AGENT_SCRIPT_MODEL", "gpt-4o")
        if self.api_key is None:
            self.api_key = os.getenv("AGENT_SCRIPT_API_KEY") or os.getenv("OPENAI_API_KEY")
        if self.base_url is None:
            self.base_url = os.getenv("AGENT_SCRIPT_BASE_URL")
        if self.max_steps is None:
            self.max_steps = _env_int("AGENT_SCRIPT_MAX_STEPS", 10)
        if self.planning_interval is None:
            self.planning_interval = _env_int("AGENT_SCRIPT_PLANNING_INTERVAL", None)
        if self.call_result_max_length is None:
            self.call_result_max_length = _env_int("AGENT_SCRIPT_CALL_RESULT_MAX_LENGTH", 2000)
        if self.max_output_length is None:
            self.max_output_length = _env_int("AGENT_SCRIPT_MAX_OUTPUT_LENGTH", 2000)
        if self.log_level is None:
            self.log_level = os.getenv("AGENT_SCRIPT_LOG_LEVEL", "INFO").upper()


def load_config(env_file: str | None = None) -> AgentScriptConfig:
    """Load a ``.env`` file (if any) and build a fresh configuration from it."""
    load_dotenv(env_file)
    return AgentScriptConfig()


# Global config instance
config = AgentScriptConfig()
