# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from typing import Any

from ..types.common import LogLevel
from ..types.llm_types import ChatMessage


class AgentLogger:
    """Human-readable trace of an agent run, written through ``logging``.

    Messages below ``level`` are dropped; the rest go to the
    ``agent_script.agent`` logger, so handlers and formatting stay under the
    host application's control.
    """

    def __init__(
        self,
        level: LogLevel = LogLevel.INFO,
        logger: logging.Logger | None = None,
    ):
        self.level = level
        self.logger = logger or logging.getLogger("agent_script.agent")

    def _emit(self, text: str, level: LogLevel = LogLevel.INFO) -> None:
        if level < self.level:
            return
        self.logger.log(level.logging_level, text)

    def log(self, *args: Any, level: LogLevel = LogLevel.INFO) -> None:
        self._emit(" ".join(str(arg) for arg in args), level)

    def log_markdown(
        self, content: str, title: str | None = None, level: LogLevel = LogLevel.INFO
    ) -> None:
        if title:
            self._emit(f"\n{title}\n{content}\n", level)
        else:
            self._emit(f"\n{content}\n", level)

    def log_rule(self, title: str, level: LogLevel = LogLevel.INFO) -> None:
        self._emit(f"\n{'-' * 20}\n{title}\n{'-' * 20}\n", level)

    def log_task(self, content: str) -> None:
        self._emit(f"\nNew task: {content}\n")

    def log_messages(self, messages: list[ChatMessage] | None) -> None:
        if not messages:
            return
        rendered = "\n".join(
            message.model_dump_json(indent=2, exclude_none=True) for message in messages
        )
        self._emit(f"\nMessages:\n{rendered}\n")
