# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Base interface and shared functionality for chat model interactions."""

from abc import ABC, abstractmethod
from typing import Any

from ..types.llm_types import ChatCompletionResult, ChatMessage


class ChatModelInterface(ABC):
    """What the agent loop needs from a chat completion provider"""

    @abstractmethod
    async def chat_completion(
        self,
        messages: list[dict[str, Any]],
        stop: list[str] | None = None,
        **params: Any,
    ) -> ChatCompletionResult:
        pass

    @abstractmethod
    async def chat_completion_with_schema(
        self,
        messages: list[dict[str, Any]],
        response_format: dict[str, Any],
        **params: Any,
    ) -> ChatCompletionResult:
        """Like chat_completion, but the content is JSON matching response_format"""
        pass


def to_chat_completion_message(message: ChatMessage) -> dict[str, Any]:
    """Convert a memory message to an OpenAI chat completion message param"""
    if message.images and message.role == "user":
        content: list[dict[str, Any]] = [{"type": "text", "text": message.content}]
        content.extend(
            {"type": "image_url", "image_url": {"url": image}} for image in message.images
        )
        return {"role": message.role, "content": content}
    return {"role": message.role, "content": message.content}


def to_chat_completion_messages(messages: list[ChatMessage]) -> list[dict[str, Any]]:
    return [to_chat_completion_message(m) for m in messages]
