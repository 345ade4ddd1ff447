# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import Any, Literal
from pydantic import BaseModel, Field

Role = Literal["system", "user", "assistant"]


class ChatMessage(BaseModel):
    """A role-tagged message, as stored in agent memory."""

    role: Role
    content: str
    images: list[str] | None = None
    raw: Any = Field(default=None, exclude=True)

    def __str__(self) -> str:
        return f"Message from role={self.role}\n{self.content}"


class TokenUsage(BaseModel):
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0

    def __add__(self, other: "TokenUsage") -> "TokenUsage":
        return TokenUsage(
            prompt_tokens=self.prompt_tokens + other.prompt_tokens,
            completion_tokens=self.completion_tokens + other.completion_tokens,
            total_tokens=self.total_tokens + other.total_tokens,
        )

    def __str__(self) -> str:
        return (
            f"prompt: {self.prompt_tokens}, completion: {self.completion_tokens}, "
            f"total: {self.total_tokens}"
        )


class ChatResponseMetadata(BaseModel):
    usage: TokenUsage = Field(default_factory=TokenUsage)


class ChatCompletionResult(BaseModel):
    message: ChatMessage
    metadata: ChatResponseMetadata = Field(default_factory=ChatResponseMetadata)
