# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
"""Chat model client for OpenAI-compatible endpoints."""

import logging

from typing import Any
from openai import AsyncOpenAI

from .base import ChatModelInterface
from .metering import llm_call_counter, record_usage
from ..config import config
from ..errors import ChatCompletionError
from ..types.llm_types import (
    ChatCompletionResult,
    ChatMessage,
    ChatResponseMetadata,
    TokenUsage,
)

logger = logging.getLogger(__name__)

PROVIDER_BASE_URLS: dict[str, str | None] = {
    "openai": None,
    "anthropic": "https://api.anthropic.com/v1/",
    "deepseek": "https://api.deepseek.com",
    "ollama": "http://localhost:11434/v1",
}

# Providers whose OpenAI-compatible endpoint ignores response_format
PROVIDERS_WITHOUT_STRUCTURED_OUTPUT = {"anthropic"}

DATA_EXTRACTION_TOOL_NAME = "extractDataEntities"


class ChatModel(ChatModelInterface):
    """Chat completions through the ``openai`` async client.

    Any provider exposing an OpenAI-compatible endpoint works; the client is
    only created on first use so constructing a model never needs credentials.
    """

    def __init__(
        self,
        provider: str | None = None,
        model: str | None = None,
        api_key: str | None = None,
        base_url: str | None = None,
        options: dict[str, Any] | None = None,
    ):
        self.provider = provider or config.provider
        if self.provider not in PROVIDER_BASE_URLS and base_url is None:
            raise ValueError(
                f"Unknown provider {self.provider!r}; pass base_url for custom endpoints"
            )
        self.model = model or config.model
        self.api_key = api_key or config.api_key
        self.base_url = base_url or config.base_url or PROVIDER_BASE_URLS.get(self.provider)
        self.options = options or {}
        self._client: AsyncOpenAI | None = None

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(api_key=self.api_key, base_url=self.base_url)
        return self._client

    def _create_token_usage(self, response: Any) -> TokenUsage:
        usage = getattr(response, "usage", None)
        if not usage:
            logger.warning(f"Missing usage information from {self.provider} response")
            return TokenUsage()
        return TokenUsage(
            prompt_tokens=getattr(usage, "prompt_tokens", 0) or 0,
            completion_tokens=getattr(usage, "completion_tokens", 0) or 0,
            total_tokens=getattr(usage, "total_tokens", 0) or 0,
        )

    async def _create(self, request: dict[str, Any]) -> tuple[Any, ChatResponseMetadata]:
        llm_call_counter.count_new_call()
        response = await self.client.chat.completions.create(**request)
        if not response.choices or response.choices[0].message is None:
            raise ChatCompletionError("No message returned from chat completion")

        usage = self._create_token_usage(response)
        record_usage(self.model, usage)
        return response.choices[0].message, ChatResponseMetadata(usage=usage)

    async def chat_completion(
        self,
        messages: list[dict[str, Any]],
        stop: list[str] | None = None,
        **params: Any,
    ) -> ChatCompletionResult:
        request = {**self.options, **params, "model": self.model, "messages": messages}
        if stop:
            request["stop"] = stop

        message, metadata = await self._create(request)
        return ChatCompletionResult(
            message=ChatMessage(
                role="assistant",
                content=message.content or "",
                raw=message,
            ),
            metadata=metadata,
        )

    async def chat_completion_with_schema(
        self,
        messages: list[dict[str, Any]],
        response_format: dict[str, Any],
        **params: Any,
    ) -> ChatCompletionResult:
        format_type = response_format.get("type")
        if format_type not in ("json_schema", "json_object"):
            raise ChatCompletionError(
                f"Unsupported response_format type: {format_type!r}"
            )

        request = {**self.options, **params, "model": self.model, "messages": messages}

        if self.provider not in PROVIDERS_WITHOUT_STRUCTURED_OUTPUT:
            request["response_format"] = response_format
            message, metadata = await self._create(request)
            return ChatCompletionResult(
                message=ChatMessage(
                    role="assistant", content=message.content or "", raw=message
                ),
                metadata=metadata,
            )

        # No native structured output: force a tool call whose arguments are
        # the JSON document we want.
        json_schema = response_format.get("json_schema", {})
        request["tools"] = [
            {
                "type": "function",
                "function": {
                    "name": DATA_EXTRACTION_TOOL_NAME,
                    "description": json_schema.get(
                        "description", "Extract data entities from the input"
                    ),
                    "parameters": json_schema.get("schema", {"type": "object"}),
                },
            }
        ]
        request["tool_choice"] = {
            "type": "function",
            "function": {"name": DATA_EXTRACTION_TOOL_NAME},
        }

        message, metadata = await self._create(request)
        tool_calls = getattr(message, "tool_calls", None) or []
        if not tool_calls:
            raise ChatCompletionError("The model did not return the extraction tool call")

        return ChatCompletionResult(
            message=ChatMessage(
                role="assistant",
                content=tool_calls[0].function.arguments,
                raw=message,
            ),
            metadata=metadata,
        )

