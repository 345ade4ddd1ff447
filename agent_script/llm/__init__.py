# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .base import (
    ChatModelInterface,
    to_chat_completion_message,
    to_chat_completion_messages,
)
from .chat_model import ChatModel
from .metering import token_meter, get_total_usage, llm_call_counter

__all__ = [
    "ChatModel",
    "ChatModelInterface",
    "to_chat_completion_message",
    "to_chat_completion_messages",
    "token_meter",
    "get_total_usage",
    "llm_call_counter",
]
