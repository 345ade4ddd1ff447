# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json
import math

from typing import Any

from ..types.common import ImageObservation, Observation, TextObservation
from ..types.llm_types import ChatMessage

MAX_LENGTH_TRUNCATE_CONTENT = 2000

BYTE_UNITS = ["Bytes", "KB", "MB", "GB", "TB", "PB", "EB", "ZB", "YB"]


def truncate_content(content: str, max_length: int = MAX_LENGTH_TRUNCATE_CONTENT) -> str:
    """Keep the head and tail of ``content``, dropping the middle."""
    if len(content) <= max_length:
        return content
    half = max_length // 2
    return (
        content[:half]
        + f"\n\n-- Content has been truncated to be below {max_length} characters --\n\n"
        + content[-half:]
    )


def truncate_content_tail(content: str, max_length: int = MAX_LENGTH_TRUNCATE_CONTENT) -> str:
    if len(content) <= max_length:
        return content
    return content[:max_length] + " ... (truncated)"


def remove_leading_indentation(content: str, exclude_first_non_empty_line: bool = True) -> str:
    """Strip the common indentation of a block.

    The first non-empty line is ignored when measuring by default, since in
    triple-quoted literals it usually follows the opening quotes directly.
    """
    lines = content.split("\n")
    non_empty = [line for line in lines if line.strip()]
    considered = non_empty[1:] if exclude_first_non_empty_line else non_empty
    if not considered:
        return content
    indentation = min(len(line) - len(line.lstrip()) for line in considered)
    prefix = " " * indentation
    return "\n".join(
        line[indentation:] if line.startswith(prefix) else line for line in lines
    )


def format_bytes(num_bytes: int, decimals: int = 2) -> str:
    if num_bytes == 0:
        return "0 Bytes"
    i = min(int(math.floor(math.log(num_bytes, 1024))), len(BYTE_UNITS) - 1)
    value = round(num_bytes / math.pow(1024, i), decimals)
    # 1.50 -> 1.5, 2.00 -> 2
    value_str = f"{value:.{decimals}f}".rstrip("0").rstrip(".")
    return f"{value_str} {BYTE_UNITS[i]}"


def stable_stringify(obj: Any) -> str:
    """JSON with object keys sorted at every depth, for use as a dedup key"""
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), default=str)


def observation_to_chat_message(observation: Observation) -> ChatMessage:
    suffix = ""
    if observation.context:
        suffix += f"\nContext: {observation.context}"
    if observation.source:
        suffix += f"\nSource: {observation.source}"

    match observation:
        case TextObservation(text=text):
            return ChatMessage(role="user", content=f"Observation:\n{text}{suffix}")
        case ImageObservation(image=image):
            return ChatMessage(
                role="user", content=f"Observation Image:{suffix}", images=[image]
            )
    raise TypeError(f"Unknown observation type: {type(observation).__name__}")
