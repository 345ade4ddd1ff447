# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import DefaultDict
from collections import defaultdict

from ..types.llm_types import TokenUsage

# A mapping from model names to accumulated token usage
token_meter: DefaultDict[str, TokenUsage] = defaultdict(TokenUsage)


def record_usage(model: str, usage: TokenUsage) -> None:
    token_meter[model] += usage


def get_total_usage() -> TokenUsage:
    usage = TokenUsage()
    for model_usage in token_meter.values():
        usage += model_usage
    return usage


class CallCounter:
    def __init__(self):
        self.count = 0

    def count_new_call(self):
        self.count += 1

    def get_count(self) -> int:
        return self.count


llm_call_counter = CallCounter()
