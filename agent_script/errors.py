# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from enum import Enum


class AgentErrorCode(str, Enum):
    """Error taxonomy of the agent loop"""

    VALIDATION_ERROR = "VALIDATION_ERROR"
    UDF_NOT_FOUND = "UDF_NOT_FOUND"
    SCRIPT_EXECUTION_FAILED = "SCRIPT_EXECUTION_FAILED"
    MANAGED_AGENT_ERROR = "MANAGED_AGENT_ERROR"
    UDF_EXECUTION_ERROR = "UDF_EXECUTION_ERROR"
    MAX_STEPS_REACHED = "MAX_STEPS_REACHED"
    MODEL_OUTPUT_ERROR = "MODEL_OUTPUT_ERROR"
    PARSING_ERROR = "PARSING_ERROR"
    INVALID_CODE_PATTERN = "INVALID_CODE_PATTERN"
    INVALID_UDF_INPUT_SCHEMA = "INVALID_UDF_INPUT_SCHEMA"
    PREMATURE_TERMINATE = "PREMATURE_TERMINATE"


class AgentError(Exception):
    """
    The single error type the agent loop knows how to recover from.

    Errors raised while a step runs are attached to that step's ActionStep and
    shown to the model on its next turn; anything else propagates.
    """

    def __init__(self, message: str, code: AgentErrorCode):
        super().__init__(message)
        self.message = message
        self.code = code

    def to_dict(self) -> dict[str, str]:
        return {"message": self.message, "code": self.code.value}

    def __repr__(self) -> str:
        return f"AgentError(code={self.code.value}, message={self.message!r})"


class ChatCompletionError(Exception):
    """Raised when a chat completion request is malformed or yields nothing"""
