# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .sandbox import Sandbox, DEFAULT_CALL_RESULT_MAX_LENGTH
from .buffer_console import BufferConsole, strip_ansi
from .compiler import compile_script

__all__ = [
    "Sandbox",
    "DEFAULT_CALL_RESULT_MAX_LENGTH",
    "BufferConsole",
    "strip_ansi",
    "compile_script",
]
