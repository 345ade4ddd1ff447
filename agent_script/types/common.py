# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging

from enum import Enum, IntEnum
from typing import Literal
from dataclasses import dataclass


class LogLevel(IntEnum):
    """Verbosity threshold of the agent logger"""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3

    @property
    def logging_level(self) -> int:
        return {
            LogLevel.DEBUG: logging.DEBUG,
            LogLevel.INFO: logging.INFO,
            LogLevel.WARN: logging.WARNING,
            LogLevel.ERROR: logging.ERROR,
        }[self]


class ObservationType(str, Enum):
    TEXT = "text"
    IMAGE = "image"


@dataclass
class TextObservation:
    text: str
    context: str | None = None
    source: str | None = None
    type: Literal[ObservationType.TEXT] = ObservationType.TEXT


@dataclass
class ImageObservation:
    image: str  # URL or data URI
    context: str | None = None
    source: str | None = None
    type: Literal[ObservationType.IMAGE] = ObservationType.IMAGE


Observation = TextObservation | ImageObservation
