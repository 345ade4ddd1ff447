# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import json

from enum import Enum
from pathlib import Path
from typing import Any
from datetime import date, datetime, timedelta
from dataclasses import asdict, is_dataclass


class ResultEncoder(json.JSONEncoder):
    """JSON encoder for the values UDFs hand back to scripts."""

    def default(self, obj: Any) -> Any:
        if hasattr(obj, "model_dump"):
            # Pydantic models
            return obj.model_dump()
        elif is_dataclass(obj) and not isinstance(obj, type):
            return asdict(obj)
        elif isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, (datetime, date)):
            return obj.isoformat()
        elif isinstance(obj, Path):
            return str(obj)
        elif isinstance(obj, timedelta):
            return obj.total_seconds()
        elif isinstance(obj, (set, frozenset, tuple)):
            return list(obj)
        elif isinstance(obj, bytes):
            return obj.decode("utf-8", errors="replace")
        return str(obj)


def dumps_result(value: Any, indented: bool = True) -> str:
    return json.dumps(
        value, cls=ResultEncoder, indent=2 if indented else None, ensure_ascii=False
    )
