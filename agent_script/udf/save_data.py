# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import logging
import tempfile

from typing import Any, Protocol
from pathlib import Path
from pydantic import BaseModel, Field

from .base_udf import BaseUdf
from ..schemas import to_json_schema
from ..sandbox.encoding import dumps_result
from ..types.agent_types import CodeAgentInterface
from ..utils.formatting import format_bytes

logger = logging.getLogger(__name__)


class StorageBackend(Protocol):
    def write_file(self, filename: str, data: bytes) -> None: ...


class LocalStorageBackend:
    """Writes files into a directory, a fresh temporary one by default"""

    def __init__(self, directory: str | Path | None = None):
        self.directory = Path(directory or tempfile.mkdtemp(prefix="agent-script"))

    def write_file(self, filename: str, data: bytes) -> None:
        # Only the base name is kept so scripts cannot write outside the directory
        path = self.directory / Path(filename).name
        path.write_bytes(data)
        logger.info(f"Saved data to: {path}")


class SaveDataInput(BaseModel):
    data: Any = Field(..., description="The data to save")
    filename: str = Field(..., description="The filename for the data")
    description: str = Field(..., description="Description of the data")


class SaveDataUdf(BaseUdf):
    name = "saveData"
    description = "Save data to a file"
    input_schema = to_json_schema(SaveDataInput)
    output_schema: dict = {}

    def __init__(self, backend: StorageBackend | None = None):
        self.backend = backend or LocalStorageBackend()
        self.files: list[dict[str, str]] = []

    async def call(self, input: dict[str, Any], agent: CodeAgentInterface) -> dict[str, Any]:
        content = dumps_result(input["data"], indented=False).encode("utf-8")
        self.backend.write_file(input["filename"], content)
        self.files.append(
            {"filename": input["filename"], "description": input["description"]}
        )
        return {"success": True, "contentSize": format_bytes(len(content))}
