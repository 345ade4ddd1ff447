# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from .base_udf import BaseUdf, BaseStoppingUdf, render_signature
from .final_answer import FinalAnswerUdf
from .terminate import TerminateUdf
from .think import ThinkUdf
from .call_agent import CallAgentUdf, call_agent_udf_name
from .datasheet_write import DatasheetWriteUdf
from .notebook_write import NotebookWriteUdf
from .save_data import SaveDataUdf, LocalStorageBackend, StorageBackend
from .analyze_list import AnalyzeListUdf

__all__ = [
    "BaseUdf",
    "BaseStoppingUdf",
    "render_signature",
    "FinalAnswerUdf",
    "TerminateUdf",
    "ThinkUdf",
    "CallAgentUdf",
    "call_agent_udf_name",
    "DatasheetWriteUdf",
    "NotebookWriteUdf",
    "SaveDataUdf",
    "LocalStorageBackend",
    "StorageBackend",
    "AnalyzeListUdf",
]
