# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
import io
import re
import builtins

from typing import Any

ANSI_ESCAPE_PATTERN = re.compile(
    r"[\u001B\u009B][\[\]()#;?]*(?:[0-9]{1,4}(?:;[0-9]{0,4})*)?[0-9A-ORZcf-nqry=><]"
)


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_PATTERN.sub("", text)


class BufferConsole:
    """Collects what a script prints instead of sending it to stdout.

    ``print`` is bound into the script namespace, so output from one sandbox
    never mixes with another's, even when agents are nested.
    """

    def __init__(self):
        self._buffer = io.StringIO()

    def print(
        self,
        *args: Any,
        sep: str | None = " ",
        end: str | None = "\n",
        file: Any = None,
        flush: bool = False,
    ) -> None:
        if file is not None:
            builtins.print(*args, sep=sep, end=end, file=file, flush=flush)
            return
        sep = " " if sep is None else sep
        end = "\n" if end is None else end
        self._buffer.write(sep.join(str(arg) for arg in args) + end)

    def log(self, *args: Any) -> None:
        self.print(*args)

    def get_output(self) -> str:
        return strip_ansi(self._buffer.getvalue())
