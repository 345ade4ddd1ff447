# Self-Improving Coding Agent
# Copyright (c) 2025 Maxime Robeyns
#
# This source code is licensed under the MIT license found in the
# LICENSE file in the root directory of this source tree.
from typing import ClassVar

from ..schemas import schema_to_type_string
from ..types.udf_types import UdfInterface


def render_signature(name: str, description: str, input_schema: dict, output_schema: dict | None) -> str:
    description_comment = "\n".join(f"// {line}" for line in description.split("\n"))
    output_type = schema_to_type_string(output_schema) if output_schema is not None else "any"
    return (
        f"{description_comment}\n"
        f"async function {name}(params: {schema_to_type_string(input_schema)}): "
        f"Promise<{output_type}>"
    )


class BaseUdf(UdfInterface):
    """Abstract base class for all UDFs"""

    def get_signature(self) -> str:
        return render_signature(
            self.name, self.description, self.input_schema, self.output_schema
        )

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class BaseStoppingUdf(BaseUdf):
    """A UDF whose call ends the agent's run"""

    stopping: ClassVar[bool] = True
