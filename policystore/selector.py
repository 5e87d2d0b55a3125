"""Field selectors for filtered removal and filtered loading."""

from __future__ import annotations

from typing import Dict, List, Sequence

from pydantic import BaseModel, Field

from .models import FIELD_NAMES


def build_filter_selector(
    ptype: str, field_index: int, field_values: Sequence[str]
) -> Dict[str, str]:
    """Build an equality selector for a window of rule values.

    ``field_values[0]`` constrains column ``v{field_index}``, the next value
    the following column, and so on. Positions outside the window and empty
    values are left unconstrained. The policy type is always constrained.

    Example:
        >>> build_filter_selector("p", 1, ["data1", "", "x"])
        {'ptype': 'p', 'v1': 'data1', 'v3': 'x'}
    """

    selector = {"ptype": ptype}
    for position, name in enumerate(FIELD_NAMES):
        offset = position - field_index
        if 0 <= offset < len(field_values) and field_values[offset]:
            selector[name] = field_values[offset]
    return selector


class FieldFilter(BaseModel):
    """Typed filter for ``load_filtered_policy``.

    Equivalent to the arguments of ``remove_filtered_policy``: a policy type,
    the column the first value applies to, and the values themselves.
    """

    ptype: str = Field(min_length=1)
    field_index: int = 0
    field_values: List[str] = Field(default_factory=list)

    def to_selector(self) -> Dict[str, str]:
        return build_filter_selector(self.ptype, self.field_index, self.field_values)
