"""Application pagination – SortOrder, SortKey."""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any


class SortOrder(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: Any) -> "SortOrder":
        """Strict parse: only ``asc`` / ``desc`` (or a member) are accepted.

        Raises ``ValueError`` otherwise.
        """
        if isinstance(value, cls):
            return value
        return cls(value)


@dataclasses.dataclass(frozen=True)
class SortKey:
    """Single sort criterion."""
    field: str
    order: SortOrder = SortOrder.ASC

    def to_clause(self) -> dict[str, Any]:
        return {self.field: {"order": self.order.value}}


__all__ = ["SortKey", "SortOrder"]
