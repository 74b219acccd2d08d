"""Application pagination – search_after cursor."""
from __future__ import annotations

import dataclasses
from collections.abc import Sequence
from typing import Any


@dataclasses.dataclass(frozen=True, slots=True)
class SearchAfterCursor:
    """Ordered sort values of the last hit of the previous page.

    The values are opaque: they are handed back to the engine exactly as
    they were received, one per sort key.
    """

    values: tuple[Any, ...]

    @classmethod
    def parse(cls, value: Any) -> "SearchAfterCursor | None":
        """Accept a sequence or a comma-delimited string; empty input yields ``None``."""
        if value is None or value == "":
            return None
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls(tuple(value.split(",")))
        if isinstance(value, Sequence):
            return cls(tuple(value)) if value else None
        return cls((value,))

    def as_list(self) -> list[Any]:
        return list(self.values)

    def __str__(self) -> str:
        return ",".join(str(v) for v in self.values)


__all__ = ["SearchAfterCursor"]
