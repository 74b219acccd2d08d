"""Application pagination – SearchPage."""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from mp_search.application.pagination.cursor import SearchAfterCursor


@dataclasses.dataclass(frozen=True)
class SearchPage:
    """One page of hits with the cursor that fetches the next one."""

    hits: list[dict[str, Any]]
    total: int
    page_size: int
    next_cursor: SearchAfterCursor | None = None

    @property
    def has_more(self) -> bool:
        return self.next_cursor is not None

    @classmethod
    def from_response(cls, response: Mapping[str, Any] | None, page_size: int) -> "SearchPage":
        """Decode a raw search response.

        A next cursor is only offered when the page came back full; it is
        the ``sort`` array of the last hit.
        """
        if not response:
            return cls(hits=[], total=0, page_size=page_size)
        section = response.get("hits") or {}
        hits = list(section.get("hits") or [])
        next_cursor = None
        if hits and len(hits) >= page_size and hits[-1].get("sort"):
            next_cursor = SearchAfterCursor.parse(hits[-1]["sort"])
        return cls(
            hits=hits,
            total=total_hits(response),
            page_size=page_size,
            next_cursor=next_cursor,
        )


def total_hits(response: Mapping[str, Any] | None) -> int:
    """Read ``hits.total`` in either the object (7+) or integer form."""
    if not response:
        return 0
    total = (response.get("hits") or {}).get("total", 0)
    if isinstance(total, Mapping):
        return int(total.get("value", 0))
    return int(total or 0)


__all__ = ["SearchPage", "total_hits"]
