"""Application pagination – sort keys, search_after cursors, result pages."""
from mp_search.application.pagination.cursor import SearchAfterCursor
from mp_search.application.pagination.page import SearchPage, total_hits
from mp_search.application.pagination.sort import SortKey, SortOrder

__all__ = ["SearchAfterCursor", "SearchPage", "SortKey", "SortOrder", "total_hits"]
