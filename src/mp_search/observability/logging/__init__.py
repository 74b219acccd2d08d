"""Observability – structured logging helpers."""
from mp_search.observability.logging.factory import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
