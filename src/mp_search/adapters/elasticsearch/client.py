"""Elasticsearch adapter – client construction."""
from __future__ import annotations

from typing import Any

from mp_search.config.settings import SearchSettings


def _require_elasticsearch() -> Any:
    try:
        import elasticsearch8
        return elasticsearch8
    except ImportError as exc:
        raise ImportError("Install 'elasticsearch8[async]' to use the Elasticsearch adapter") from exc


def build_client(settings: SearchSettings, **kwargs: Any) -> Any:
    """Build an ``AsyncElasticsearch`` client from *settings*.

    Extra *kwargs* are handed to the client untouched (node class, custom
    headers, sniffing …).
    """
    es = _require_elasticsearch()
    options: dict[str, Any] = {"request_timeout": settings.request_timeout}
    if settings.basic_auth is not None:
        options["basic_auth"] = settings.basic_auth
    if settings.api_key is not None:
        options["api_key"] = settings.api_key
    if settings.ca_certs is not None:
        options["ca_certs"] = settings.ca_certs
    options.update(kwargs)
    return es.AsyncElasticsearch(list(settings.hosts), **options)


__all__ = ["build_client"]
