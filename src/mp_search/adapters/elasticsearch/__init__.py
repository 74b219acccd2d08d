"""Elasticsearch adapter — async transport over the official 8.x client.

Requires ``elasticsearch8`` with its ``async`` extra (aiohttp)::

    pip install "elasticsearch8[async]"
"""

from mp_search.adapters.elasticsearch.client import build_client
from mp_search.adapters.elasticsearch.transport import ElasticsearchTransport

__all__ = ["ElasticsearchTransport", "build_client"]
