"""
mp_search – schema-driven Elasticsearch query translation.

Import path convention::

    from mp_search.application.search import SchemaCatalog, SearchRequestBuilder
    from mp_search.application.search import AvgAggregation, serialize_all
    from mp_search.adapters.elasticsearch import ElasticsearchTransport
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
