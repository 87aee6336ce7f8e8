"""docs-type-search: search package documentation by name or type signature."""

from docs_type_search.search.index import IndexedEntry, SearchIndex
from docs_type_search.search.normalizer import normalize
from docs_type_search.search.parser import parse
from docs_type_search.search.query import QueryEngine, rank
from docs_type_search.search.scoring import distance, similarity


__all__ = [
    "IndexedEntry",
    "QueryEngine",
    "SearchIndex",
    "distance",
    "normalize",
    "parse",
    "rank",
    "similarity",
]
