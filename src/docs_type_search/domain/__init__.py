"""Domain layer - pure data with no infrastructure dependencies.

This layer contains:
- Type tree value objects (``Function``, ``Variable``, ``Apply``, ``Tuple``, ``Record``)
- Raw documentation input models and extracted chunks
- Search response value objects
- The package's exception hierarchy
"""

from docs_type_search.domain.errors import (
    DocsLoadError,
    DocsTypeSearchError,
    IndexCorruptionError,
    TypeParseError,
)
from docs_type_search.domain.model import DocChunk, NamedEntry, Prose, RawEntry, RawModuleDocs
from docs_type_search.domain.search import SearchResponse, SearchResult, SearchStats
from docs_type_search.domain.types import (
    UNIT,
    Apply,
    Function,
    QualifiedName,
    Record,
    Tuple,
    Type,
    Variable,
)


__all__ = [
    "UNIT",
    "Apply",
    "DocChunk",
    "DocsLoadError",
    "DocsTypeSearchError",
    "Function",
    "IndexCorruptionError",
    "NamedEntry",
    "Prose",
    "QualifiedName",
    "RawEntry",
    "RawModuleDocs",
    "Record",
    "SearchResponse",
    "SearchResult",
    "SearchStats",
    "Tuple",
    "Type",
    "TypeParseError",
    "Variable",
]
