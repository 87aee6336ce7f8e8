"""Domain models for search responses.

Following Cosmic Python principles:
- Value Objects are immutable (frozen=True)
- No infrastructure dependencies

These models are the serializable face of a ranking: the query engine works on
``IndexedEntry`` objects and the service layer converts them into these.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SearchResult(BaseModel):
    """Value object for a single ranked entry.

    Carries the package identity so a UI layer can cross-link the entry.
    """

    model_config = ConfigDict(frozen=True)

    package_id: str
    module_name: str
    name: str
    signature: str
    normalized_signature: str
    score: int | None = None
    doc_text: str = ""


class SearchStats(BaseModel):
    """Performance and debug information for a search operation."""

    model_config = ConfigDict(frozen=True)

    mode: Literal["name", "type"]
    candidates: int
    matches: int
    search_time: float


class SearchResponse(BaseModel):
    """Value object for a complete search response."""

    model_config = ConfigDict(frozen=True)

    query: str
    results: list[SearchResult] = Field(default_factory=list)
    stats: SearchStats | None = None
