"""Query engine: classify a query and rank indexed entries against it.

A query is parsed with the same grammar as indexed signatures. A bare
lowercase word parses to a ``Variable`` and triggers a name search; anything
with structure triggers a type search ranked by :func:`similarity`.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass
import itertools
import logging
import time
from typing import Literal

from docs_type_search.domain.types import Type, Variable
from docs_type_search.observability.metrics import SEARCH_COUNT, SEARCH_LATENCY
from docs_type_search.observability.tracing import create_span
from docs_type_search.search.index import IndexedEntry, SearchIndex
from docs_type_search.search.normalizer import normalize
from docs_type_search.search.parser import parse
from docs_type_search.search.scoring import similarity


logger = logging.getLogger(__name__)

SearchMode = Literal["name", "type"]


@dataclass(frozen=True)
class RankedEntry:
    entry: IndexedEntry
    score: int | None = None


@dataclass(frozen=True)
class Ranking:
    """Outcome of one ranking pass."""

    query: str
    mode: SearchMode
    results: list[RankedEntry]
    candidates: int
    elapsed: float

    @property
    def entries(self) -> list[IndexedEntry]:
        return [ranked.entry for ranked in self.results]


def classify(parsed_query: Type) -> SearchMode:
    return "name" if isinstance(parsed_query, Variable) else "type"


def name_matches(entry: IndexedEntry, needle: str, *, include_types: bool = True) -> bool:
    """Case-insensitive substring test on the entry name and, optionally, its type text."""
    if needle in entry.name.casefold():
        return True
    return include_types and needle in entry.type_text.casefold()


def name_search(
    needle: str,
    entries: Sequence[IndexedEntry],
    *,
    include_types: bool = True,
) -> list[RankedEntry]:
    folded = needle.strip().casefold()
    if not folded:
        return []
    return [RankedEntry(entry) for entry in entries if name_matches(entry, folded, include_types=include_types)]


def type_search(query_type: Type, entries: Sequence[IndexedEntry]) -> list[RankedEntry]:
    """Score every entry against ``query_type``; best first, ties in index order."""
    normalized_query = normalize(query_type)
    scored = [RankedEntry(entry, similarity(normalized_query, entry.normalized_type)) for entry in entries]
    matches = [ranked for ranked in scored if ranked.score > 0]
    # sort() is stable, so equal scores keep insertion order
    matches.sort(key=lambda ranked: ranked.score, reverse=True)
    return matches


def rank(query: str, entries: Sequence[IndexedEntry]) -> list[IndexedEntry]:
    """Rank ``entries`` against ``query`` and return the matching entries in order."""
    parsed = parse(query)
    if isinstance(parsed, Variable):
        return [ranked.entry for ranked in name_search(parsed.name, entries)]
    return [ranked.entry for ranked in type_search(parsed, entries)]


class QueryEngine:
    """Ranks queries against one session's :class:`SearchIndex`.

    ``rank_latest`` implements last-query-wins: when a newer call starts before
    an older one finishes, the older call returns ``None`` instead of a stale
    ranking.
    """

    def __init__(
        self,
        index: SearchIndex,
        *,
        max_results: int | None = None,
        name_search_includes_types: bool = True,
    ) -> None:
        self.index = index
        self.max_results = max_results
        self.name_search_includes_types = name_search_includes_types
        self._generation = itertools.count(1)
        self._latest = 0

    def search(self, query: str, max_results: int | None = None) -> Ranking:
        limit = max_results if max_results is not None else self.max_results
        entries = self.index.entries()
        start = time.perf_counter()
        parsed = parse(query)
        mode = classify(parsed)

        with create_span("type_search.rank", attributes={"search.mode": mode, "search.candidates": len(entries)}):
            try:
                if mode == "name":
                    results = name_search(parsed.name, entries, include_types=self.name_search_includes_types)
                else:
                    results = type_search(parsed, entries)
            except Exception:
                SEARCH_COUNT.labels(mode=mode, status="error").inc()
                raise

        if limit is not None:
            results = results[:limit]
        elapsed = time.perf_counter() - start
        SEARCH_LATENCY.labels(mode=mode).observe(elapsed)
        SEARCH_COUNT.labels(mode=mode, status="ok").inc()
        logger.debug(
            "Ranked %r as %s search: %d of %d entries in %.3fs",
            query,
            mode,
            len(results),
            len(entries),
            elapsed,
        )
        return Ranking(query=query, mode=mode, results=results, candidates=len(entries), elapsed=elapsed)

    async def rank_latest(self, query: str, max_results: int | None = None) -> Ranking | None:
        """Rank off the event loop; ``None`` means a newer query superseded this one."""
        generation = next(self._generation)
        self._latest = generation
        ranking = await asyncio.to_thread(self.search, query, max_results)
        if generation != self._latest:
            logger.debug("Dropping stale ranking for %r", query)
            return None
        return ranking
