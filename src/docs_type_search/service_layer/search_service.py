"""Search service orchestration layer.

Owns one session's index and query engine and converts rankings into the
serializable response models of :mod:`docs_type_search.domain.search`.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
import logging

from docs_type_search.config import Settings
from docs_type_search.domain.model import RawModuleDocs
from docs_type_search.domain.search import SearchResponse, SearchResult, SearchStats
from docs_type_search.observability.context import package_context
from docs_type_search.observability.metrics import PACKAGE_LOAD_LATENCY, track_latency
from docs_type_search.observability.tracing import create_span
from docs_type_search.search.index import ModuleIndex, SearchIndex
from docs_type_search.search.query import QueryEngine, RankedEntry, Ranking
from docs_type_search.search.render import render


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PackageLoadReport:
    package_id: str
    entries_indexed: int
    modules_indexed: list[str] = field(default_factory=list)
    modules_failed: list[str] = field(default_factory=list)

    @property
    def status(self) -> str:
        return "partial" if self.modules_failed else "ok"


class SearchService:
    """High-level search orchestration service.

    One instance per session; packages loaded into it stay searchable until the
    service is discarded.
    """

    def __init__(self, settings: Settings | None = None, index: SearchIndex | None = None) -> None:
        self.settings = settings or Settings()
        self.index = index or SearchIndex()
        self.engine = QueryEngine(
            self.index,
            max_results=self.settings.max_results,
            name_search_includes_types=self.settings.name_search_includes_types,
        )

    def load_package(self, package_id: str, modules: Sequence[RawModuleDocs]) -> PackageLoadReport:
        """Index every module of a package; corrupted modules are skipped, not fatal."""
        with (
            package_context(package_id),
            create_span("type_search.load_package", attributes={"package.id": package_id}),
            track_latency(PACKAGE_LOAD_LATENCY),
        ):
            batch = self.index.load_package(package_id, modules, eager_parse=self.settings.eager_parse)

        return PackageLoadReport(
            package_id=package_id,
            entries_indexed=len(batch.entries),
            modules_indexed=[module.module_name for module in batch.modules],
            modules_failed=list(batch.failed_modules),
        )

    def warm(self) -> int:
        """Parse every pending signature ahead of the first type search."""
        return self.index.warm(max_workers=self.settings.parse_workers)

    def search(self, query: str, max_results: int | None = None) -> SearchResponse:
        ranking = self.engine.search(query, max_results)
        return _to_response(ranking)

    async def search_latest(self, query: str, max_results: int | None = None) -> SearchResponse | None:
        """Async search where a newer query cancels the result of an older one."""
        ranking = await self.engine.rank_latest(query, max_results)
        if ranking is None:
            return None
        return _to_response(ranking)

    def link_target(self, package_id: str, name: str) -> str | None:
        """Module defining ``name`` in ``package_id``, for hyperlinking rendered types."""
        return self.index.names(package_id).get(name)

    def module_chunks(self, package_id: str) -> list[ModuleIndex]:
        return self.index.modules(package_id)


def _to_result(ranked: RankedEntry) -> SearchResult:
    entry = ranked.entry
    return SearchResult(
        package_id=entry.package_id,
        module_name=entry.module_name,
        name=entry.name,
        signature=entry.raw_signature,
        normalized_signature=render(entry.normalized_type),
        score=ranked.score,
        doc_text=entry.doc_text,
    )


def _to_response(ranking: Ranking) -> SearchResponse:
    return SearchResponse(
        query=ranking.query,
        results=[_to_result(ranked) for ranked in ranking.results],
        stats=SearchStats(
            mode=ranking.mode,
            candidates=ranking.candidates,
            matches=len(ranking.results),
            search_time=ranking.elapsed,
        ),
    )
