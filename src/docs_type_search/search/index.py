"""Append-only search index of documented entries.

One ``SearchIndex`` instance lives for one session. Packages are appended as a
whole: the entries and the name dictionary of a package become visible together
under a single lock, so a concurrent reader sees either none or all of it.
Signatures are parsed lazily and cached on each entry.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from functools import cached_property
import logging
import threading

from docs_type_search.domain.errors import IndexCorruptionError
from docs_type_search.domain.model import DocChunk, RawModuleDocs
from docs_type_search.domain.types import QualifiedName, Type
from docs_type_search.observability.metrics import INDEX_ENTRY_COUNT, MODULE_INDEX_FAILURES
from docs_type_search.search.chunks import extract_chunks
from docs_type_search.search.normalizer import normalize
from docs_type_search.search.parser import parse_outcome
from docs_type_search.search.render import render


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IndexedEntry:
    """A documented entry ready for ranking.

    ``parsed_type`` and ``normalized_type`` are derived from ``raw_signature`` on
    first access and cached; they never change afterwards. An unparseable
    signature stays a ``Variable`` holding the raw text in both.
    """

    package_id: str
    qualified_name: QualifiedName
    raw_signature: str
    doc_text: str = ""

    @property
    def name(self) -> str:
        return self.qualified_name.name

    @property
    def module_name(self) -> str:
        return self.qualified_name.home

    @cached_property
    def _parse_outcome(self) -> tuple[Type, bool]:
        return parse_outcome(self.raw_signature)

    @cached_property
    def parsed_type(self) -> Type:
        return self._parse_outcome[0]

    @property
    def is_fallback(self) -> bool:
        """True when the signature could not be parsed and is kept as raw text."""
        return self._parse_outcome[1]

    @cached_property
    def normalized_type(self) -> Type:
        # The fallback variable holds the raw signature; renaming it would lose that text
        if self.is_fallback:
            return self.parsed_type
        return normalize(self.parsed_type)

    @cached_property
    def type_text(self) -> str:
        return render(self.parsed_type)


@dataclass
class ModuleIndex:
    """Chunks extracted for one module, kept for rendering its documentation page."""

    module_name: str
    chunks: list[DocChunk] = field(default_factory=list)


@dataclass
class PackageBatch:
    """Everything one package contributes to the index, built before the append."""

    package_id: str
    entries: list[IndexedEntry] = field(default_factory=list)
    names: dict[str, str] = field(default_factory=dict)
    modules: list[ModuleIndex] = field(default_factory=list)
    failed_modules: list[str] = field(default_factory=list)


def build_package_batch(package_id: str, modules: Iterable[RawModuleDocs]) -> PackageBatch:
    """Extract chunks and entries for each module of a package.

    A module whose ``@docs`` list names a missing entry is skipped entirely and
    recorded in ``failed_modules``; the remaining modules are still indexed.
    """
    batch = PackageBatch(package_id=package_id)
    for module in modules:
        try:
            chunks = extract_chunks(
                module.comment,
                module.entries,
                package_id=package_id,
                module_name=module.module_name,
            )
        except IndexCorruptionError as exc:
            logger.error(
                "Skipping module %s of %s: %s",
                module.module_name,
                package_id,
                exc,
                extra={"package": package_id, "module_name": module.module_name},
            )
            MODULE_INDEX_FAILURES.labels(package=package_id).inc()
            batch.failed_modules.append(module.module_name)
            continue

        batch.modules.append(ModuleIndex(module.module_name, chunks))
        for name, raw in module.entries.items():
            batch.entries.append(
                IndexedEntry(
                    package_id=package_id,
                    qualified_name=QualifiedName(home=module.module_name, name=name),
                    raw_signature=raw.raw_signature,
                    doc_text=raw.doc_text,
                )
            )
            batch.names[name] = module.module_name
    return batch


class SearchIndex:
    """Session-scoped, append-only collection of indexed entries."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._entries: list[IndexedEntry] = []
        self._names: dict[str, dict[str, str]] = {}
        self._modules: dict[str, list[ModuleIndex]] = {}

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def packages(self) -> list[str]:
        with self._lock:
            return list(self._names)

    def entries(self) -> tuple[IndexedEntry, ...]:
        """Snapshot of all entries in insertion order."""
        with self._lock:
            return tuple(self._entries)

    def names(self, package_id: str) -> dict[str, str]:
        """Local name to defining module for one package (empty if not loaded)."""
        with self._lock:
            return dict(self._names.get(package_id, {}))

    def modules(self, package_id: str) -> list[ModuleIndex]:
        with self._lock:
            return list(self._modules.get(package_id, []))

    def add_package(self, batch: PackageBatch, *, eager_parse: bool = False) -> None:
        """Append one package's entries and name dictionary atomically.

        Raises:
            ValueError: The package is already indexed in this session
        """
        if eager_parse:
            for entry in batch.entries:
                entry.normalized_type  # noqa: B018 - populate the cache before publishing

        with self._lock:
            if batch.package_id in self._names:
                raise ValueError(f"Package already indexed: {batch.package_id}")
            self._entries.extend(batch.entries)
            self._names[batch.package_id] = dict(batch.names)
            self._modules[batch.package_id] = list(batch.modules)
            total = len(self._entries)

        INDEX_ENTRY_COUNT.labels().set(total)
        logger.info(
            "Indexed package %s: %d entries from %d modules (%d skipped)",
            batch.package_id,
            len(batch.entries),
            len(batch.modules),
            len(batch.failed_modules),
        )

    def load_package(
        self,
        package_id: str,
        modules: Sequence[RawModuleDocs],
        *,
        eager_parse: bool = False,
    ) -> PackageBatch:
        """Build and append a package in one step; returns the appended batch."""
        batch = build_package_batch(package_id, modules)
        self.add_package(batch, eager_parse=eager_parse)
        return batch

    def warm(self, max_workers: int = 4) -> int:
        """Parse and normalize every entry's signature on a thread pool.

        Returns:
            Number of entries whose types were computed
        """
        entries = self.entries()
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="type-parse") as pool:
            for _ in pool.map(lambda entry: entry.normalized_type, entries):
                pass
        return len(entries)
