"""Unit tests for the append-only search index."""

from concurrent.futures import ThreadPoolExecutor

import pytest

from docs_type_search.domain.model import NamedEntry, Prose, RawEntry, RawModuleDocs
from docs_type_search.domain.types import Function, QualifiedName, Variable
from docs_type_search.search.index import IndexedEntry, SearchIndex, build_package_batch


def corrupted_module() -> RawModuleDocs:
    return RawModuleDocs(
        module_name="Broken",
        comment="Broken docs\n@docs present, absent",
        entries={"present": RawEntry(raw_signature="a -> a")},
    )


@pytest.mark.unit
class TestIndexedEntry:
    def test_parsed_type_is_derived_and_cached(self, make_entry):
        entry = make_entry("identity", "a -> a")
        first = entry.parsed_type
        assert first == Function((Variable("a"),), Variable("a"))
        assert entry.parsed_type is first

    def test_normalized_type(self, make_entry):
        entry = make_entry("always", "x -> y -> x")
        assert entry.normalized_type == Function((Variable("a"), Variable("b")), Variable("a"))

    def test_unparseable_signature_falls_back(self, make_entry):
        entry = make_entry("weird", "a -> -> b")
        assert entry.parsed_type == Variable("a -> -> b")
        assert entry.is_fallback

    def test_fallback_is_not_normalized(self, make_entry):
        entry = make_entry("weird", "not a -> -> type")
        assert entry.normalized_type == Variable("not a -> -> type")

    def test_single_variable_signature_is_not_a_fallback(self, make_entry):
        entry = make_entry("model", "msg")
        assert not entry.is_fallback
        assert entry.normalized_type == Variable("a")

    def test_name_and_module(self, make_entry):
        entry = make_entry("map", "a", module="Dict")
        assert entry.name == "map"
        assert entry.module_name == "Dict"
        assert entry.qualified_name == QualifiedName("Dict", "map")

    def test_type_text(self, make_entry):
        assert make_entry("f", "(a->b)->List a").type_text == "(a -> b) -> List a"


@pytest.mark.unit
class TestBuildPackageBatch:
    def test_entries_names_and_chunks(self, list_module):
        batch = build_package_batch("elm/core", [list_module])

        assert [entry.name for entry in batch.entries] == list(list_module.entries)
        assert all(entry.package_id == "elm/core" for entry in batch.entries)
        assert batch.names["map"] == "List"
        assert batch.failed_modules == []

        chunks = batch.modules[0].chunks
        assert isinstance(chunks[0], Prose)
        assert chunks[1] == NamedEntry("map", "elm/core")
        assert NamedEntry("::", "elm/core") in chunks

    def test_corrupted_module_is_skipped_not_fatal(self, list_module):
        batch = build_package_batch("elm/core", [corrupted_module(), list_module])

        assert batch.failed_modules == ["Broken"]
        assert [module.module_name for module in batch.modules] == ["List"]
        assert "present" not in batch.names
        assert all(entry.module_name == "List" for entry in batch.entries)

    def test_corruption_is_logged(self, caplog):
        with caplog.at_level("ERROR", logger="docs_type_search.search.index"):
            build_package_batch("pkg/broken", [corrupted_module()])
        assert "Skipping module Broken of pkg/broken" in caplog.text


@pytest.mark.unit
class TestSearchIndex:
    def test_starts_empty(self):
        index = SearchIndex()
        assert len(index) == 0
        assert index.entries() == ()
        assert index.names("elm/core") == {}

    def test_load_package_appends_in_order(self, list_module):
        index = SearchIndex()
        other = RawModuleDocs(
            module_name="Maybe",
            comment="Maybe\n@docs withDefault",
            entries={"withDefault": RawEntry(raw_signature="a -> Maybe a -> a")},
        )
        index.load_package("elm/core", [list_module])
        index.load_package("elm/maybe", [other])

        names = [entry.name for entry in index.entries()]
        assert names[: len(list_module.entries)] == list(list_module.entries)
        assert names[-1] == "withDefault"
        assert index.packages == ["elm/core", "elm/maybe"]
        assert index.names("elm/maybe") == {"withDefault": "Maybe"}

    def test_duplicate_package_is_rejected(self, list_module):
        index = SearchIndex()
        index.load_package("elm/core", [list_module])
        with pytest.raises(ValueError, match="already indexed"):
            index.load_package("elm/core", [list_module])
        assert len(index) == len(list_module.entries)

    def test_snapshot_is_not_affected_by_later_appends(self, list_module):
        index = SearchIndex()
        snapshot = index.entries()
        index.load_package("elm/core", [list_module])
        assert snapshot == ()

    def test_names_returns_a_copy(self, list_module):
        index = SearchIndex()
        index.load_package("elm/core", [list_module])
        index.names("elm/core")["map"] = "Tampered"
        assert index.names("elm/core")["map"] == "List"

    def test_eager_parse_populates_cache(self, list_module):
        index = SearchIndex()
        index.load_package("elm/core", [list_module], eager_parse=True)
        assert all("normalized_type" in entry.__dict__ for entry in index.entries())

    def test_lazy_parse_by_default(self, list_module):
        index = SearchIndex()
        index.load_package("elm/core", [list_module])
        assert all("parsed_type" not in entry.__dict__ for entry in index.entries())

    def test_warm_parses_everything(self, list_module):
        index = SearchIndex()
        index.load_package("elm/core", [list_module])
        assert index.warm(max_workers=2) == len(list_module.entries)
        assert all("normalized_type" in entry.__dict__ for entry in index.entries())

    def test_modules_keep_chunks(self, list_module):
        index = SearchIndex()
        index.load_package("elm/core", [list_module])
        modules = index.modules("elm/core")
        assert [module.module_name for module in modules] == ["List"]

    def test_concurrent_package_loads_are_whole(self):
        index = SearchIndex()

        def package(i: int) -> list[RawModuleDocs]:
            entries = {f"f{i}_{j}": RawEntry(raw_signature="a -> a") for j in range(20)}
            return [RawModuleDocs(module_name=f"M{i}", comment="", entries=entries)]

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(lambda i: index.load_package(f"pkg/{i}", package(i)), range(8)))

        entries = index.entries()
        assert len(entries) == 160
        # Each package's entries are contiguous
        for start in range(0, 160, 20):
            assert len({entry.package_id for entry in entries[start : start + 20]}) == 1

    def test_packages_follow_load_order_under_concurrent_loads(self):
        index = SearchIndex()
        seen: list[list[str]] = []

        def load(i: int) -> None:
            entries = {f"g{i}": RawEntry(raw_signature="a")}
            index.load_package(f"pkg/{i}", [RawModuleDocs(module_name=f"M{i}", comment="", entries=entries)])
            seen.append(index.packages)

        with ThreadPoolExecutor(max_workers=4) as pool:
            list(pool.map(load, range(12)))

        packages = index.packages
        assert sorted(packages) == sorted(f"pkg/{i}" for i in range(12))
        assert packages == list(dict.fromkeys(entry.package_id for entry in index.entries()))
        # Every observed list is a prefix of the final order
        assert all(snapshot == packages[: len(snapshot)] for snapshot in seen)

    def test_indexed_entry_is_immutable(self, make_entry):
        entry = make_entry("map", "a")
        with pytest.raises(AttributeError):
            entry.raw_signature = "b"  # type: ignore[misc]

    def test_indexed_entries_compare_by_value(self):
        left = IndexedEntry("p", QualifiedName("M", "f"), "a")
        right = IndexedEntry("p", QualifiedName("M", "f"), "a")
        assert left == right
