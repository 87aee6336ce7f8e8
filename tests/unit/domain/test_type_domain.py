"""Unit tests for domain value objects and errors."""

from pydantic import ValidationError
import pytest

from docs_type_search.domain.errors import (
    DocsLoadError,
    DocsTypeSearchError,
    IndexCorruptionError,
    TypeParseError,
)
from docs_type_search.domain.model import RawEntry, RawModuleDocs
from docs_type_search.domain.search import SearchResponse, SearchResult, SearchStats
from docs_type_search.domain.types import UNIT, Apply, Function, QualifiedName, Variable, fallback_variable


@pytest.mark.unit
class TestQualifiedName:
    def test_from_dotted_splits_on_last_dot(self):
        assert QualifiedName.from_dotted("Json.Decode.Value") == QualifiedName("Json.Decode", "Value")

    def test_from_dotted_unqualified(self):
        assert QualifiedName.from_dotted("Int") == QualifiedName("", "Int")

    def test_str(self):
        assert str(QualifiedName("Dict", "Dict")) == "Dict.Dict"
        assert str(QualifiedName("", "Int")) == "Int"


@pytest.mark.unit
class TestTypeTree:
    def test_nodes_are_hashable_values(self):
        left = Function((Variable("a"),), Apply(QualifiedName("", "List"), (Variable("a"),)))
        right = Function((Variable("a"),), Apply(QualifiedName("", "List"), (Variable("a"),)))
        assert left == right
        assert len({left, right}) == 1

    def test_unit_is_nullary_apply(self):
        assert UNIT.args == ()
        assert UNIT.name.name == "()"

    def test_fallback_variable_keeps_raw_text(self):
        assert fallback_variable("a -> -> b") == Variable("a -> -> b")


@pytest.mark.unit
class TestErrors:
    def test_type_parse_error(self):
        error = TypeParseError("Unexpected '->'", "a -> -> b", 5)
        assert isinstance(error, ValueError)
        assert isinstance(error, DocsTypeSearchError)
        assert str(error) == "Unexpected '->' at column 5 in 'a -> -> b'"
        assert error.position == 5

    def test_index_corruption_error_message(self):
        error = IndexCorruptionError("foldr", "List")
        assert isinstance(error, KeyError)
        assert str(error) == "docs have been corrupted, could not find 'foldr' in module List"

    def test_index_corruption_error_without_module(self):
        assert str(IndexCorruptionError("foldr")) == "docs have been corrupted, could not find 'foldr'"

    def test_docs_load_error_is_runtime_error(self):
        assert issubclass(DocsLoadError, RuntimeError)


@pytest.mark.unit
class TestRawModels:
    def test_module_name_is_required(self):
        with pytest.raises(ValidationError):
            RawModuleDocs(module_name="")

    def test_models_are_frozen(self):
        entry = RawEntry(raw_signature="a -> a")
        with pytest.raises(ValidationError):
            entry.raw_signature = "b"  # type: ignore[misc]


@pytest.mark.unit
class TestSearchModels:
    def test_response_defaults(self):
        response = SearchResponse(query="map")
        assert response.results == []
        assert response.stats is None

    def test_stats_mode_is_checked(self):
        with pytest.raises(ValidationError):
            SearchStats(mode="fuzzy", candidates=1, matches=0, search_time=0.0)  # type: ignore[arg-type]

    def test_result_round_trips_to_dict(self):
        result = SearchResult(
            package_id="elm/core",
            module_name="List",
            name="map",
            signature="(a -> b) -> List a -> List b",
            normalized_signature="(a -> b) -> List a -> List b",
            score=60,
        )
        assert result.model_dump()["score"] == 60
        assert result.doc_text == ""
