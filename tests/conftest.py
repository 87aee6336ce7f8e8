"""Shared test fixtures and configuration."""

import os

import pytest

from docs_type_search.domain.model import RawEntry, RawModuleDocs
from docs_type_search.domain.types import QualifiedName
from docs_type_search.search.index import IndexedEntry


# Test environment that overrides every configurable value
TEST_ENV = {
    "DOCS_TYPE_SEARCH_LOG_LEVEL": "info",
    "DOCS_TYPE_SEARCH_LOG_JSON": "true",
    "DOCS_TYPE_SEARCH_MAX_RESULTS": "50",
    "DOCS_TYPE_SEARCH_NAME_SEARCH_INCLUDES_TYPES": "true",
    "DOCS_TYPE_SEARCH_EAGER_PARSE": "false",
    "DOCS_TYPE_SEARCH_PARSE_WORKERS": "2",
    "DOCS_TYPE_SEARCH_SERVICE_NAME": "docs-type-search-test",
}


# Set environment variables immediately when conftest.py is loaded
for key, value in TEST_ENV.items():
    os.environ[key] = value


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Reset test defaults before each test."""
    for key, value in TEST_ENV.items():
        monkeypatch.setenv(key, value)
    yield


LIST_SIGNATURES = {
    "map": "(a -> b) -> List a -> List b",
    "filter": "(a -> Bool) -> List a -> List a",
    "filterMap": "(a -> Maybe b) -> List a -> List b",
    "foldl": "(a -> b -> b) -> b -> List a -> b",
    "sum": "List number -> number",
    "head": "List a -> Maybe a",
    "length": "List a -> Int",
    "cons": "a -> List a -> List a",
    "::": "a -> List a -> List a",
}


@pytest.fixture
def list_module() -> RawModuleDocs:
    return RawModuleDocs(
        module_name="List",
        comment=(
            " Functions for working with lists.\n\n"
            "# Transform\n"
            "@docs map, filter,\n"
            "    filterMap, foldl\n\n"
            "# Math\n"
            "@docs sum, head, length\n\n"
            "# Building\n"
            "@docs cons, (::)\n"
        ),
        entries={
            name: RawEntry(raw_signature=signature, doc_text=f"Docs for {name}.")
            for name, signature in LIST_SIGNATURES.items()
        },
    )


@pytest.fixture
def make_entry():
    def _make(name: str, signature: str, *, module: str = "List", package: str = "elm/core") -> IndexedEntry:
        return IndexedEntry(
            package_id=package,
            qualified_name=QualifiedName(home=module, name=name),
            raw_signature=signature,
        )

    return _make
