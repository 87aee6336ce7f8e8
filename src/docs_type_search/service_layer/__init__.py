"""Service layer - orchestrates indexing and ranking for one session."""

from docs_type_search.service_layer.search_service import PackageLoadReport, SearchService


__all__ = ["PackageLoadReport", "SearchService"]
