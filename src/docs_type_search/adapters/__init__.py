"""Adapters between external documentation payloads and the domain model."""

from docs_type_search.adapters.docs_loader import load_docs_file, parse_docs_payload


__all__ = ["load_docs_file", "parse_docs_payload"]
