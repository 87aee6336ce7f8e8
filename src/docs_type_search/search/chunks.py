"""Documentation chunk extraction.

A module comment interleaves prose with ``@docs`` directive lines::

    Functions for working with lists.

    # Basics
    @docs map, filter,
        foldl

    # Operators
    @docs (::)

The extractor turns it into an ordered list of ``Prose`` and ``NamedEntry``
chunks, in the order a reader sees them. Every name a directive lists must
exist in the module's entry table; a missing one raises
:class:`IndexCorruptionError` and the caller skips the whole module.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging

from docs_type_search.domain.errors import IndexCorruptionError
from docs_type_search.domain.model import DocChunk, NamedEntry, Prose


logger = logging.getLogger(__name__)

DOCS_MARKER = "\n@docs "


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def is_identifier(token: str) -> bool:
    """Bare value name: letters, digits, underscores and primes."""
    return bool(token) and all(_is_ascii_alnum(char) or char in "_'" for char in token)


def is_operator(token: str) -> bool:
    """Parenthesized operator such as ``(::)`` or ``(|>)``."""
    return (
        len(token) > 2
        and token[0] == "("
        and token[-1] == ")"
        and not any(_is_ascii_alnum(char) for char in token[1:-1])
    )


def entry_name(token: str) -> str | None:
    """Lookup key for a directive token, or ``None`` when the token is not a name."""
    if is_identifier(token):
        return token
    if is_operator(token):
        return token[1:-1]
    return None


def join_continuations(block: str) -> str:
    """Join a directive line ending in a trailing comma with the lines that follow it."""
    lines = block.split("\n")
    head = lines[0]
    consumed = 1
    while head.rstrip().endswith(",") and consumed < len(lines):
        head = f"{head.rstrip()} {lines[consumed].strip()}"
        consumed += 1
    return "\n".join([head, *lines[consumed:]])


def extract_chunks(
    raw_comment: str,
    entry_lookup: Mapping[str, object],
    *,
    package_id: str = "",
    module_name: str = "",
) -> list[DocChunk]:
    """Split a module comment into ordered prose and entry-reference chunks.

    Args:
        raw_comment: The module's documentation comment
        entry_lookup: Documented entries keyed by name (values are not inspected)
        package_id: Package identity stamped on every ``NamedEntry``
        module_name: Used only to make corruption errors traceable

    Returns:
        Chunks in source order; blank prose is dropped

    Raises:
        IndexCorruptionError: A directive names an entry missing from ``entry_lookup``
    """
    leading, *directive_blocks = raw_comment.split(DOCS_MARKER)
    chunks: list[DocChunk] = []
    _append_prose(chunks, leading)
    for block in directive_blocks:
        chunks.extend(_directive_chunks(block, entry_lookup, package_id, module_name))
    return chunks


def _directive_chunks(
    block: str,
    entry_lookup: Mapping[str, object],
    package_id: str,
    module_name: str,
) -> list[DocChunk]:
    parts = join_continuations(block).split(",")
    chunks: list[DocChunk] = []

    def resolve(name: str) -> NamedEntry:
        if name not in entry_lookup:
            raise IndexCorruptionError(name, module_name)
        return NamedEntry(name, package_id)

    for index, raw_part in enumerate(parts):
        name = entry_name(raw_part.strip())
        if name is not None:
            chunks.append(resolve(name))
            continue

        # The directive list ends inside this part; the rest of the block is prose.
        remainder = ",".join(parts[index:]).lstrip()
        words = remainder.split(maxsplit=1)
        first_name = entry_name(words[0]) if words else None
        if first_name is not None:
            chunks.append(resolve(first_name))
            remainder = remainder[len(words[0]) :]
        _append_prose(chunks, remainder)
        break

    return chunks


def _append_prose(chunks: list[DocChunk], text: str) -> None:
    if text.strip():
        chunks.append(Prose(text))
