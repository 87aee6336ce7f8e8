"""Load package ``docs.json`` payloads into raw module docs.

The payload is a list of modules, each carrying its comment and four entry
tables::

    [{"name": "List",
      "comment": "...\\n@docs map, filter",
      "values": [{"name": "map", "comment": "...", "type": "(a -> b) -> List a -> List b"}],
      "binops": [{"name": "::", "comment": "...", "type": "a -> List a -> List a"}],
      "aliases": [{"name": "Pair", "comment": "...", "args": ["a"], "type": "( a, a )"}],
      "unions": [{"name": "Maybe", "comment": "...", "args": ["a"], "cases": [["Just", ["a"]]]}]}]

Fetching the payload is someone else's job; this adapter only reads bytes.
"""

from __future__ import annotations

import logging
from pathlib import Path

import orjson
from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError

from docs_type_search.domain.errors import DocsLoadError
from docs_type_search.domain.model import RawEntry, RawModuleDocs


logger = logging.getLogger(__name__)


class _ValueDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    comment: str = ""
    type: str


class _AliasDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    comment: str = ""
    args: list[str] = Field(default_factory=list)
    type: str


class _UnionDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    comment: str = ""
    args: list[str] = Field(default_factory=list)
    cases: list[tuple[str, list[str]]] = Field(default_factory=list)


class _ModuleDoc(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str
    comment: str = ""
    values: list[_ValueDoc] = Field(default_factory=list)
    binops: list[_ValueDoc] = Field(default_factory=list)
    aliases: list[_AliasDoc] = Field(default_factory=list)
    unions: list[_UnionDoc] = Field(default_factory=list)


_PAYLOAD = TypeAdapter(list[_ModuleDoc])


def _union_signature(union: _UnionDoc) -> str:
    return " ".join([union.name, *union.args])


def _constructor_arg(arg: str) -> str:
    if " " in arg and not arg.startswith(("(", "{")):
        return f"({arg})"
    return arg


def _declaration_doc(header: str, comment: str) -> str:
    """Put the declaration above the comment, separated by a blank line."""
    return f"{header}\n\n{comment}" if comment else header


def _alias_doc(alias: _AliasDoc) -> str:
    header = " ".join(["alias", alias.name, *alias.args, "=", alias.type])
    return _declaration_doc(header, alias.comment)


def _union_doc(union: _UnionDoc) -> str:
    header = f"type {_union_signature(union)}"
    if union.cases:
        cases = " | ".join(" ".join([tag, *map(_constructor_arg, args)]) for tag, args in union.cases)
        header = f"{header} = {cases}"
    return _declaration_doc(header, union.comment)


def _to_raw_module(module: _ModuleDoc) -> RawModuleDocs:
    entries: dict[str, RawEntry] = {}
    for alias in module.aliases:
        entries[alias.name] = RawEntry(raw_signature=alias.type, doc_text=_alias_doc(alias))
    for union in module.unions:
        entries[union.name] = RawEntry(raw_signature=_union_signature(union), doc_text=_union_doc(union))
    for value in [*module.values, *module.binops]:
        # Older payloads list operators among values as "(::)"
        name = value.name[1:-1] if value.name.startswith("(") and value.name.endswith(")") else value.name
        entries[name] = RawEntry(raw_signature=value.type, doc_text=value.comment)
    return RawModuleDocs(module_name=module.name, comment=module.comment, entries=entries)


def parse_docs_payload(payload: bytes | str) -> list[RawModuleDocs]:
    """Decode a ``docs.json`` payload.

    Raises:
        DocsLoadError: The payload is not JSON or does not have the expected shape
    """
    try:
        modules = _PAYLOAD.validate_python(orjson.loads(payload))
    except orjson.JSONDecodeError as exc:
        raise DocsLoadError(f"Invalid docs JSON: {exc}") from exc
    except ValidationError as exc:
        raise DocsLoadError(f"Unexpected docs layout: {exc.error_count()} validation error(s)") from exc
    return [_to_raw_module(module) for module in modules]


def load_docs_file(path: Path) -> list[RawModuleDocs]:
    """Read and decode a ``docs.json`` file from disk."""
    try:
        payload = path.read_bytes()
    except OSError as exc:
        raise DocsLoadError(f"Cannot read docs file {path}: {exc}") from exc
    modules = parse_docs_payload(payload)
    logger.debug("Loaded %d modules from %s", len(modules), path)
    return modules
