"""Domain model - raw documentation input and extracted chunks.

Raw inputs arrive from an external fetch collaborator and are validated with
Pydantic (frozen models, so a loaded module cannot change under the indexer).
Chunks are plain frozen dataclasses: they are produced internally and never
need validation.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from pydantic import BaseModel, ConfigDict, Field


class RawEntry(BaseModel):
    """One documented value, alias, union or operator as delivered upstream."""

    model_config = ConfigDict(frozen=True)

    raw_signature: str
    doc_text: str = ""


class RawModuleDocs(BaseModel):
    """Documentation for one module: its ``@docs`` comment and entry table."""

    model_config = ConfigDict(frozen=True)

    module_name: str = Field(min_length=1)
    comment: str = ""
    entries: dict[str, RawEntry] = Field(default_factory=dict)


@dataclass(frozen=True)
class Prose:
    text: str


@dataclass(frozen=True)
class NamedEntry:
    """Reference to a documented entry, in the position the comment lists it."""

    entry_name: str
    package_id: str = ""


DocChunk = Union[Prose, NamedEntry]
