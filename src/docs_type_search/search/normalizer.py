"""Canonical renaming of type variables.

Two signatures that differ only in the names their authors picked for type
variables normalize to the same tree: free variables are renamed in order of
first appearance to ``a, b, ..., z, aa, bb, ..., zz, aaa, ...``.

The labels repeat a single letter (``aa, bb``), they do not count in base 26
(``aa, ab``). The reserved class names ``number`` and ``comparable`` are never
renamed, and neither is a record's extension variable.
"""

from __future__ import annotations

from collections.abc import Iterator

from docs_type_search.domain.types import Apply, Function, Record, Tuple, Type, Variable


RESERVED_NAMES = ("number", "comparable")

VariableMapping = dict[str, str]


def canonical_label(k: int) -> str:
    """Label for the ``k``-th (0-indexed) newly seen variable."""
    letter = chr(ord("a") + k % 26)
    return letter * (k // 26 + 1)


def free_variables(t: Type) -> Iterator[str]:
    """Yield variable names in normalization traversal order, with repeats."""
    if isinstance(t, Function):
        for param in t.params:
            yield from free_variables(param)
        yield from free_variables(t.result)
    elif isinstance(t, Variable):
        yield t.name
    elif isinstance(t, Apply):
        for arg in t.args:
            yield from free_variables(arg)
    elif isinstance(t, Tuple):
        for element in t.elements:
            yield from free_variables(element)
    elif isinstance(t, Record):
        for _, value in t.fields:
            yield from free_variables(value)


def build_mapping(t: Type) -> VariableMapping:
    mapping: VariableMapping = {name: name for name in RESERVED_NAMES}
    seen = 0
    for name in free_variables(t):
        if name not in mapping:
            mapping[name] = canonical_label(seen)
            seen += 1
    return mapping


def rename(t: Type, mapping: VariableMapping) -> Type:
    """Rewrite every variable of ``t`` through ``mapping``; unmapped names pass through."""
    if isinstance(t, Function):
        return Function(tuple(rename(param, mapping) for param in t.params), rename(t.result, mapping))
    if isinstance(t, Variable):
        return Variable(mapping.get(t.name, t.name))
    if isinstance(t, Apply):
        return Apply(t.name, tuple(rename(arg, mapping) for arg in t.args))
    if isinstance(t, Tuple):
        return Tuple(tuple(rename(element, mapping) for element in t.elements))
    if isinstance(t, Record):
        return Record(tuple((label, rename(value, mapping)) for label, value in t.fields), t.extension)
    raise TypeError(f"Not a type: {t!r}")


def normalize(t: Type) -> Type:
    """Return ``t`` with its free variables renamed to canonical labels."""
    return rename(t, build_mapping(t))
