"""Render type trees back to signature text.

Output re-parses to an equal tree: function-typed parameters and applied
arguments are parenthesized, everything else is printed bare.
"""

from __future__ import annotations

from docs_type_search.domain.types import Apply, Function, Record, Tuple, Type, Variable


def render(t: Type, *, qualified: bool = False) -> str:
    """Render ``t`` as an annotation string (``(a -> b) -> List a -> List b``)."""
    if isinstance(t, Function):
        params = [_render_param(param, qualified) for param in t.params]
        return " -> ".join([*params, render(t.result, qualified=qualified)])
    if isinstance(t, Variable):
        return t.name
    if isinstance(t, Apply):
        name = str(t.name) if qualified else t.name.name
        if not t.args:
            return name
        return " ".join([name, *(_render_arg(arg, qualified) for arg in t.args)])
    if isinstance(t, Tuple):
        return "( " + ", ".join(render(element, qualified=qualified) for element in t.elements) + " )"
    if isinstance(t, Record):
        return _render_record(t, qualified)
    raise TypeError(f"Not a type: {t!r}")


def _render_param(t: Type, qualified: bool) -> str:
    text = render(t, qualified=qualified)
    return f"({text})" if isinstance(t, Function) else text


def _render_arg(t: Type, qualified: bool) -> str:
    text = render(t, qualified=qualified)
    if isinstance(t, Function) or (isinstance(t, Apply) and t.args):
        return f"({text})"
    return text


def _render_record(t: Record, qualified: bool) -> str:
    if not t.fields:
        return "{}"
    fields = ", ".join(f"{label} : {render(value, qualified=qualified)}" for label, value in t.fields)
    if t.extension:
        return f"{{ {t.extension} | {fields} }}"
    return f"{{ {fields} }}"
