"""Structural comparison of type trees.

Two independent comparators:

- :func:`similarity` - higher is more alike, 0 is the no-match floor. This is
  the ranking metric used by the query engine.
- :func:`distance` - lower is more alike, built from fixed penalties. Kept as a
  library function for callers that want a cost instead of a reward.

Both compare names by equality first and substring second; neither unifies
variables with concrete types.
"""

from __future__ import annotations

from docs_type_search.domain.types import Apply, Function, Tuple, Type, Variable


EXACT_MATCH_SCORE = 10
PARTIAL_MATCH_SCORE = 1

VARIABLE_MISMATCH_PENALTY = 5
NAME_MISMATCH_PENALTY = 2
ARITY_MISMATCH_PENALTY = 10
VARIANT_MISMATCH_PENALTY = 100


def _is_partial(a: str, b: str) -> bool:
    return a in b or b in a


def compare_names(a: str, b: str) -> int:
    if a == b:
        return EXACT_MATCH_SCORE
    if _is_partial(a, b):
        return PARTIAL_MATCH_SCORE
    return 0


def similarity(a: Type, b: Type) -> int:
    """Score how alike two type trees are; records and cross-variant pairs score 0."""
    if isinstance(a, Function) and isinstance(b, Function):
        if len(a.params) != len(b.params):
            return 0
        return sum(map(similarity, a.params, b.params)) + similarity(a.result, b.result)

    if isinstance(a, Variable) and isinstance(b, Variable):
        return compare_names(a.name, b.name)

    if isinstance(a, Apply) and isinstance(b, Apply):
        if not a.args and not b.args:
            return compare_names(a.name.name, b.name.name)
        if len(a.args) != len(b.args):
            return 0
        return compare_names(a.name.name, b.name.name) + sum(map(similarity, a.args, b.args))

    if isinstance(a, Tuple) and isinstance(b, Tuple):
        # map() stops at the shorter tuple
        return sum(map(similarity, a.elements, b.elements))

    return 0


def _name_distance(a: str, b: str, mismatch: int) -> int:
    if a == b:
        return 0
    if _is_partial(a, b):
        return 1
    return mismatch


def distance(a: Type, b: Type) -> int:
    """Penalty-based dissimilarity; identical trees without records score 0."""
    if isinstance(a, Function) and isinstance(b, Function):
        if len(a.params) != len(b.params):
            return ARITY_MISMATCH_PENALTY * abs(len(a.params) - len(b.params))
        return sum(map(distance, a.params, b.params)) + distance(a.result, b.result)

    if isinstance(a, Variable) and isinstance(b, Variable):
        return _name_distance(a.name, b.name, VARIABLE_MISMATCH_PENALTY)

    if isinstance(a, Apply) and isinstance(b, Apply):
        if not a.args and not b.args:
            return _name_distance(a.name.name, b.name.name, NAME_MISMATCH_PENALTY)
        if len(a.args) != len(b.args):
            return ARITY_MISMATCH_PENALTY
        return (
            _name_distance(a.name.home, b.name.home, NAME_MISMATCH_PENALTY)
            + _name_distance(a.name.name, b.name.name, NAME_MISMATCH_PENALTY)
            + sum(map(distance, a.args, b.args))
        )

    if isinstance(a, Tuple) and isinstance(b, Tuple):
        return sum(map(distance, a.elements, b.elements))

    return VARIANT_MISMATCH_PENALTY
