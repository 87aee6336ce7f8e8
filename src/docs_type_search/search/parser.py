"""Type-signature parser.

Turns annotation strings such as ``(a -> b) -> List a -> List b`` into the
structural tree from :mod:`docs_type_search.domain.types`.

Grammar (informal)::

    type   := app ("->" app)*
    app    := atom atom*
    atom   := IDENT | "(" ")" | "(" type ("," type)* ")"
            | "{" [IDENT "|"] [IDENT ":" type ("," IDENT ":" type)*] "}"

Every arrow in a signature is flattened into a single ``Function`` node, so
``a -> b -> c`` becomes ``Function((a, b), c)``. :func:`parse` is total: a
signature outside the grammar degrades to a ``Variable`` holding the raw text.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import NoReturn

from docs_type_search.domain.errors import TypeParseError
from docs_type_search.domain.types import (
    UNIT,
    Apply,
    Function,
    QualifiedName,
    Record,
    Tuple,
    Type,
    Variable,
    fallback_variable,
)
from docs_type_search.observability.metrics import PARSE_FALLBACKS


logger = logging.getLogger(__name__)

_IDENT = r"[A-Za-z_][A-Za-z0-9_']*"
_TOKEN_RE = re.compile(
    rf"(?P<arrow>->)|(?P<punct>[(),{{}}:|])|(?P<ident>{_IDENT}(?:\.{_IDENT})*)",
)
_WHITESPACE_RE = re.compile(r"\s+")

_ATOM_STARTS = frozenset({"(", "{"})


@dataclass(frozen=True)
class Token:
    kind: str  # "arrow", "punct", "ident" or "end"
    text: str
    position: int


def tokenize(signature: str) -> list[Token]:
    """Split a signature into tokens, ending with a sentinel ``end`` token."""
    tokens: list[Token] = []
    position = 0
    length = len(signature)
    while position < length:
        space = _WHITESPACE_RE.match(signature, position)
        if space:
            position = space.end()
            continue
        match = _TOKEN_RE.match(signature, position)
        if not match:
            raise TypeParseError(f"Unexpected character {signature[position]!r}", signature, position)
        kind = match.lastgroup or "punct"
        tokens.append(Token(kind, match.group(), position))
        position = match.end()
    tokens.append(Token("end", "", length))
    return tokens


class _Parser:
    """Recursive-descent parser over a token list."""

    def __init__(self, signature: str) -> None:
        self._signature = signature
        self._tokens = tokenize(signature)
        self._index = 0

    def parse(self) -> Type:
        result = self._type()
        self._expect_kind("end")
        return result

    # Token helpers

    def _peek(self, offset: int = 0) -> Token:
        index = min(self._index + offset, len(self._tokens) - 1)
        return self._tokens[index]

    def _advance(self) -> Token:
        token = self._peek()
        if token.kind != "end":
            self._index += 1
        return token

    def _accept(self, text: str) -> bool:
        token = self._peek()
        if token.kind in ("punct", "arrow") and token.text == text:
            self._index += 1
            return True
        return False

    def _expect(self, text: str) -> None:
        if not self._accept(text):
            self._fail(f"Expected {text!r}")

    def _expect_kind(self, kind: str) -> Token:
        token = self._peek()
        if token.kind != kind:
            self._fail(f"Expected {kind}")
        return self._advance()

    def _fail(self, message: str) -> NoReturn:
        token = self._peek()
        found = token.text or "end of input"
        raise TypeParseError(f"{message}, found {found!r}", self._signature, token.position)

    # Grammar rules

    def _type(self) -> Type:
        parts = [self._application()]
        while self._accept("->"):
            parts.append(self._application())
        if len(parts) == 1:
            return parts[0]
        return flatten_function(parts[:-1], parts[-1])

    def _application(self) -> Type:
        start = self._peek()
        head = self._atom()
        args: list[Type] = []
        while self._starts_atom():
            args.append(self._atom())
        if not args:
            return head
        if not isinstance(head, Apply) or head.args or head == UNIT:
            raise TypeParseError("Only type constructors take arguments", self._signature, start.position)
        return Apply(head.name, tuple(args))

    def _starts_atom(self) -> bool:
        token = self._peek()
        return token.kind == "ident" or (token.kind == "punct" and token.text in _ATOM_STARTS)

    def _atom(self) -> Type:
        token = self._peek()
        if token.kind == "ident":
            self._advance()
            return _identifier(token.text)
        if self._accept("("):
            return self._parenthesized()
        if self._accept("{"):
            return self._record()
        self._fail("Expected a type")

    def _parenthesized(self) -> Type:
        if self._accept(")"):
            return UNIT
        elements = [self._type()]
        while self._accept(","):
            elements.append(self._type())
        self._expect(")")
        if len(elements) == 1:
            return elements[0]
        return Tuple(tuple(elements))

    def _record(self) -> Type:
        if self._accept("}"):
            return Record(())
        extension: str | None = None
        if self._peek().kind == "ident" and self._peek(1).text == "|":
            extension = self._label()
            self._advance()
        fields = [self._field()]
        while self._accept(","):
            fields.append(self._field())
        self._expect("}")
        return Record(tuple(fields), extension)

    def _field(self) -> tuple[str, Type]:
        label = self._label()
        self._expect(":")
        return label, self._type()

    def _label(self) -> str:
        token = self._expect_kind("ident")
        if "." in token.text or not _is_variable_name(token.text):
            raise TypeParseError(f"Invalid record label {token.text!r}", self._signature, token.position)
        return token.text


def _is_variable_name(text: str) -> bool:
    return not text[0].isupper()


def _identifier(text: str) -> Type:
    if "." not in text and _is_variable_name(text):
        return Variable(text)
    return Apply(QualifiedName.from_dotted(text))


def flatten_function(params: list[Type], result: Type) -> Function:
    """Build one ``Function`` node, absorbing a function-typed result."""
    flat = list(params)
    while isinstance(result, Function):
        flat.extend(result.params)
        result = result.result
    return Function(tuple(flat), result)


def parse_strict(signature: str) -> Type:
    """Parse ``signature``, raising :class:`TypeParseError` when it is malformed."""
    return _Parser(signature).parse()


def parse_outcome(signature: str) -> tuple[Type, bool]:
    """Parse ``signature`` and report whether it degraded to the raw-text fallback."""
    try:
        return parse_strict(signature), False
    except TypeParseError as exc:
        logger.debug("Falling back to raw variable: %s", exc)
        PARSE_FALLBACKS.labels().inc()
        return fallback_variable(signature), True


def parse(signature: str) -> Type:
    """Parse ``signature`` into a type tree, never raising.

    Malformed input degrades to ``Variable(signature)``.
    """
    parsed, _ = parse_outcome(signature)
    return parsed
