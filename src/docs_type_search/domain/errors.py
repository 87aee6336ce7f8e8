"""Exception hierarchy for docs-type-search."""


class DocsTypeSearchError(Exception):
    """Base class for all errors raised by this package."""


class TypeParseError(DocsTypeSearchError, ValueError):
    """Raised by the strict parser when a signature falls outside the grammar."""

    def __init__(self, message: str, signature: str, position: int) -> None:
        super().__init__(f"{message} at column {position} in {signature!r}")
        self.signature = signature
        self.position = position


class IndexCorruptionError(DocsTypeSearchError, KeyError):
    """A name listed in a ``@docs`` directive has no matching documented entry.

    The exported-symbol table and the documented list have diverged upstream, so
    the module cannot be indexed.
    """

    def __init__(self, entry_name: str, module_name: str = "") -> None:
        super().__init__(entry_name)
        self.entry_name = entry_name
        self.module_name = module_name

    def __str__(self) -> str:
        where = f" in module {self.module_name}" if self.module_name else ""
        return f"docs have been corrupted, could not find {self.entry_name!r}{where}"


class DocsLoadError(DocsTypeSearchError, RuntimeError):
    """Raised when a docs payload cannot be read or does not match the expected shape."""
