"""Custom exceptions for library resolution logic."""

from __future__ import annotations


class LibraryError(Exception):
    """Base class for library resolution failures."""


class CallParseError(LibraryError):
    """Raised when a library call string has malformed argument syntax."""

    def __init__(self, *, char: str, position: int, source: str) -> None:
        super().__init__(
            "Cannot parse library arguments: unexpected char "
            f"'{char}' on position {position} in arguments string '{source}'"
        )
        self.char = char
        self.position = position
        self.source = source


class DescriptorParseError(LibraryError):
    """Raised when descriptor JSON cannot be decoded into a descriptor."""

    def __init__(
        self,
        message: str,
        *,
        actual_type: str | None = None,
        name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.actual_type = actual_type
        self.name = name


class MissingVariableError(LibraryError):
    """Raised when strict substitution meets an unmapped ``${var}``."""

    def __init__(self, message: str, *, missing: list[str], text: str) -> None:
        super().__init__(message)
        self.missing = missing
        self.text = text


class ArgumentBindingError(LibraryError):
    """Raised when call arguments do not fit a library's parameters."""

    def __init__(self, message: str, *, library: str, reason: str) -> None:
        super().__init__(message)
        self.library = library
        self.reason = reason


class LibraryNotFoundError(LibraryError):
    """Raised when an invocation names a library with no known descriptor."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown library: {name}")
        self.name = name
