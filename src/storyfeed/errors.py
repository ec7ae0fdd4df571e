"""Exception hierarchy for storyfeed.

Decoders and the fetch pipeline report these as ``Failure`` values rather
than raising them; only the transport raises, and only for connection-level
failures.
"""

from __future__ import annotations


class StoryfeedError(Exception):
    """Base exception for all storyfeed errors."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint = hint


class ConfigurationError(StoryfeedError):
    """Configuration validation or resolution failed."""


class TransportError(StoryfeedError):
    """A network call did not produce a successful response.

    ``status_code`` is ``None`` when no response was received at all
    (connection refused, DNS failure, timeout).
    """

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.status_code = status_code
        self.url = url


class DecodeError(StoryfeedError):
    """Payload does not match the expected schema."""

    def __init__(self, message: str, *, path: str = "$") -> None:
        super().__init__(message)
        self.path = path


class MissingFieldError(DecodeError):
    """A required field is absent from the payload."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Error at: `$.{field}` required field is missing", path=f"$.{field}")
        self.field = field


class TypeMismatchError(DecodeError):
    """A field is present but holds the wrong primitive type."""

    def __init__(self, field: str, expected: str, got: object) -> None:
        path = f"$.{field}" if field else "$"
        super().__init__(
            f"Error at: `{path}` expecting {expected} but instead got: {got!r}",
            path=path,
        )
        self.field = field
        self.expected = expected
