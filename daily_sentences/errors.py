"""Exception hierarchy for sentence acquisition and storage."""
from __future__ import annotations


class DailySentencesError(Exception):
    """Base class for all errors raised by this package."""


class SourceError(DailySentencesError):
    """A single content tier failed. The chain absorbs it and tries the next tier."""


class ConfigurationError(SourceError):
    """A tier is missing something it needs before it can run (e.g. an API key)."""


class TransportError(SourceError):
    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class FormatError(SourceError):
    """The response did not match the exact expected schema."""


class ChainExhaustedError(DailySentencesError):
    """Every tier of a content chain failed."""

    def __init__(self, failures: list[tuple[str, SourceError]]):
        self.failures = failures
        detail = "; ".join(f"{name}: {err}" for name, err in failures) or "no providers"
        super().__init__(f"All content sources failed ({detail})")


class PersistenceError(DailySentencesError):
    """The underlying store could not complete an operation."""
