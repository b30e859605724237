"""Errors raised by the log engine."""

from __future__ import annotations

__all__ = [
    "EngineError",
    "InvalidArgumentError",
    "CorruptionError",
    "EngineIoError",
    "EngineCodecError",
    "EntryCompactedError",
    "EntryNotFoundError",
    "FullError",
    "OtherError",
]


class EngineError(Exception):
    """Base class for every engine failure.

    ``detail`` holds the message or the underlying exception, if any.
    """

    label = "Error"

    def __init__(self, detail: object = None) -> None:
        self.detail = detail
        super().__init__(*(() if detail is None else (detail,)))

    def __str__(self) -> str:
        if self.detail is None:
            return self.label
        return f"{self.label}: {self.detail}"


class InvalidArgumentError(EngineError, ValueError):
    """An argument or setting has a value that cannot be used."""

    label = "Invalid Argument"


class CorruptionError(EngineError):
    """Stored data failed a consistency check."""

    label = "Corruption"


class EngineIoError(EngineError):
    """An I/O operation failed; ``detail`` is the underlying error."""

    label = "IO Error"


class EngineCodecError(EngineError):
    """Decoding stored bytes failed; ``detail`` is the codec error."""

    label = "Codec Error"


class EntryCompactedError(EngineError):
    """The requested entry has already been compacted away."""

    label = "Entry Compacted"


class EntryNotFoundError(EngineError):
    """The requested entry does not exist."""

    label = "Entry Not Found"


class FullError(EngineError):
    """A batch cannot take any more data."""

    label = "Full"


class OtherError(EngineError):
    """Any other failure."""

    label = "Other Error"