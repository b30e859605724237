"""Engine configuration and human-readable byte sizes."""

from __future__ import annotations

import logging
import re
import tomllib
from dataclasses import dataclass, field, fields
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Callable, Mapping

import tomli_w

from .errors import InvalidArgumentError, OtherError

__all__ = ["RecoveryMode", "ReadableSize", "Config"]

_log = logging.getLogger(__name__)

B = 1
KB = 1024
MB = KB * 1024
GB = MB * 1024
TB = GB * 1024
PB = TB * 1024

_U64_MAX = (1 << 64) - 1

MIN_RECOVERY_READ_BLOCK_SIZE = 512
MIN_RECOVERY_THREADS = 1

_UNITS = {
    "": B,
    "B": B,
    "K": KB,
    "KB": KB,
    "KIB": KB,
    "M": MB,
    "MB": MB,
    "MIB": MB,
    "G": GB,
    "GB": GB,
    "GIB": GB,
    "T": TB,
    "TB": TB,
    "TIB": TB,
    "P": PB,
    "PB": PB,
    "PIB": PB,
}
_DISPLAY_UNITS = (("PB", PB), ("TB", TB), ("GB", GB), ("MB", MB), ("KB", KB))
_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*([A-Za-z]*)\s*$")

_LEGACY_TAIL_MODE = "tolerate-corrupted-tail-records"


class RecoveryMode(Enum):
    """How to deal with file corruption during recovery."""

    ABSOLUTE_CONSISTENCY = "absolute-consistency"
    TOLERATE_TAIL_CORRUPTION = "tolerate-tail-corruption"
    TOLERATE_ANY_CORRUPTION = "tolerate-any-corruption"

    @classmethod
    def _missing_(cls, value: object) -> RecoveryMode | None:
        if value == _LEGACY_TAIL_MODE:
            return cls.TOLERATE_TAIL_CORRUPTION
        return None


def _serialize_mode(mode: RecoveryMode) -> str:
    # The older spelling is written so that older readers still understand it.
    if mode is RecoveryMode.TOLERATE_TAIL_CORRUPTION:
        return _LEGACY_TAIL_MODE
    return mode.value


@dataclass(frozen=True, order=True)
class ReadableSize:
    """A byte count that reads and prints as e.g. ``"16KB"``."""

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidArgumentError(f"size must be an integer, got {self.value!r}")
        if not 0 <= self.value <= _U64_MAX:
            raise InvalidArgumentError(f"size out of range: {self.value}")

    @classmethod
    def kb(cls, count: int) -> ReadableSize:
        return cls(count * KB)

    @classmethod
    def mb(cls, count: int) -> ReadableSize:
        return cls(count * MB)

    @classmethod
    def gb(cls, count: int) -> ReadableSize:
        return cls(count * GB)

    @classmethod
    def parse(cls, text: str) -> ReadableSize:
        """Parse a size such as ``"4MB"``, ``"512B"`` or ``"1.5KB"``."""
        match = _SIZE_RE.match(text)
        if match is None:
            raise InvalidArgumentError(f"invalid size: {text!r}")
        number, unit = match.groups()
        multiplier = _UNITS.get(unit.upper())
        if multiplier is None:
            raise InvalidArgumentError(f"invalid size unit in {text!r}")
        if "." in number:
            try:
                value = int(Decimal(number) * multiplier)
            except InvalidOperation as exc:
                raise InvalidArgumentError(f"invalid size: {text!r}") from exc
        else:
            value = int(number) * multiplier
        return cls(value)

    @classmethod
    def _coerce(cls, raw: Any) -> ReadableSize:
        if isinstance(raw, ReadableSize):
            return raw
        if isinstance(raw, str):
            return cls.parse(raw)
        return cls(raw)

    def __str__(self) -> str:
        if self.value == 0:
            return "0KB"
        for name, unit in _DISPLAY_UNITS:
            if self.value % unit == 0:
                return f"{self.value // unit}{name}"
        return f"{self.value}B"


def _as_str(raw: Any) -> str:
    if not isinstance(raw, str):
        raise InvalidArgumentError(f"expected a string, got {raw!r}")
    return raw


def _as_mode(raw: Any) -> RecoveryMode:
    if isinstance(raw, RecoveryMode):
        return raw
    try:
        return RecoveryMode(raw)
    except ValueError as exc:
        raise InvalidArgumentError(f"unknown recovery mode: {raw!r}") from exc


def _as_count(raw: Any) -> int:
    if isinstance(raw, bool) or not isinstance(raw, int) or raw < 0:
        raise InvalidArgumentError(f"expected a non-negative integer, got {raw!r}")
    return raw


def _as_ratio(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise InvalidArgumentError(f"expected a number, got {raw!r}")
    return float(raw)


def _as_optional_size(raw: Any) -> ReadableSize | None:
    return None if raw is None else ReadableSize._coerce(raw)


_CONVERTERS: dict[str, Callable[[Any], Any]] = {
    "dir": _as_str,
    "recovery_mode": _as_mode,
    "recovery_read_block_size": ReadableSize._coerce,
    "recovery_threads": _as_count,
    "batch_compression_threshold": ReadableSize._coerce,
    "bytes_per_sync": ReadableSize._coerce,
    "target_file_size": ReadableSize._coerce,
    "purge_threshold": ReadableSize._coerce,
    "purge_rewrite_threshold": _as_optional_size,
    "purge_rewrite_garbage_ratio": _as_ratio,
}


def _kebab(name: str) -> str:
    return name.replace("_", "-")


@dataclass
class Config:
    """Engine settings. Keys are written in kebab-case in TOML."""

    dir: str = ""
    recovery_mode: RecoveryMode = RecoveryMode.TOLERATE_TAIL_CORRUPTION
    recovery_read_block_size: ReadableSize = field(default_factory=lambda: ReadableSize.kb(16))
    recovery_threads: int = 4
    batch_compression_threshold: ReadableSize = field(default_factory=lambda: ReadableSize.kb(8))
    bytes_per_sync: ReadableSize = field(default_factory=lambda: ReadableSize.mb(4))
    target_file_size: ReadableSize = field(default_factory=lambda: ReadableSize.mb(128))
    purge_threshold: ReadableSize = field(default_factory=lambda: ReadableSize.gb(10))
    purge_rewrite_threshold: ReadableSize | None = None
    purge_rewrite_garbage_ratio: float = 0.6

    def sanitize(self) -> None:
        """Reject impossible settings and fill in or raise too-small ones."""
        if self.purge_threshold.value < self.target_file_size.value:
            raise OtherError("purge-threshold < target-file-size")
        if self.purge_rewrite_threshold is None:
            self.purge_rewrite_threshold = ReadableSize(
                max(self.purge_threshold.value // 10, self.target_file_size.value)
            )
        if self.bytes_per_sync.value == 0:
            self.bytes_per_sync = ReadableSize(_U64_MAX)
        min_block = ReadableSize(MIN_RECOVERY_READ_BLOCK_SIZE)
        if self.recovery_read_block_size < min_block:
            _log.warning(
                "recovery-read-block-size (%s) is too small, setting it to %s",
                self.recovery_read_block_size,
                min_block,
            )
            self.recovery_read_block_size = min_block
        if self.recovery_threads < MIN_RECOVERY_THREADS:
            _log.warning(
                "recovery-threads (%s) is too small, setting it to %s",
                self.recovery_threads,
                MIN_RECOVERY_THREADS,
            )
            self.recovery_threads = MIN_RECOVERY_THREADS

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Config:
        """Build a config from kebab-case keys; missing keys keep defaults."""
        by_key = {_kebab(f.name): f.name for f in fields(cls)}
        values = {
            by_key[key]: _CONVERTERS[by_key[key]](raw)
            for key, raw in data.items()
            if key in by_key
        }
        return cls(**values)

    def to_dict(self) -> dict[str, Any]:
        """Return kebab-case keys with TOML-friendly values; unset options are left out."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, RecoveryMode):
                value = _serialize_mode(value)
            elif isinstance(value, ReadableSize):
                value = str(value)
            result[_kebab(f.name)] = value
        return result

    @classmethod
    def from_toml(cls, text: str) -> Config:
        try:
            data = tomllib.loads(text)
        except tomllib.TOMLDecodeError as exc:
            raise InvalidArgumentError(f"invalid TOML: {exc}") from exc
        return cls.from_dict(data)

    def to_toml(self) -> str:
        return tomli_w.dumps(self.to_dict())