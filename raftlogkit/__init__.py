"""Number codecs, configuration, consistency checking, event hooks and file I/O for a Raft log store."""

__version__ = "0.1.0"

__all__ = [
    "codec",
    "config",
    "consistency",
    "errors",
    "event_listener",
    "filesystem",
]