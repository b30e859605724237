"""Callbacks notified on events inside the engine."""

from __future__ import annotations

from typing import Any, Callable

__all__ = ["EventListener"]

_Hook = Callable[[Any], Any]


class EventListener:
    """Base class of engine event hooks.

    Each hook can be overridden in a subclass or supplied as a callable when
    the listener is built. A hook that is neither does nothing. Hooks may be
    called from different threads, some of them while a lock on one log
    queue is held.
    """

    _on_new_log_file: _Hook | None = None
    _on_append: _Hook | None = None
    _on_apply: _Hook | None = None
    _on_purge_barrier: _Hook | None = None
    _on_purge: _Hook | None = None

    def __init__(
        self,
        *,
        on_new_log_file: _Hook | None = None,
        on_append: _Hook | None = None,
        on_apply: _Hook | None = None,
        on_purge_barrier: _Hook | None = None,
        on_purge: _Hook | None = None,
    ) -> None:
        self._on_new_log_file = on_new_log_file
        self._on_append = on_append
        self._on_apply = on_apply
        self._on_purge_barrier = on_purge_barrier
        self._on_purge = on_purge

    @staticmethod
    def _dispatch(hook: _Hook | None, argument: Any) -> Any:
        return hook(argument) if hook is not None else None

    def post_new_log_file(self, file_id: Any) -> None:
        """Called after a new log file is created."""
        self._dispatch(self._on_new_log_file, file_id)

    def on_append_log_file(self, handle: Any) -> None:
        """Called before a log batch is written into a log file."""
        self._dispatch(self._on_append, handle)

    def post_apply_memtables(self, file_id: Any) -> None:
        """Called after a log batch has been applied to the memtables."""
        self._dispatch(self._on_apply, file_id)

    def first_file_not_ready_for_purge(self, queue: Any) -> int | None:
        """Return the oldest file sequence number that must not be purged yet."""
        return self._dispatch(self._on_purge_barrier, queue)

    def post_purge(self, file_id: Any) -> None:
        """Called after a log file is purged."""
        self._dispatch(self._on_purge, file_id)