"""Deferred callbacks on the single UI thread."""

from typing import Any, Callable, Protocol


class SchedulerProtocol(Protocol):
    """
    Protocol for running callbacks later on the caller's thread.

    The countdown tick and the spaced-out bells are both scheduled
    through this, so nothing ever needs a worker thread or a lock.
    """

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> Any:
        """
        Run `callback` once after `delay_seconds`.

        Returns:
            Opaque handle accepted by cancel()
        """
        ...

    def cancel(self, handle: Any) -> None:
        """Cancel a pending callback. Unknown or already-run handles are ignored."""
        ...


class TkScheduler:
    """Scheduler backed by a Tk widget's after() loop."""

    def __init__(self, widget):
        """
        Args:
            widget: Any Tk widget (usually the root window)
        """
        self.widget = widget

    def call_later(self, delay_seconds: float, callback: Callable[[], None]) -> str:
        return self.widget.after(int(round(delay_seconds * 1000)), callback)

    def cancel(self, handle: str) -> None:
        if handle is not None:
            self.widget.after_cancel(handle)
