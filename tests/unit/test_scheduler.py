"""
Unit tests for the Tk-backed scheduler.
"""

from unittest.mock import MagicMock

from tracking.scheduler import TkScheduler


def test_call_later_converts_to_milliseconds():
    widget = MagicMock()
    widget.after.return_value = "after#1"
    callback = MagicMock()

    handle = TkScheduler(widget).call_later(1.5, callback)

    widget.after.assert_called_once_with(1500, callback)
    assert handle == "after#1"


def test_cancel_ignores_missing_handle():
    widget = MagicMock()
    scheduler = TkScheduler(widget)

    scheduler.cancel(None)
    scheduler.cancel("after#1")

    widget.after_cancel.assert_called_once_with("after#1")
