"""Test harness for formwidgets.

Re-exports all public API for convenient imports:
    from tests.harness import run_app, press_and_settle, FakeView, ...
"""

from tests.harness.app_runner import run_app
from tests.harness.fakes import FakeView
from tests.harness.interactions import (
    press_and_settle,
    press_sequence,
    click_and_settle,
    resize_and_settle,
)
from tests.harness.messages import MessageCapture

__all__ = [
    "run_app",
    "FakeView",
    "press_and_settle",
    "press_sequence",
    "click_and_settle",
    "resize_and_settle",
    "MessageCapture",
]
