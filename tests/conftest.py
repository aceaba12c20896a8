"""Shared fixtures."""

from __future__ import annotations

import pytest


class FakeHandle:
    def __init__(self, delay, callback):
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self):
        self.cancelled = True

    def fire(self):
        self.callback()


class FakeScheduler:
    """Records scheduled callbacks so tests can fire them by hand."""

    def __init__(self):
        self.handles: list[FakeHandle] = []

    def __call__(self, delay, callback):
        handle = FakeHandle(delay, callback)
        self.handles.append(handle)
        return handle


@pytest.fixture
def scheduler():
    return FakeScheduler()
