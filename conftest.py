from functools import partial

import pytest

from logtail.receivers import receiver_base
from logtail.receivers.watch_subscription import WatchSubscription


class FakeObserver:
    """Наблюдатель без потока: события в тестах вызываются вручную."""

    instances = []

    def __init__(self):
        self.handler = None
        self.path = None
        self.daemon = False
        self.started = False
        self.stopped = False
        FakeObserver.instances.append(self)

    def schedule(self, handler, path, recursive=False):
        self.handler = handler
        self.path = path

    def start(self):
        self.started = True

    def stop(self):
        self.stopped = True

    def join(self, timeout=None):
        pass


@pytest.fixture
def fake_watch(monkeypatch):
    FakeObserver.instances = []
    monkeypatch.setattr(
        receiver_base,
        "WatchSubscription",
        partial(WatchSubscription, observer_factory=FakeObserver),
    )
    return FakeObserver.instances
