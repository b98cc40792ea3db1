"""
Testing utilities for the instance factory.

Provides :class:`RecordingListener` for asserting on diagnostic events and
:func:`isolated_factory` for swapping the default factory in tests.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Optional

from .core import Factory, set_default_factory
from .diagnostics import FactoryEvent, FactoryEventType


class RecordingListener:
    """
    Diagnostic listener that keeps every event it receives.
    """

    def __init__(self):
        self.events: List[FactoryEvent] = []

    def on_event(self, event: FactoryEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: FactoryEventType) -> List[FactoryEvent]:
        return [e for e in self.events if e.type == event_type]

    def blueprints(self, event_type: FactoryEventType) -> List[Optional[str]]:
        """Blueprint names of events of one type, in emission order."""
        return [e.blueprint for e in self.of_type(event_type)]

    def reset(self) -> None:
        self.events.clear()


@contextmanager
def isolated_factory(factory: Optional[Factory] = None) -> Iterator[Factory]:
    """
    Temporarily replace the default factory.

    ``New``/``create`` and ``Blueprint.new`` go through the installed
    factory until the block exits.

    Example:
        recorder = RecordingListener()
        with isolated_factory() as factory:
            factory.diagnostics.add_listener(recorder)
            New(Counter)
    """
    factory = factory or Factory()
    previous = set_default_factory(factory)
    try:
        yield factory
    finally:
        set_default_factory(previous)
