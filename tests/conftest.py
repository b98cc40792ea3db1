"""
Shared test fixtures and blueprints for the Fabrica test suite.
"""

import pytest

from fabrica import New, ABORTED, Accessor
from fabrica.factory.testing import isolated_factory, RecordingListener


# ============================================================================
# Blueprint builders
# ============================================================================
#
# Blueprints are rebuilt per test so statics attached to them never leak
# between tests.


def make_counter():
    def Counter():
        count = 0

        def advance():
            nonlocal count
            count += 1
            return count

        def reset(n=0):
            nonlocal count
            count = n

        return {
            "advance": advance,
            "reset": reset,
            "value": lambda: count,
        }

    return Counter


def make_c2_c3():
    def C2():
        v = -1

        def ctor(value=-1):
            nonlocal v
            v = value

        return {"ctor": ctor, "getC2V": lambda: v}

    def C3():
        v = -1

        def ctor(value=-1):
            nonlocal v
            v = value
            return New(C2, v - 1)

        return {"ctor": ctor, "getC3V": lambda: v}

    return C2, C3


def make_counted(counter_blueprint):
    """Blueprint keeping a lazily created, shared tally of constructions."""

    def Counted():
        def ctor(element=None):
            if element is None:
                return ABORTED
            if not hasattr(Counted, "counter"):
                Counted.counter = New(counter_blueprint)
            Counted.counter.advance()

        return {"ctor": ctor, "kind": lambda: "counted"}

    Counted.count = lambda: Counted.counter.value() if hasattr(Counted, "counter") else 0
    return Counted


def make_thermometer():
    def Thermometer():
        celsius = 0.0

        def get_fahrenheit():
            return celsius * 9 / 5 + 32

        def set_fahrenheit(value):
            nonlocal celsius
            celsius = (value - 32) * 5 / 9

        return {
            "fahrenheit": Accessor(get_fahrenheit, set_fahrenheit),
            "celsius": Accessor(lambda: celsius),
        }

    return Thermometer


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def factory():
    """Fresh default factory per test."""
    with isolated_factory() as fresh:
        yield fresh


@pytest.fixture
def recorder(factory):
    listener = RecordingListener()
    factory.diagnostics.add_listener(listener)
    return listener


@pytest.fixture
def Counter():
    return make_counter()


@pytest.fixture
def C2_C3():
    return make_c2_c3()


@pytest.fixture
def Counted(Counter):
    return make_counted(Counter)


@pytest.fixture
def Thermometer():
    return make_thermometer()
