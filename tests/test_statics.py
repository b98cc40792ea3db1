"""
Test 4: Blueprint statics (factory/decorators.py)
"""

import pytest

from fabrica import New, ABORTED, blueprint, static, statics, members, is_instance_of
from fabrica.factory.testing import isolated_factory, RecordingListener
from fabrica.factory.diagnostics import FactoryEventType


# ============================================================================
# @blueprint
# ============================================================================

class TestBlueprintDecorator:

    def test_bare_decorator(self):
        @blueprint
        def Widget():
            return {"kind": "widget"}

        widget = Widget.new()
        assert widget.kind == "widget"
        assert is_instance_of(widget, Widget)

    def test_statics_attached(self):
        @blueprint(created=0, label="ticket")
        def Ticket():
            number = 0

            def ctor():
                nonlocal number
                Ticket.created += 1
                number = Ticket.created

            return {"ctor": ctor, "number": lambda: number}

        assert Ticket.new().number() == 1
        assert Ticket.new().number() == 2
        assert Ticket.created == 2
        assert Ticket.label == "ticket"

    def test_statics_not_merged_into_instances(self):
        @blueprint(shared=[1, 2])
        def Widget():
            return {"kind": "widget"}

        widget = Widget.new()
        assert members(widget) == ["kind"]
        assert "shared" not in widget

    def test_display_name(self):
        @blueprint(name="FancyWidget")
        def impl():
            return {"kind": "widget"}

        assert repr(impl.new()) == "<FancyWidget instance: kind>"

    def test_new_routes_arguments(self):
        @blueprint
        def Named():
            name = None

            def ctor(value):
                nonlocal name
                name = value

            return {"ctor": ctor, "name": lambda: name}

        assert Named.new("bob").name() == "bob"

    def test_new_uses_current_default_factory(self):
        @blueprint
        def Widget():
            return {"kind": "widget"}

        recorder = RecordingListener()
        with isolated_factory() as factory:
            factory.diagnostics.add_listener(recorder)
            Widget.new()
        assert recorder.blueprints(FactoryEventType.CONSTRUCTION_SUCCESS) == ["Widget"]


# ============================================================================
# static() / statics()
# ============================================================================

class TestStaticHelpers:

    def test_static_attaches_function(self, Counter):
        def Counted():
            def ctor():
                if not hasattr(Counted, "counter"):
                    Counted.counter = New(Counter)
                Counted.counter.advance()

            return {"ctor": ctor, "ok": True}

        @static(Counted)
        def count():
            return Counted.counter.value() if hasattr(Counted, "counter") else 0

        assert Counted.count() == 0
        New(Counted)
        New(Counted)
        assert Counted.count() == 2

    def test_static_custom_name(self):
        def Widget():
            return {"kind": "widget"}

        @static(Widget, name="describe")
        def _describe():
            return "a widget"

        assert Widget.describe() == "a widget"

    def test_statics_listing(self):
        @blueprint(created=0)
        def Widget():
            return {"kind": "widget"}

        @static(Widget)
        def reset():
            Widget.created = 0

        assert statics(Widget) == {"created": 0, "reset": reset}

    def test_statics_of_plain_callable(self):
        assert statics(print) == {}

    def test_lazy_counter_pattern(self, Counted):
        assert "counter" not in statics(Counted)
        New(Counted, "element")
        assert "counter" in statics(Counted)
        assert New(Counted) is ABORTED
        assert Counted.count() == 1
