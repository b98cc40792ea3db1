"""
Fabrica Instance Factory

Builds sealed public-facing objects from blueprints: zero-argument
callables whose closures hold private state and whose returned mapping
is the public interface.

Key Features:
- Explicit ctor routing, with MissingCtor/InvalidCtor faults
- Construction abort through the ABORTED sentinel
- Composition of other instances, first writer wins
- Explicit identity tags instead of inheritance
- Blueprint-level statics
- Diagnostics events for every construction
"""

from .core import (
    BlueprintMeta,
    ConstructCtx,
    Factory,
    CTOR_KEY,
    COMPOSE_KEYS,
    RESERVED_KEYS,
    create,
    New,
    get_default_factory,
    set_default_factory,
)

from .instance import (
    Accessor,
    Instance,
    members,
    own_members,
    blueprint_of,
    is_instance_of,
)

from .composition import (
    ABORTED,
    is_aborted,
    Composed,
    NoComposition,
    One,
    Many,
    Aborted,
    CompositionPlan,
    plan_composition,
    merge_members,
)

from .decorators import (
    blueprint,
    static,
    statics,
)

from .diagnostics import (
    FactoryDiagnostics,
    FactoryEvent,
    FactoryEventType,
    ConsoleDiagnosticListener,
)

__all__ = [
    # Core
    "BlueprintMeta",
    "ConstructCtx",
    "Factory",
    "CTOR_KEY",
    "COMPOSE_KEYS",
    "RESERVED_KEYS",
    "create",
    "New",
    "get_default_factory",
    "set_default_factory",

    # Instances
    "Accessor",
    "Instance",
    "members",
    "own_members",
    "blueprint_of",
    "is_instance_of",

    # Composition
    "ABORTED",
    "is_aborted",
    "Composed",
    "NoComposition",
    "One",
    "Many",
    "Aborted",
    "CompositionPlan",
    "plan_composition",
    "merge_members",

    # Statics
    "blueprint",
    "static",
    "statics",

    # Diagnostics
    "FactoryDiagnostics",
    "FactoryEvent",
    "FactoryEventType",
    "ConsoleDiagnosticListener",
]
