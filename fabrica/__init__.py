"""
Fabrica - Closure-backed instances without classes

A blueprint is a plain function. Its local variables are the private
state, the mapping it returns is the public interface:

    def Counter():
        count = 0

        def advance():
            nonlocal count
            count += 1
            return count

        def reset(n=0):
            nonlocal count
            count = n

        return {"advance": advance, "reset": reset, "value": lambda: count}

    counter = New(Counter)
    counter.reset(100)
    counter.advance()   # 101

Complete integration of:
- Factory: descriptor validation, ctor routing, abort, composition
- Faults: structured construction errors
- Diagnostics: construction events over stdlib logging
- Config: layered YAML / .env / environment configuration
"""

__version__ = "0.3.0"

# ============================================================================
# Factory
# ============================================================================

from .factory import (
    Factory,
    BlueprintMeta,
    New,
    create,
    get_default_factory,
    set_default_factory,
    Accessor,
    Instance,
    members,
    blueprint_of,
    is_instance_of,
    ABORTED,
    is_aborted,
    Composed,
    blueprint,
    static,
    statics,
    FactoryEventType,
    ConsoleDiagnosticListener,
)

# ============================================================================
# Faults
# ============================================================================

from .faults import (
    Fault,
    FaultDomain,
    Severity,
    ConstructionFault,
    InvalidInterfaceFault,
    InvalidCtorFault,
    MissingCtorFault,
    InvalidCompositionFault,
)

# ============================================================================
# Config
# ============================================================================

from .config import ConfigLoader, ConfigError, FactoryConfig


__all__ = [
    # Factory
    "Factory",
    "BlueprintMeta",
    "New",
    "create",
    "get_default_factory",
    "set_default_factory",
    "Accessor",
    "Instance",
    "members",
    "blueprint_of",
    "is_instance_of",
    "ABORTED",
    "is_aborted",
    "Composed",
    "blueprint",
    "static",
    "statics",
    "FactoryEventType",
    "ConsoleDiagnosticListener",

    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "ConstructionFault",
    "InvalidInterfaceFault",
    "InvalidCtorFault",
    "MissingCtorFault",
    "InvalidCompositionFault",

    # Config
    "ConfigLoader",
    "ConfigError",
    "FactoryConfig",
]
