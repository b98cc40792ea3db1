"""
Fabrica Faults - Structured construction errors.

Failures are typed fault signals carrying a stable code, a domain and
metadata, so callers can tell a malformed blueprint from a declined
construction (which is reported through the ABORTED sentinel instead).

Core exports:
- Fault: Base fault class
- FaultDomain: Domain classification
- Severity: Severity levels
- ConstructionFault and its concrete subclasses
"""

from .core import (
    Fault,
    FaultDomain,
    Severity,
    DOMAIN_DEFAULTS,
)

from .domains import (
    ConstructionFault,
    InvalidInterfaceFault,
    InvalidCtorFault,
    MissingCtorFault,
    InvalidCompositionFault,
)

__all__ = [
    # Core types
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",

    # Construction faults
    "ConstructionFault",
    "InvalidInterfaceFault",
    "InvalidCtorFault",
    "MissingCtorFault",
    "InvalidCompositionFault",
]
