"""
Fabrica Faults - Construction fault types.

Every failure the instance factory detects is raised as one of these:
- InvalidInterfaceFault: blueprint did not yield a usable descriptor
- InvalidCtorFault: reserved ``ctor`` key holds a non-callable
- MissingCtorFault: arguments supplied but nothing to receive them
- InvalidCompositionFault: a composition target is malformed
"""

from typing import Any, Optional
from .core import Fault, FaultDomain, Severity


class ConstructionFault(Fault):
    """Base class for instance construction faults."""

    def __init__(
        self,
        code: str,
        message: str,
        *,
        severity: Severity = Severity.ERROR,
        metadata: Optional[dict[str, Any]] = None,
    ):
        super().__init__(
            code=code,
            message=message,
            domain=FaultDomain.CONSTRUCTION,
            severity=severity,
            retryable=False,
            metadata=metadata,
        )

    @property
    def blueprint(self) -> Optional[str]:
        """Name of the blueprint being constructed when the fault was raised."""
        return self.metadata.get("blueprint")


class InvalidInterfaceFault(ConstructionFault):
    """Blueprint invocation did not yield a well-formed descriptor."""

    def __init__(self, blueprint: str, reason: str, **kwargs):
        super().__init__(
            code="INVALID_INTERFACE",
            message=f"Blueprint '{blueprint}' returned an invalid interface: {reason}",
            metadata={"blueprint": blueprint, "reason": reason, **kwargs.get("metadata", {})},
        )


class InvalidCtorFault(ConstructionFault):
    """Reserved constructor key held a non-callable value."""

    def __init__(self, blueprint: str, value: Any, **kwargs):
        kind = type(value).__name__
        super().__init__(
            code="INVALID_CTOR",
            message=f"Blueprint '{blueprint}' declares a non-callable ctor ({kind})",
            metadata={"blueprint": blueprint, "ctor_type": kind, **kwargs.get("metadata", {})},
        )


class MissingCtorFault(ConstructionFault):
    """Arguments were supplied but the descriptor declares no constructor."""

    def __init__(self, blueprint: str, arg_count: int, **kwargs):
        super().__init__(
            code="MISSING_CTOR",
            message=(
                f"Blueprint '{blueprint}' received {arg_count} argument(s) "
                f"but declares no ctor to receive them"
            ),
            metadata={"blueprint": blueprint, "arg_count": arg_count, **kwargs.get("metadata", {})},
        )


class InvalidCompositionFault(ConstructionFault):
    """A composition target was malformed or failed its own construction."""

    def __init__(
        self,
        blueprint: str,
        reason: str,
        *,
        index: Optional[int] = None,
        cause: Optional[BaseException] = None,
        **kwargs,
    ):
        where = f" (target #{index})" if index is not None else ""
        super().__init__(
            code="INVALID_COMPOSITION",
            message=f"Blueprint '{blueprint}' has an invalid composition{where}: {reason}",
            metadata={
                "blueprint": blueprint,
                "reason": reason,
                "index": index,
                **kwargs.get("metadata", {}),
            },
        )
        if cause is not None:
            self.metadata["_cause"] = cause
            self.__cause__ = cause
