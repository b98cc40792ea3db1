"""
Composition planning and member merging.

A ctor's return value (and a descriptor's ``compose`` entry) can take
several shapes. They are normalised into one tagged plan before anything
is merged:

    None                 -> NoComposition
    False / ABORTED      -> Aborted        (ctor return value only)
    target               -> One(target)
    [target, ...]        -> Many((target, ...))

A target is an Instance, a Composed(blueprint, *args) pair, or a bare
blueprint that takes no arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Tuple

from ..faults import InvalidCompositionFault
from .instance import Instance


# ============================================================================
# Abort sentinel
# ============================================================================

class _AbortSentinel:
    """Falsy singleton returned when a ctor declines construction."""

    __slots__ = ()
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "ABORTED"

    def __reduce__(self):
        return "ABORTED"


ABORTED = _AbortSentinel()


def is_aborted(result: Any) -> bool:
    """True if ``result`` is the abort sentinel."""
    return result is ABORTED


# ============================================================================
# Composition targets
# ============================================================================

class Composed:
    """
    Blueprint plus constructor arguments.

    Built through the same factory when the outer instance merges it,
    after the outer ctor has run.

    Example:
        def Car():
            return {
                "drive": lambda: "vroom",
                "compose": [Composed(Engine, 300), Wheels],
            }
    """

    __slots__ = ("blueprint", "args", "kwargs")

    def __init__(self, blueprint: Callable[[], Any], *args: Any, **kwargs: Any):
        self.blueprint = blueprint
        self.args = args
        self.kwargs = kwargs

    def __repr__(self) -> str:
        name = getattr(self.blueprint, "__name__", repr(self.blueprint))
        parts = [repr(a) for a in self.args]
        parts.extend(f"{k}={v!r}" for k, v in self.kwargs.items())
        return f"Composed({name}{', ' if parts else ''}{', '.join(parts)})"


def is_target(value: Any) -> bool:
    """Whether ``value`` can stand as a single composition target."""
    if isinstance(value, (Instance, Composed)):
        return True
    return callable(value)


# ============================================================================
# Plans
# ============================================================================

@dataclass(frozen=True)
class NoComposition:
    """Nothing to merge."""
    pass


@dataclass(frozen=True)
class One:
    """A single target."""
    target: Any


@dataclass(frozen=True)
class Many:
    """Ordered targets; earlier targets take precedence."""
    targets: Tuple[Any, ...]


@dataclass(frozen=True)
class Aborted:
    """The ctor declined construction."""
    pass


CompositionPlan = NoComposition | One | Many | Aborted


def plan_composition(value: Any, blueprint: str, *, allow_abort: bool = True) -> CompositionPlan:
    """
    Normalise a composition value into a plan.

    Args:
        value: ctor return value or ``compose`` entry
        blueprint: Name of the blueprint under construction (for faults)
        allow_abort: Whether False/ABORTED means abort (ctor return only)

    Raises:
        InvalidCompositionFault: value has none of the accepted shapes
    """
    if value is None:
        return NoComposition()

    if value is False or value is ABORTED:
        if allow_abort:
            return Aborted()
        raise InvalidCompositionFault(blueprint, "abort is only valid as a ctor return value")

    if isinstance(value, (list, tuple)):
        if not value:
            return NoComposition()
        return Many(tuple(value))

    if is_target(value):
        return One(value)

    raise InvalidCompositionFault(
        blueprint,
        f"unsupported composition value of type {type(value).__name__}",
    )


def targets_of(plan: CompositionPlan) -> Tuple[Any, ...]:
    """Targets of a plan, in merge order."""
    if isinstance(plan, One):
        return (plan.target,)
    if isinstance(plan, Many):
        return plan.targets
    return ()


# ============================================================================
# Merge
# ============================================================================

def merge_members(target: Dict[str, Any], source: Dict[str, Any]) -> List[str]:
    """
    Copy members from ``source`` into ``target`` without overwriting.

    First writer wins: names already in ``target`` are left alone, so the
    host descriptor beats every composed target and earlier targets beat
    later ones. Accessors are copied as-is.

    Returns:
        Names that were added to ``target``
    """
    added = []
    for name, value in source.items():
        if name not in target:
            target[name] = value
            added.append(name)
    return added
