"""
Core factory types.

Defines the instance factory and the metadata it tracks while building:

    Factory.create(blueprint, *args, **kwargs) -> Instance | ABORTED

1. invoke the blueprint and validate the descriptor it returns
2. strip reserved keys (ctor, compose, composed)
3. route arguments to the ctor, honouring abort
4. build and merge composition targets, first writer wins
5. seal the result into an Instance tagged with its blueprint
"""

from typing import Any, Callable, Dict, List, Optional, Tuple, Union
from collections.abc import Mapping
from dataclasses import dataclass
from contextvars import ContextVar
import logging
import time

from ..faults import (
    ConstructionFault,
    InvalidInterfaceFault,
    InvalidCtorFault,
    MissingCtorFault,
    InvalidCompositionFault,
)
from .instance import Instance, blueprint_of, is_reserved_name, own_members, is_instance_of
from .composition import (
    ABORTED,
    Aborted,
    Composed,
    merge_members,
    plan_composition,
    targets_of,
)
from .diagnostics import FactoryDiagnostics, FactoryEventType, ConsoleDiagnosticListener

logger = logging.getLogger("fabrica.factory")

CTOR_KEY = "ctor"
COMPOSE_KEYS = ("compose", "composed")
RESERVED_KEYS = frozenset((CTOR_KEY, *COMPOSE_KEYS))

DEFAULT_MAX_DEPTH = 64

# Names of blueprints currently under construction in this context.
# Ctors that call New() themselves push onto the same stack.
_construction_stack: ContextVar[Tuple[str, ...]] = ContextVar(
    "fabrica_construction_stack", default=()
)


@dataclass(frozen=True, slots=True)
class BlueprintMeta:
    """
    Compact, serializable blueprint metadata.

    Used for fault messages and diagnostics.
    """
    name: str
    token: str  # "module.qualname"
    module: str = ""
    qualname: str = ""
    line: Optional[int] = None

    @classmethod
    def from_blueprint(cls, blueprint: Any) -> "BlueprintMeta":
        name = getattr(blueprint, "__fabrica_name__", None) or getattr(
            blueprint, "__name__", None
        ) or type(blueprint).__name__
        module = getattr(blueprint, "__module__", None) or ""
        qualname = getattr(blueprint, "__qualname__", None) or name
        code = getattr(blueprint, "__code__", None)
        return cls(
            name=name,
            token=f"{module}.{qualname}" if module else qualname,
            module=module,
            qualname=qualname,
            line=code.co_firstlineno if code is not None else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "token": self.token,
            "module": self.module,
            "qualname": self.qualname,
            "line": self.line,
        }


class ConstructCtx:
    """
    Context for a single construction.

    Tracks the blueprint being built and the enclosing construction trace.
    Uses __slots__ for minimal allocation overhead.
    """
    __slots__ = ("factory", "meta", "trace")

    def __init__(self, factory: "Factory", meta: BlueprintMeta, trace: Tuple[str, ...]):
        self.factory = factory
        self.meta = meta
        self.trace = trace

    @property
    def depth(self) -> int:
        """Nesting depth; 0 for a top-level construction."""
        return len(self.trace) - 1

    def get_trace(self) -> List[str]:
        """Get current construction trace for error messages."""
        return list(self.trace)


class Factory:
    """
    Instance factory.

    Each call to ``create`` runs to completion synchronously and produces
    one independent instance (or ABORTED). Nested constructions started
    from inside a ctor complete before the outer construction continues.
    """

    __slots__ = ("_max_depth", "_diagnostics")

    def __init__(
        self,
        max_depth: int = DEFAULT_MAX_DEPTH,
        diagnostics: Optional[FactoryDiagnostics] = None,
    ):
        if max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {max_depth}")
        self._max_depth = max_depth
        self._diagnostics = diagnostics or FactoryDiagnostics()

    @classmethod
    def from_config(cls, config: Any) -> "Factory":
        """
        Build a factory from a FactoryConfig or a ConfigLoader.

        Example:
            factory = Factory.from_config(ConfigLoader.load(["fabrica.yaml"]))
        """
        from ..config import ConfigLoader, FactoryConfig

        if isinstance(config, ConfigLoader):
            config = config.factory_config()
        elif not isinstance(config, FactoryConfig):
            raise TypeError(f"expected FactoryConfig or ConfigLoader, got {type(config).__name__}")

        factory = cls(max_depth=config.max_depth)
        if config.diagnostics:
            factory.diagnostics.add_listener(
                ConsoleDiagnosticListener(log_level=config.level)
            )
        return factory

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def diagnostics(self) -> FactoryDiagnostics:
        return self._diagnostics

    def create(self, blueprint: Callable[[], Any], *args: Any, **kwargs: Any) -> Union[Instance, Any]:
        """
        Construct an instance from a blueprint.

        Args:
            blueprint: Zero-argument callable returning a descriptor mapping
            *args, **kwargs: Routed to the descriptor's ctor

        Returns:
            The sealed Instance, or ABORTED if the ctor declined

        Raises:
            InvalidInterfaceFault: blueprint is not callable or its descriptor is malformed
            InvalidCtorFault: ``ctor`` is not callable
            MissingCtorFault: arguments supplied without a ctor
            InvalidCompositionFault: a composition target is malformed or failed
        """
        meta = BlueprintMeta.from_blueprint(blueprint)
        stack = _construction_stack.get()
        if len(stack) >= self._max_depth:
            raise InvalidCompositionFault(
                meta.name,
                f"maximum construction depth {self._max_depth} exceeded",
                metadata={"trace": list(stack)},
            )

        ctx = ConstructCtx(self, meta, stack + (meta.name,))
        token = _construction_stack.set(ctx.trace)
        self._diagnostics.emit(
            FactoryEventType.CONSTRUCTION_START, blueprint=meta.name, depth=ctx.depth
        )
        start = time.perf_counter()
        try:
            result = self._construct(ctx, blueprint, args, kwargs)
        except Exception as exc:
            self._diagnostics.emit(
                FactoryEventType.CONSTRUCTION_FAILURE,
                blueprint=meta.name,
                depth=ctx.depth,
                duration=time.perf_counter() - start,
                error=exc,
            )
            raise
        finally:
            _construction_stack.reset(token)

        if result is ABORTED:
            logger.debug(f"Construction of '{meta.name}' aborted by its ctor")
            self._diagnostics.emit(
                FactoryEventType.CONSTRUCTION_ABORTED,
                blueprint=meta.name,
                depth=ctx.depth,
                duration=time.perf_counter() - start,
            )
        else:
            self._diagnostics.emit(
                FactoryEventType.CONSTRUCTION_SUCCESS,
                blueprint=meta.name,
                depth=ctx.depth,
                duration=time.perf_counter() - start,
            )
        return result

    def is_instance_of(self, obj: Any, blueprint: Callable[[], Any]) -> bool:
        """Type-check predicate (see ``fabrica.is_instance_of``)."""
        return is_instance_of(obj, blueprint)

    def _construct(
        self,
        ctx: ConstructCtx,
        blueprint: Callable[[], Any],
        args: Tuple[Any, ...],
        kwargs: Dict[str, Any],
    ) -> Any:
        name = ctx.meta.name

        if isinstance(blueprint, Instance) or not callable(blueprint):
            raise InvalidInterfaceFault(name, "blueprint is not callable")

        members = self._validate_descriptor(name, blueprint())

        # Reserved keys never reach the public surface
        ctor = members.pop(CTOR_KEY, None)
        declared = [members.pop(key) for key in COMPOSE_KEYS if key in members]

        if ctor is not None and not callable(ctor):
            raise InvalidCtorFault(name, ctor)
        if len(declared) > 1:
            raise InvalidInterfaceFault(name, "declares both 'compose' and 'composed'")
        if ctor is None and (args or kwargs):
            raise MissingCtorFault(name, len(args) + len(kwargs))

        returned = ctor(*args, **kwargs) if ctor is not None else None

        plan = plan_composition(returned, name, allow_abort=True)
        if isinstance(plan, Aborted):
            return ABORTED

        targets = list(targets_of(plan))
        if declared:
            targets.extend(targets_of(plan_composition(declared[0], name, allow_abort=False)))

        for index, target in enumerate(targets):
            source = self._build_target(ctx, target, index)
            added = merge_members(members, own_members(source))
            self._diagnostics.emit(
                FactoryEventType.COMPOSITION_MERGE,
                blueprint=name,
                depth=ctx.depth,
                metadata={
                    "index": index,
                    "source": BlueprintMeta.from_blueprint(blueprint_of(source)).name,
                    "added": added,
                },
            )

        return Instance(blueprint, members)

    def _validate_descriptor(self, name: str, descriptor: Any) -> Dict[str, Any]:
        """
        Check the descriptor shape and return a private copy of it.

        Raises:
            InvalidInterfaceFault: descriptor is not a non-empty mapping of names
        """
        if descriptor is None:
            raise InvalidInterfaceFault(name, "blueprint returned None")
        if callable(descriptor):
            raise InvalidInterfaceFault(name, "descriptor must not be callable")
        if isinstance(descriptor, (str, bytes, list, tuple)) or not isinstance(descriptor, Mapping):
            raise InvalidInterfaceFault(
                name, f"descriptor must be a mapping, got {type(descriptor).__name__}"
            )
        if len(descriptor) == 0:
            raise InvalidInterfaceFault(name, "descriptor is empty")

        members: Dict[str, Any] = {}
        for key, value in descriptor.items():
            if not isinstance(key, str) or not key:
                raise InvalidInterfaceFault(name, f"member name {key!r} is not a non-empty string")
            if is_reserved_name(key):
                raise InvalidInterfaceFault(name, f"member name {key!r} is reserved")
            members[key] = value
        return members

    def _build_target(self, ctx: ConstructCtx, target: Any, index: int) -> Instance:
        name = ctx.meta.name

        if target is ABORTED:
            source = target
        elif isinstance(target, Instance):
            source = target
        elif isinstance(target, Composed) or callable(target):
            if isinstance(target, Composed):
                blueprint, args, kwargs = target.blueprint, target.args, target.kwargs
            else:
                blueprint, args, kwargs = target, (), {}
            try:
                source = self.create(blueprint, *args, **kwargs)
            except ConstructionFault as exc:
                raise InvalidCompositionFault(
                    name,
                    f"target '{BlueprintMeta.from_blueprint(blueprint).name}' failed: {exc.code}",
                    index=index,
                    cause=exc,
                    metadata={"trace": ctx.get_trace()},
                ) from exc
        else:
            raise InvalidCompositionFault(
                name, f"{type(target).__name__} is not a composable instance", index=index
            )

        if source is ABORTED:
            raise InvalidCompositionFault(name, "target construction was aborted", index=index)
        if not own_members(source):
            raise InvalidCompositionFault(name, "target exposes no members", index=index)
        return source


# ============================================================================
# Default factory
# ============================================================================

_default_factory: Optional[Factory] = None


def get_default_factory() -> Factory:
    """
    Get or create the default global factory.

    Returns:
        Global Factory instance
    """
    global _default_factory
    if _default_factory is None:
        _default_factory = Factory()
    return _default_factory


def set_default_factory(factory: Optional[Factory]) -> Optional[Factory]:
    """
    Replace the default global factory.

    Passing None resets it; the next ``get_default_factory`` builds a
    fresh one.

    Returns:
        The previous default factory (may be None)
    """
    global _default_factory
    previous = _default_factory
    _default_factory = factory
    return previous


def create(blueprint: Callable[[], Any], *args: Any, **kwargs: Any) -> Union[Instance, Any]:
    """Construct an instance through the default factory."""
    return get_default_factory().create(blueprint, *args, **kwargs)


New = create
