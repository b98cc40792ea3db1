"""
Instance objects produced by the factory.

An instance is a sealed bag of members: plain values, methods closing over
private state, and accessors. Its only identity is the blueprint that built
it, stored as an explicit tag rather than through class inheritance.
"""

from typing import Any, Callable, Dict, List, Optional
from dataclasses import dataclass


# Slot names, also rejected as member names
_RESERVED_PREFIX = "_fabrica_"


@dataclass(frozen=True, slots=True)
class Accessor:
    """
    Getter/setter pair exposed as a single attribute.

    Reading the attribute calls ``get()``; assigning calls ``set(value)``.
    Accessors are copied as pairs during composition, so a composed
    accessor keeps reading and writing the state of the instance it
    came from.

    Example:
        def Thermometer():
            celsius = 0.0

            def get_fahrenheit():
                return celsius * 9 / 5 + 32

            def set_fahrenheit(value):
                nonlocal celsius
                celsius = (value - 32) * 5 / 9

            return {"fahrenheit": Accessor(get_fahrenheit, set_fahrenheit)}
    """
    get: Callable[[], Any]
    set: Optional[Callable[[Any], None]] = None

    def __post_init__(self):
        if not callable(self.get):
            raise TypeError("Accessor getter must be callable")
        if self.set is not None and not callable(self.set):
            raise TypeError("Accessor setter must be callable or None")

    @property
    def readonly(self) -> bool:
        return self.set is None


class Instance:
    """
    Constructed public-facing object.

    Members are resolved through ``__getattr__``; the class itself only
    defines dunders, so any non-reserved name is available to blueprints.
    Instances are sealed: the only way to change state after construction
    is through the members themselves (methods or accessor setters).
    """

    __slots__ = ("_fabrica_members", "_fabrica_blueprint")

    def __init__(self, blueprint: Callable[[], Any], members: Dict[str, Any]):
        object.__setattr__(self, "_fabrica_members", members)
        object.__setattr__(self, "_fabrica_blueprint", blueprint)

    def __getattr__(self, name: str) -> Any:
        try:
            members = object.__getattribute__(self, "_fabrica_members")
        except AttributeError:
            # Not initialised yet (copy/pickle probing)
            raise AttributeError(name) from None

        try:
            value = members[name]
        except KeyError:
            raise AttributeError(
                f"'{_blueprint_name(self)}' instance has no member '{name}'"
            ) from None

        if isinstance(value, Accessor):
            return value.get()
        return value

    def __setattr__(self, name: str, value: Any) -> None:
        member = self._fabrica_members.get(name)
        if isinstance(member, Accessor):
            if member.readonly:
                raise AttributeError(
                    f"member '{name}' of '{_blueprint_name(self)}' is read-only"
                )
            member.set(value)
            return

        raise AttributeError(
            f"cannot assign '{name}': '{_blueprint_name(self)}' instances are sealed"
        )

    def __delattr__(self, name: str) -> None:
        raise AttributeError(
            f"cannot delete '{name}': '{_blueprint_name(self)}' instances are sealed"
        )

    def __contains__(self, name: object) -> bool:
        return name in self._fabrica_members

    def __dir__(self) -> List[str]:
        return list(self._fabrica_members)

    def __repr__(self) -> str:
        names = ", ".join(self._fabrica_members)
        return f"<{_blueprint_name(self)} instance: {names}>"


def _blueprint_name(instance: Instance) -> str:
    blueprint = object.__getattribute__(instance, "_fabrica_blueprint")
    return getattr(blueprint, "__fabrica_name__", None) or getattr(
        blueprint, "__name__", type(blueprint).__name__
    )


def is_reserved_name(name: str) -> bool:
    """Names an instance can never expose as members."""
    return name.startswith(_RESERVED_PREFIX) or (
        name.startswith("__") and name.endswith("__")
    )


def members(instance: Instance) -> List[str]:
    """Member names of an instance, in insertion order."""
    return list(own_members(instance))


def own_members(instance: Instance) -> Dict[str, Any]:
    """
    Raw member mapping of an instance.

    Accessors are returned as ``Accessor`` objects, not invoked. The
    returned dict is a copy; mutating it does not affect the instance.
    """
    if not isinstance(instance, Instance):
        raise TypeError(f"expected an Instance, got {type(instance).__name__}")
    return dict(instance._fabrica_members)


def blueprint_of(obj: Any) -> Optional[Callable[[], Any]]:
    """Blueprint that produced ``obj``, or None for non-instances."""
    if isinstance(obj, Instance):
        return obj._fabrica_blueprint
    return None


def is_instance_of(obj: Any, blueprint: Callable[[], Any]) -> bool:
    """
    Type-check predicate.

    True only when ``obj`` was produced directly from ``blueprint``.
    Members merged in through composition do not make an instance
    a member of the composed blueprint.
    """
    return isinstance(obj, Instance) and obj._fabrica_blueprint is blueprint
