"""
Decorators and helpers for blueprint-level (static) members.

Statics live on the blueprint function itself and are shared by every
instance it produces. They are never merged into instances.
"""

from typing import Any, Callable, Dict, Optional, TypeVar


F = TypeVar("F", bound=Callable[..., Any])

# Attributes set by ``blueprint`` that are not user statics
_FACTORY_ATTRS = frozenset(("new",))


def blueprint(
    func: Optional[F] = None,
    *,
    name: Optional[str] = None,
    **statics: Any,
) -> Any:
    """
    Decorator to mark a function as a blueprint.

    Attaches the given statics as attributes and a ``new`` shortcut that
    constructs through the default factory.

    Args:
        name: Optional display name used in faults and diagnostics
        **statics: Static members to attach to the blueprint

    Example:
        @blueprint(created=0)
        def Ticket():
            number = 0

            def ctor():
                nonlocal number
                Ticket.created += 1
                number = Ticket.created

            return {"ctor": ctor, "number": lambda: number}

        Ticket.new().number()   # 1
    """
    def decorator(fn: F) -> F:
        from .core import create

        fn.__fabrica_name__ = name or fn.__name__  # type: ignore
        for key, value in statics.items():
            setattr(fn, key, value)

        def new(*args: Any, **kwargs: Any) -> Any:
            return create(fn, *args, **kwargs)

        new.__qualname__ = f"{fn.__qualname__}.new"
        new.__doc__ = f"Construct a {fn.__fabrica_name__} instance through the default factory."
        fn.new = new  # type: ignore
        return fn

    if func is not None:
        return decorator(func)
    return decorator


def static(target: Callable[..., Any], name: Optional[str] = None) -> Callable[[F], F]:
    """
    Decorator to attach a function to a blueprint as a static member.

    Example:
        @static(Counted)
        def count():
            return Counted.counter.value() if hasattr(Counted, "counter") else 0

        Counted.count()
    """
    def decorator(fn: F) -> F:
        setattr(target, name or fn.__name__, fn)
        return fn

    return decorator


def statics(target: Callable[..., Any]) -> Dict[str, Any]:
    """
    User-attached statics of a blueprint.

    Dunder attributes and the ``new`` shortcut are excluded.
    """
    try:
        attrs = vars(target)
    except TypeError:
        return {}
    return {
        key: value
        for key, value in attrs.items()
        if not (key.startswith("__") and key.endswith("__")) and key not in _FACTORY_ATTRS
    }
