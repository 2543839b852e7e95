from __future__ import annotations

import logging
import threading
from abc import ABCMeta
from collections.abc import Mapping
from typing import Any, Callable, Dict, Iterator, Optional, Tuple, Type, TypeVar, Union

from publishing_kit.Support.Exceptions import BadMethodCallException, InvalidArgumentException

logger = logging.getLogger(__name__)

F = TypeVar('F', bound=Callable[..., Any])


class Macro:
    """A named operation registered at runtime for a collection type."""

    def __init__(self, name: str, method: Callable[..., Any], bind: bool = False) -> None:
        self.name = name
        self.method = method
        self.bind = bind

    def invoke(self, receiver: Any, *args: Any, **kwargs: Any) -> Any:
        """Call the macro, passing the receiver first when it was registered bound."""
        if self.bind:
            return self.method(receiver, *args, **kwargs)
        return self.method(*args, **kwargs)

    def __repr__(self) -> str:
        return f"Macro({self.name!r}, bind={self.bind})"


class MacroRegistry:
    """Process-wide registry of macros, scoped per collection type."""

    def __init__(self) -> None:
        self._macros: Dict[type, Dict[str, Macro]] = {}
        self._lock = threading.RLock()

    def register(self, owner: type, name: str, method: Callable[..., Any], bind: bool = False) -> Macro:
        """Register a macro, replacing any previous one with the same name."""
        macro = Macro(name, method, bind)
        with self._lock:
            self._macros.setdefault(owner, {})[name] = macro
        logger.debug("Registered macro %s::%s (bind=%s)", owner.__name__, name, bind)
        return macro

    def get(self, owner: type, name: str) -> Optional[Macro]:
        """Get a macro by name."""
        with self._lock:
            return self._macros.get(owner, {}).get(name)

    def has(self, owner: type, name: str) -> bool:
        """Check if macro exists."""
        with self._lock:
            return name in self._macros.get(owner, {})

    def all(self, owner: type) -> Dict[str, Macro]:
        """Get all macros of a type."""
        with self._lock:
            return dict(self._macros.get(owner, {}))

    def flush(self, owner: Optional[type] = None) -> None:
        """Remove the macros of one type, or of every type."""
        with self._lock:
            if owner is None:
                self._macros.clear()
            else:
                self._macros.pop(owner, None)
        logger.debug("Flushed macros for %s", owner.__name__ if owner is not None else "all types")


# Global macro registry
macro_registry = MacroRegistry()


def _is_reserved(name: str) -> bool:
    return name.startswith('_')


def _public_methods(donor: Any) -> Iterator[Tuple[str, Callable[..., Any]]]:
    """Enumerate the operations a mixin donor exposes."""
    if isinstance(donor, Mapping):
        for name, method in donor.items():
            if not callable(method):
                raise InvalidArgumentException(f"Mixin entry `{name}` is not callable.")
            yield name, method
        return

    if isinstance(donor, type):
        donor = donor()

    for attr_name in dir(donor):
        if not attr_name.startswith('_'):
            attr = getattr(donor, attr_name)
            if callable(attr):
                yield attr_name, attr


class MacroableMeta(ABCMeta):
    """Metaclass resolving unknown class attributes through the macro registry."""

    def __getattr__(cls, name: str) -> Any:
        if _is_reserved(name):
            raise AttributeError(f"type object '{cls.__name__}' has no attribute '{name}'")
        return cls._macro_method(name, cls)


class Macroable(metaclass=MacroableMeta):
    """Allow named operations to be attached to a class at runtime."""

    @classmethod
    def macro(cls, name: str, method: Optional[Callable[..., Any]] = None, *, bind: bool = False) -> Any:
        """
        Register a macro on the class.

        The macro is reachable both from instances and from the class itself.
        Unbound macros receive only the caller's arguments; with ``bind=True``
        the receiver (instance, or class for static calls) is passed first.
        Without ``method`` this returns a decorator.
        """
        if method is None:
            def decorator(func: F) -> F:
                cls.macro(name, func, bind=bind)
                return func
            return decorator

        if not name or _is_reserved(name):
            raise InvalidArgumentException(f"Invalid macro name `{name}`.")
        if not callable(method):
            raise InvalidArgumentException(f"Macro `{name}` is not callable.")
        if name in dir(cls):
            logger.warning("Macro %s::%s is shadowed by a method of the same name", cls.__name__, name)

        macro_registry.register(cls, name, method, bind)
        return None

    @classmethod
    def mixin(cls, donor: Union[Mapping[str, Callable[..., Any]], Type[Any], Any], replace: bool = True) -> None:
        """Register every public method of the donor as a macro."""
        registered = []
        for name, method in _public_methods(donor):
            if replace or not cls.has_macro(name):
                cls.macro(name, method)
                registered.append(name)
        donor_name = donor.__name__ if isinstance(donor, type) else type(donor).__name__
        logger.debug("Mixed %s into %s: %s", donor_name, cls.__name__, ", ".join(registered))

    @classmethod
    def has_macro(cls, name: str) -> bool:
        """Check if the class has a macro registered under the name."""
        return macro_registry.has(cls, name)

    @classmethod
    def flush_macros(cls) -> None:
        """Remove all macros registered on the class."""
        macro_registry.flush(cls)

    @classmethod
    def _macro_method(cls, name: str, receiver: Any) -> Callable[..., Any]:
        macro = macro_registry.get(cls, name)
        if macro is None:
            logger.debug("No method or macro %s::%s", cls.__name__, name)
            raise BadMethodCallException(name, cls)

        def macro_method(*args: Any, **kwargs: Any) -> Any:
            return macro.invoke(receiver, *args, **kwargs)

        macro_method.__name__ = name
        return macro_method

    def __getattr__(self, name: str) -> Any:
        """Handle macro calls."""
        if _is_reserved(name):
            raise AttributeError(f"'{self.__class__.__name__}' object has no attribute '{name}'")
        return type(self)._macro_method(name, self)
