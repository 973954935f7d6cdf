from __future__ import annotations

import inspect
import logging
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar, overload

from ._annotate import annotate, declared_names, is_invoke_array


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    T = TypeVar("T")

_RECEIVER_KINDS = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


@dataclass(frozen=True)
class Provider:
    get: Callable[..., Any]


class ResolutionError(RuntimeError):
    pass


class UnresolvedDependencyError(ResolutionError, KeyError):
    def __init__(self, name: str) -> None:
        super().__init__(f"No provider registered for dependency {name!r}")
        self.name = name


class Container:
    """Name-keyed DI container.

    - register providers, factories, services (classes) or plain values
    - resolve by name, re-running the provider every time
    - invoke callables / instantiate classes with their parameters injected
    - child containers fall back to their parent for unknown names.
    """

    def __init__(self, parent: Container | None = None) -> None:
        self._providers: dict[str, Provider] = {}
        self._parent = parent
        self._lock = threading.RLock()

    @property
    def parent(self) -> Container | None:
        return self._parent

    def create_child(self) -> Container:
        """Create a container that prefers its own registrations, falls back to this one."""
        return type(self)(self)

    def provider(self, name: str, provider: object) -> Container:
        """Register a provider: a `Provider`, an object with ``get`` or a ``{"get": fn}`` mapping."""
        self._register(name, _as_provider(provider))
        return self

    def factory(self, name: str, fn: Callable[..., Any]) -> Container:
        """Register a function whose injected call produces the dependency."""
        if not callable(fn):
            msg = f"Factory for {name!r} must be callable, got {type(fn).__name__}"
            raise TypeError(msg)

        self._register(name, Provider(fn))
        return self

    def service(self, name: str, cls: Callable[..., Any]) -> Container:
        """Register a class; each resolution instantiates a fresh one through this container."""
        if not callable(cls):
            msg = f"Service for {name!r} must be a class or callable, got {type(cls).__name__}"
            raise TypeError(msg)

        def get() -> Any:
            return self.instantiate(cls)

        self._register(name, Provider(get))
        return self

    def value(self, name: str, value: object) -> Container:
        """Register a fixed value, returned as-is on every resolution."""

        def get() -> object:
            return value

        self._register(name, Provider(get))
        return self

    def has(self, name: str) -> bool:
        """Whether `name` is registered on this container (ancestors are not consulted)."""
        with self._lock:
            return name in self._providers

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.has(name)

    def resolve(self, name: str) -> Any:
        """Resolve `name` to a value.

        Looks in this container first, then up the parent chain. The provider
        is invoked on every call; nothing is cached.
        """
        with self._lock:
            provider = self._providers.get(name)

        if provider is None:
            if self._parent is None:
                raise UnresolvedDependencyError(name)
            return self._parent.resolve(name)

        logger.debug("Resolving %r in %r", name, self)
        return self.invoke(provider.get)

    @overload
    def invoke(
        self,
        fn: Callable[..., T],
        context: object = ...,
        locals: Mapping[str, Any] | None = ...,  # noqa: A002
    ) -> T: ...

    @overload
    def invoke(
        self,
        fn: Sequence[Any],
        context: object = ...,
        locals: Mapping[str, Any] | None = ...,  # noqa: A002
    ) -> Any: ...

    def invoke(
        self,
        fn: Callable[..., Any] | Sequence[Any],
        context: object = None,
        locals: Mapping[str, Any] | None = None,  # noqa: A002
    ) -> Any:
        """Call `fn` with its dependencies supplied positionally.

        `fn` is either a callable or a ``[name, ..., callable]`` sequence.
        Names found in `locals` take precedence over registrations.
        When `context` is given and a plain function declares a ``self``
        receiver, the function is bound to it first. Other callables and
        ``[name, ..., callable]`` sequences ignore `context`.
        """
        array = is_invoke_array(fn)
        target = fn[-1] if array else fn

        if not callable(target):
            msg = f"Cannot invoke non-callable {target!r}"
            raise TypeError(msg)

        if context is not None and not array:
            target = _bind(target, context)

        # names come from the bound form so the receiver is never injected
        names = annotate(fn if array else target)
        args = [locals[name] if locals is not None and name in locals else self.resolve(name) for name in names]
        return target(*args)

    def instantiate(self, cls: Callable[..., Any], locals: Mapping[str, Any] | None = None) -> Any:  # noqa: A002
        """Create an instance of `cls`, injecting its ``__init__`` parameters.

        A non-``None`` value returned from ``__init__`` replaces the instance.
        Non-class callables are invoked and their result returned.
        """
        if not inspect.isclass(cls):
            return self.invoke(cls, None, locals)

        instance = cls.__new__(cls)
        replacement = self.invoke(_initializer(cls, instance), instance, locals)
        if replacement is not None:
            return replacement

        return instance

    def _register(self, name: str, provider: Provider) -> None:
        if not isinstance(name, str) or not name:
            msg = f"Dependency name must be a non-empty string, got {name!r}"
            raise ValueError(msg)

        with self._lock:
            if name in self._providers:
                logger.debug("Overwriting provider %r in %r", name, self)
            self._providers[name] = provider

    def __repr__(self) -> str:
        with self._lock:
            names = list(self._providers)
        return f"<{type(self).__name__} {names!r} parent={self._parent is not None}>"


def _as_provider(provider: object) -> Provider:
    if isinstance(provider, Provider):
        return provider

    get = provider.get("get") if isinstance(provider, Mapping) else getattr(provider, "get", None)
    if not callable(get):
        msg = f"Provider must expose a callable 'get', got {type(provider).__name__}"
        raise TypeError(msg)

    return Provider(get)


def _bind(fn: Callable[..., Any], context: object) -> Callable[..., Any]:
    if inspect.isclass(fn) or inspect.ismethod(fn) or not hasattr(fn, "__get__"):
        return fn

    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return fn

    # only functions written as methods take a receiver
    if not params or params[0].name != "self" or params[0].kind not in _RECEIVER_KINDS:
        return fn

    return fn.__get__(context, type(context))


def _initializer(cls: type, instance: object) -> Callable[..., Any] | list[Any]:
    init = inspect.getattr_static(cls, "__init__", object.__init__).__get__(instance, cls)
    names = declared_names(cls)
    if names is None:
        return init

    return [*names, init]
