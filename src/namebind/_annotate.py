from __future__ import annotations

import inspect
import logging
from typing import TYPE_CHECKING, Any, TypeVar


logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    F = TypeVar("F", bound=Callable[..., Any])

_INJECTABLE_KINDS = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


def is_invoke_array(value: object) -> bool:
    """Whether `value` is a ``[name, ..., callable]`` sequence."""
    if not isinstance(value, (list, tuple)) or not value:
        return False

    *names, fn = value
    return callable(fn) and all(isinstance(name, str) for name in names)


def declared_names(fn: object) -> Sequence[str] | None:
    """Names declared with `inject`, or ``None``.

    For a class, names declared on a base only apply while ``__init__`` is
    inherited from that base too.
    """
    if not inspect.isclass(fn):
        return getattr(fn, "__inject__", None)

    for klass in fn.__mro__:
        if "__inject__" in klass.__dict__:
            return klass.__dict__["__inject__"]
        if "__init__" in klass.__dict__:
            return getattr(klass.__dict__["__init__"], "__inject__", None)

    return None


def annotate(fn: Callable[..., Any] | Sequence[Any]) -> list[str]:
    """Return the ordered dependency names `fn` asks for.

    - ``[name, ..., callable]``: the leading strings, verbatim.
    - callables carrying ``__inject__`` (see `inject`): those names.
    - anything else: positional parameter names from its signature.
      Receivers of bound methods and classes are never reported;
      ``*args``, ``**kwargs`` and keyword-only parameters are skipped.

    A callable without a readable signature has no dependencies.
    """
    if is_invoke_array(fn):
        return list(fn[:-1])

    explicit = declared_names(fn)
    if explicit is not None:
        return list(explicit)

    try:
        sig = inspect.signature(fn)
    except (TypeError, ValueError) as exc:
        logger.debug("No signature for %r (%s); assuming no dependencies", fn, exc)
        return []

    return [name for name, p in sig.parameters.items() if p.kind in _INJECTABLE_KINDS]


def inject(*names: str) -> Callable[[F], F]:
    """Declare the dependency names of a function or class explicitly.

    Example:
      @inject("db", "clock")
      def make_repo(connection, now): ...

    """
    for name in names:
        if not isinstance(name, str):
            msg = f"Dependency names must be strings, got {name!r}"
            raise TypeError(msg)

    def decorate(fn: F) -> F:
        fn.__inject__ = names  # type: ignore[attr-defined]
        return fn

    return decorate
