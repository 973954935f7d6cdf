"""Name-based dependency injection.

This package provides a small dependency injection container for Python that
wires dependencies by parameter name: a callable's parameter names are the
names of the registrations it receives.

Exports:
- `Container`: registry of named providers, factories, services and values,
  with `resolve`, `invoke` and `instantiate`, and child containers that fall
  back to their parent.
- `Provider`: the registered unit, wrapping a `get` callable.
- `annotate`: the ordered dependency names a callable declares.
- `inject`: decorator declaring dependency names explicitly.
- `ResolutionError` / `UnresolvedDependencyError`: resolution failures.
"""

from ._annotate import annotate, inject
from ._container import Container, Provider, ResolutionError, UnresolvedDependencyError


__all__ = ["Container", "Provider", "ResolutionError", "UnresolvedDependencyError", "annotate", "inject"]
