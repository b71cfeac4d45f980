"""Normalization of free-form declarations into :class:`Recipe` objects.

Every registration kind accepts the same two shapes:

    - a builder callable with no dependencies, or
    - a sequence of dependency paths followed by the builder callable
      (``["db", "cache", make_service]``).

A :class:`~componentry.domain.Recipe` is accepted as-is.
"""

from collections.abc import Sequence
from typing import Any

from componentry.domain import Recipe
from componentry.errors import MalformedDeclarationError

__all__ = ["normalize"]


def normalize(spec: Any, kind: str) -> Recipe:
    """Convert a declaration into a :class:`Recipe`.

    Args:
        spec: The declaration passed to a registration method.
        kind: Name of the declaration kind, used in error messages.

    Returns:
        The normalized recipe.

    Raises:
        MalformedDeclarationError: If ``spec`` is neither a callable nor a
            sequence of path strings ending in a callable.

    Example:
        >>> normalize(["one", make_two], "Factory")
        Recipe(dependencies=('one',), builder=<function make_two>)
    """
    if isinstance(spec, Recipe):
        return _checked(spec.dependencies, spec.builder, kind)

    if callable(spec):
        return Recipe((), spec)

    if isinstance(spec, Sequence) and not isinstance(spec, (str, bytes)) and spec:
        *dependencies, builder = spec
        return _checked(tuple(dependencies), builder, kind)

    raise MalformedDeclarationError(
        f"{kind} must be a function, optionally as a sequence prefixed by dependencies, "
        f"got {spec!r}"
    )


def _checked(dependencies: tuple, builder: Any, kind: str) -> Recipe:
    if not callable(builder):
        raise MalformedDeclarationError(
            f"{kind} must end with a builder function, got {builder!r}"
        )

    invalid = [dependency for dependency in dependencies if not isinstance(dependency, str) or not dependency]
    if invalid:
        raise MalformedDeclarationError(
            f"{kind} dependencies must be non-empty path strings, got {invalid}"
        )

    return Recipe(dependencies, builder)
