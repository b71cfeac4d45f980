"""Domain models used throughout the framework."""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Optional
from uuid import UUID

__all__ = ["Recipe", "Descriptor", "BuiltComponent", "CustomBuilder"]


@dataclass(frozen=True)
class Recipe:
    """The canonical ``(dependencies, builder)`` shape of a declaration.

    Attributes:
        dependencies: Paths whose instances are passed to the builder, in order.
        builder: Callable invoked with the resolved dependencies positionally.
            It may return the instance directly or an awaitable producing it.
    """

    dependencies: tuple[str, ...]
    builder: Callable[..., Any]


CustomBuilder = Callable[[Any, str, Recipe, Optional[str]], Awaitable[Any]]
"""Signature of a build strategy overriding the registry's default procedure.

Called as ``strategy(registry, path, recipe, requested_from)`` and awaited.
"""


@dataclass(frozen=True)
class Descriptor:
    """Describes how a provider builds its component.

    Provider builders return a Descriptor. Providers that want to expose
    settings to the providers depending on them subclass it and add fields.

    Attributes:
        get: The component recipe, as a builder function, a
            ``[dependency, ..., builder]`` sequence or a :class:`Recipe`.
            The registry stores it normalized to a :class:`Recipe`.
        single: Cache and share one instance per path when true; build a fresh
            instance on every request otherwise.
        builder: Optional strategy replacing the default build procedure.
    """

    get: Any
    single: bool = False
    builder: Optional[CustomBuilder] = field(default=None, compare=False)


@dataclass(frozen=True)
class BuiltComponent:
    """
    Represents a freshly built component, as reported to build observers.

    Attributes:
        id: The unique id of this build.
        path: The canonical path the component was built for.
        component: The instance returned by the builder.
        dependencies: The dependency paths injected into the builder.
    """

    id: UUID
    path: str
    component: Any
    dependencies: list[str]
