"""The component registry.

The registry loads descriptor modules, tracks the dependencies between
providers and between built components, and lazily builds components when
they are requested. Other code never constructs a component directly; it asks
the registry for one by path::

    registry = ComponentRegistry(["app/components"], {"host": "localhost"})
    service = await registry.require("services/users")

A descriptor module for ``services/users`` defines a descriptor function
(``register`` by default) that registers exactly one provider for its path::

    def register(registration, config, path):
        registration.component(["db", "cache", lambda db, cache: UserService(db, cache)])

Dependencies are loaded and built first, in dependency order. A dependency
cycle, whether declared or introduced while a builder runs, fails the request
with :class:`~componentry.errors.CircularReferenceError`.
"""

import asyncio
import contextvars
import dataclasses
import inspect
import logging
from collections.abc import Mapping
from functools import partial
from types import MappingProxyType
from typing import Any, Optional

from componentry.aliases import AliasTable
from componentry.component_builder import BuildObserver, ComponentBuilder
from componentry.domain import Descriptor, Recipe
from componentry.errors import (
    CircularReferenceError,
    ComponentNotFoundError,
    ConfigurationError,
    DuplicateRegistrationError,
    MalformedDeclarationError,
)
from componentry.graph import DependencyGraph
from componentry.loader import DescriptorFunction, ImportLoader, Loader, SearchPaths
from componentry.recipe import normalize
from componentry.registration import ComponentRegistration

__all__ = ["ComponentRegistry"]

logger = logging.getLogger(__name__)

_building: contextvars.ContextVar[tuple] = contextvars.ContextVar(
    "componentry_building", default=()
)
"""(registry, path) pairs mid-construction on the current call chain."""


class ComponentRegistry:
    """Lazily loads, builds and caches components addressed by path.

    Args:
        search_paths: A root, or ordered roots, to load descriptor modules
            from. Ignored when ``loader`` is given.
        config: Settings passed, read-only, to every descriptor function.
        parent: A registry to take providers from when a path cannot be
            loaded locally.
        loader: Replaces the default :class:`~componentry.loader.ImportLoader`.

    Raises:
        ConfigurationError: If neither search paths nor a loader are given.
    """

    def __init__(
        self,
        search_paths: Optional[SearchPaths] = None,
        config: Optional[Mapping[str, Any]] = None,
        *,
        parent: Optional["ComponentRegistry"] = None,
        loader: Optional[Loader] = None,
    ):
        self._loader = loader if loader is not None else ImportLoader(search_paths)
        self.config = MappingProxyType(dict(config or {}))
        self.parent = parent

        self._providers: dict[str, Descriptor] = {}
        self._inherited: dict[str, Descriptor] = {}
        self._instances: dict[str, asyncio.Future] = {}
        self._aliases = AliasTable()

        self._provider_graph = DependencyGraph()
        self._component_graph = DependencyGraph()
        self._component_builder = ComponentBuilder([])

    @property
    def search_paths(self) -> list:
        return list(getattr(self._loader, "search_paths", []))

    @property
    def providers(self) -> Mapping[str, Descriptor]:
        """Providers registered in this registry, keyed by path."""
        return MappingProxyType(self._providers)

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases.targets

    def on_build(self, observer: BuildObserver):
        """Call ``observer`` with a BuiltComponent after every successful build."""
        self._component_builder.add_observer(observer)

    def load(self, path: str) -> DescriptorFunction:
        """Find the descriptor function for ``path`` on the search roots.

        Raises:
            ComponentNotFoundError: If no root provides ``path``.
        """
        return self._loader.load(path)

    def dealias(self, path: str) -> str:
        return self._aliases.dealias(path)

    def provider(self, path: str) -> Descriptor:
        """Get the provider for ``path``, loading its descriptor module if needed.

        If the path cannot be loaded locally and a parent registry is
        configured, the parent's provider is used instead.

        Raises:
            ComponentNotFoundError: If neither this registry nor its parents
                can load ``path``.
            ConfigurationError: If the descriptor function did not register
                anything for ``path``.
        """
        path = self.dealias(path)

        if path in self._providers:
            return self._providers[path]
        if path in self._inherited:
            return self._inherited[path]

        try:
            descriptor_function = self.load(path)
        except ComponentNotFoundError:
            if self.parent is None:
                raise
            logger.debug("Component provider '%s' not found locally, asking parent registry", path)
            provider = self.parent.provider(path)
            self._inherited[path] = provider
            return provider

        registration = ComponentRegistration(self, path)
        try:
            descriptor_function(registration, self.config, path)
        finally:
            registration.close()

        if path in self._aliases:
            return self.provider(path)

        if path not in self._providers:
            raise ConfigurationError(
                f"No component provider registered after module initialization: {path}"
            )

        return self._providers[path]

    def register(self, path: str, spec: Any):
        """Register the provider for ``path``. Intended for ComponentRegistration.

        The provider's own dependencies (other providers) are loaded first and
        passed to its builder, which must return a
        :class:`~componentry.domain.Descriptor`.

        Args:
            path: The unique path the provider was loaded from.
            spec: The provider builder, or ``[provider dependencies..., builder]``.

        Raises:
            DuplicateRegistrationError: If ``path`` is already registered.
            CircularReferenceError: If the provider dependencies form a cycle.
        """
        if not path:
            raise ConfigurationError("No component provider lookup path specified")

        if spec is None:
            raise ConfigurationError(f"No component provider builder specified for '{path}'")

        self._check_undefined(path)

        recipe = normalize(spec, "Provider")
        dependencies = [self.dealias(dependency) for dependency in recipe.dependencies]

        self._provider_graph.add_dependencies(path, dependencies)
        loaded = {
            dependency: self.provider(dependency)
            for dependency in self._provider_graph.resolve(path)
        }

        descriptor = recipe.builder(*(loaded[dependency] for dependency in dependencies))
        self._providers[path] = self._checked_descriptor(path, descriptor)
        logger.debug("Registered component provider '%s'", path)

    def alias(self, path: str, target: str):
        """Redirect ``path``, and every path below it, to ``target``."""
        if not path or not target:
            raise ConfigurationError(f"Alias requires a path and a target, got {path!r} -> {target!r}")

        self._check_undefined(path)
        self._aliases.add(path, target)

    async def component(self, path: str, requested_from: Optional[str] = None) -> Any:
        """Get a component, building it and its dependencies if needed.

        Args:
            path: The path of the component's provider.
            requested_from: The path whose builder asked for this component,
                if any. While that path is being built, the request is
                recorded as a dependency of it.

        Raises:
            CircularReferenceError: If the component depends on itself.
        """
        path = self.dealias(path)
        chain = _building.get()

        if (self, path) in chain:
            raise CircularReferenceError(
                [building for registry, building in chain if registry is self] + [path]
            )

        if requested_from is not None and (self, requested_from) in chain:
            self._component_graph.add_dependencies(requested_from, [path])

        descriptor = self.provider(path)
        recipe = descriptor.get

        # Loading the descriptor may have turned the path into an alias
        canonical = self.dealias(path)
        if canonical != path:
            self._component_graph.add_dependencies(path, [canonical])
            path = canonical

        self._component_graph.add_dependencies(
            path, [self.dealias(dependency) for dependency in recipe.dependencies]
        )
        self._component_graph.resolve(path)

        if descriptor.builder is not None:
            strategy = descriptor.builder
        elif descriptor.single:
            strategy = ComponentRegistry.build_singleton
        else:
            strategy = ComponentRegistry.build

        return await strategy(self, path, recipe, requested_from)

    async def build(self, path: str, recipe: Recipe, requested_from: Optional[str] = None) -> Any:
        """Build a new instance of ``path`` from ``recipe``.

        Dependencies are built one at a time in dependency order, so that
        dependencies discovered while building one of them are known before
        the next is started.
        """
        dependencies = [self.dealias(dependency) for dependency in recipe.dependencies]
        self._component_graph.add_dependencies(path, dependencies)

        resolved = {}
        for dependency in self._component_graph.resolve(path):
            resolved[dependency] = await self.component(dependency, requested_from=path)

        token = _building.set(_building.get() + ((self, path),))
        try:
            return await self._component_builder.build(
                path, recipe, [resolved[dependency] for dependency in dependencies]
            )
        finally:
            _building.reset(token)

    async def build_singleton(
        self, path: str, recipe: Recipe, requested_from: Optional[str] = None
    ) -> Any:
        """Build ``path`` once and share the instance with every request.

        The pending build is cached as soon as it starts, so requests arriving
        before it finishes wait for the same instance. A failed build is not
        cached.
        """
        pending = self._instances.get(path)

        if pending is None:
            pending = asyncio.ensure_future(self.build(path, recipe, requested_from))
            pending.add_done_callback(partial(self._discard_failed, path))
            self._instances[path] = pending
        else:
            logger.debug("Sharing component '%s'", path)

        return await asyncio.shield(pending)

    async def require(self, *paths: Any) -> Any:
        """Get one or more components.

        Called from inside a builder, the request is recorded as a dependency
        of the component being built.

        Args:
            *paths: A single path, several paths, or one list of paths.

        Returns:
            The component for a single path, otherwise a dict mapping each
            requested path to its component.

        Raises:
            ConfigurationError: If no path is given.
        """
        origin = next(
            (building for registry, building in reversed(_building.get()) if registry is self),
            None,
        )
        return await self._require(paths, origin)

    def require_from(self, origin: str):
        """Return a ``require`` function recording requests as dependencies of ``origin``."""

        async def require(*paths: Any) -> Any:
            return await self._require(paths, origin)

        return require

    async def _require(self, paths: tuple, requested_from: Optional[str]) -> Any:
        many = len(paths) != 1
        if len(paths) == 1 and isinstance(paths[0], (list, tuple)):
            paths, many = tuple(paths[0]), True

        if not paths:
            raise ConfigurationError("No component path provided for require()")

        invalid = [path for path in paths if not isinstance(path, str) or not path]
        if invalid:
            raise ConfigurationError(f"Component paths must be non-empty strings, got {invalid}")

        if not many:
            return await self.component(paths[0], requested_from)

        instances = await asyncio.gather(
            *(self.component(path, requested_from) for path in paths)
        )
        return dict(zip(paths, instances))

    def _check_undefined(self, path: str):
        if path in self._providers or path in self._aliases:
            raise DuplicateRegistrationError(f"Component provider '{path}' is already defined")

    def _checked_descriptor(self, path: str, descriptor: Any) -> Descriptor:
        if inspect.iscoroutine(descriptor):
            descriptor.close()
            raise ConfigurationError(
                f"Provider '{path}' must return its Descriptor synchronously"
            )

        if not isinstance(descriptor, Descriptor):
            raise MalformedDeclarationError(
                f"Provider '{path}' must return a Descriptor, got {descriptor!r}"
            )

        return dataclasses.replace(descriptor, get=normalize(descriptor.get, "Component getter"))

    def _discard_failed(self, path: str, pending: asyncio.Future):
        if pending.cancelled() or pending.exception() is not None:
            if self._instances.get(path) is pending:
                del self._instances[path]
