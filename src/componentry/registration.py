"""The registration proxy handed to descriptor functions.

When a descriptor module is loaded, its descriptor function is called with a
fresh :class:`ComponentRegistration` bound to the module's path. The function
registers exactly one value, factory, component or provider (or an alias),
for example::

    def register(registration, config, path):
        registration.component(["db", "cache", lambda db, cache: Service(db, cache)])

Registration is only possible while the descriptor function runs. The proxy's
:meth:`~ComponentRegistration.require` stays usable afterwards, so builders can
ask for further components at runtime.
"""

import asyncio
import inspect
from typing import Any, Callable

from componentry.domain import Descriptor, Recipe
from componentry.errors import ConfigurationError
from componentry.recipe import normalize

__all__ = ["ComponentRegistration", "memoize"]


def memoize(builder: Callable) -> Callable:
    """Wrap ``builder`` so that it builds once for the life of the wrapper.

    The first successful result is returned by every later call. When the
    builder returns an awaitable, the pending future is shared straight away,
    so calls made while the first build is still running wait for the same
    result instead of starting another build. A failed build is forgotten and
    retried by the next call.
    """
    memo = []

    def forget_failure(future):
        if memo and memo[0] is future and (future.cancelled() or future.exception()):
            memo.clear()

    def memoized(*args):
        if memo:
            return memo[0]

        result = builder(*args)
        if inspect.isawaitable(result):
            result = asyncio.ensure_future(result)
            result.add_done_callback(forget_failure)

        memo.append(result)
        return result

    memoized.__wrapped__ = builder
    return memoized


class ComponentRegistration:
    """Write-only handle for registering the provider of a single path."""

    def __init__(self, registry, path: str):
        self.registry = registry
        self.path = path
        self.require = registry.require_from(path)
        self._open = True

    def close(self):
        """Reject any further registration through this proxy."""
        self._open = False

    def _register(self, spec: Any):
        if not self._open:
            raise ConfigurationError(
                f"Registration for '{self.path}' attempted after its descriptor returned; "
                "descriptors must register synchronously"
            )
        self.registry.register(self.path, spec)

    def value(self, value: Any):
        """Register a static value. Values cannot have dependencies.

        Example:
            registration.value({"host": "localhost"})
        """
        self._register(lambda: Descriptor(Recipe((), lambda: value)))

    def factory(self, spec: Any):
        """Register a component factory, called again for every injection.

        Args:
            spec: A builder function, or ``[dependencies..., builder]``.
        """
        recipe = normalize(spec, "Factory")
        self._register(lambda: Descriptor(recipe))

    def component(self, spec: Any):
        """Register a component built at most once for the life of the registry.

        Example:
            registration.component(["http", lambda http: Client(http)])

        Args:
            spec: A builder function, or ``[dependencies..., builder]``.
        """
        recipe = normalize(spec, "Component")
        shared = Recipe(recipe.dependencies, memoize(recipe.builder))
        self._register(lambda: Descriptor(shared, single=True))

    def provider(self, spec: Any):
        """Register a provider, which controls how its component is built.

        A provider builder may only depend on other providers and must return
        a :class:`~componentry.domain.Descriptor`:

            registration.provider(["hosts", lambda hosts: Descriptor(
                ["http", lambda http: Client(http, hosts.server)],
            )])

        Args:
            spec: A provider builder, or ``[provider dependencies..., builder]``.
        """
        self._register(normalize(spec, "Provider"))

    def alias(self, target: str):
        """Redirect this path (and every path below it) to ``target``."""
        if not self._open:
            raise ConfigurationError(
                f"Alias for '{self.path}' attempted after its descriptor returned"
            )
        self.registry.alias(self.path, target)
