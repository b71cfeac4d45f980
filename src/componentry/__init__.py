"""Componentry: a lazy component registry.

Componentry is the dependency injection runtime of a modular application.
Components are addressed by path; each path is backed by a descriptor module
found on the registry's search roots, which registers how the component is
built and what it depends on. Nothing is loaded or built until it is
requested, and then only what the request needs, in dependency order.

Key Features:
    - Lazy loading of descriptor modules from ordered search roots
    - Values, factories, shared components and fully custom providers
    - Dependency cycle detection, including cycles introduced at runtime
    - Singleton and transient lifecycles, with single-flight construction
    - Path aliases and parent registries for overriding implementations

Basic Usage:
    >>> from componentry import ComponentRegistry
    >>>
    >>> registry = ComponentRegistry(["app/components"], {"host": "localhost"})
    >>> service = await registry.require("services/users")

The framework consists of several modules:
    - registry: The ComponentRegistry and its resolution and build logic
    - registration: The proxy descriptor functions register themselves with
    - loader: Loaders turning paths into descriptor functions
    - graph: Dependency graph with cycle detection
    - aliases: Path prefix redirects
    - domain: Core domain models (Recipe, Descriptor, BuiltComponent)
    - errors: Framework-specific exceptions
"""

from componentry.domain import BuiltComponent, Descriptor, Recipe
from componentry.errors import (
    AliasChainError,
    AliasLoopError,
    CircularReferenceError,
    ComponentNotFoundError,
    ConfigurationError,
    DependencyError,
    DuplicateRegistrationError,
    MalformedDeclarationError,
)
from componentry.loader import ImportLoader, MappingLoader
from componentry.registration import ComponentRegistration
from componentry.registry import ComponentRegistry

__all__ = [
    "ComponentRegistry",
    "ComponentRegistration",
    "Descriptor",
    "Recipe",
    "BuiltComponent",
    "ImportLoader",
    "MappingLoader",
    "DependencyError",
    "ComponentNotFoundError",
    "ConfigurationError",
    "MalformedDeclarationError",
    "DuplicateRegistrationError",
    "CircularReferenceError",
    "AliasLoopError",
    "AliasChainError",
]
