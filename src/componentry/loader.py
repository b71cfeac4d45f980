"""Loaders turning component paths into descriptor functions.

A descriptor function has the signature ``(registration, config, path)`` and
registers exactly one provider for ``path`` on the registration it is given.
The registry only depends on the :class:`Loader` protocol, so descriptors can
come from importable modules (:class:`ImportLoader`) or from an in-memory
mapping (:class:`MappingLoader`).
"""

import importlib
import importlib.util
import logging
import os
import sys
from collections.abc import Mapping, Sequence
from typing import Any, Callable, Optional, Protocol, Union

from componentry.errors import ComponentNotFoundError, ConfigurationError

__all__ = [
    "DescriptorFunction",
    "Loader",
    "ImportLoader",
    "MappingLoader",
    "split_property_path",
    "DESCRIPTOR_ATTRIBUTE",
]

logger = logging.getLogger(__name__)

DescriptorFunction = Callable[[Any, Mapping[str, Any], str], None]

DESCRIPTOR_ATTRIBUTE = "register"
"""Module attribute holding the descriptor function when no suffix is given."""

SearchPaths = Union[str, os.PathLike, Sequence[Optional[Union[str, os.PathLike]]]]


class Loader(Protocol):
    def load(self, path: str) -> DescriptorFunction:
        """Return the descriptor function for ``path``.

        Raises:
            ComponentNotFoundError: If nothing can be loaded for ``path``.
        """
        ...


def split_property_path(path: str) -> tuple[str, list[str]]:
    """Split ``"module/path:a.b.c"`` into ``("module/path", ["a", "b", "c"])``."""
    module_path, _, properties = path.partition(":")
    return module_path, [name for name in properties.split(".") if name]


def _select(target: Any, properties: list[str], path: str) -> DescriptorFunction:
    """Walk attributes (or mapping keys) of ``target`` down to the descriptor."""
    for name in properties:
        if isinstance(target, Mapping) and name in target:
            target = target[name]
        elif hasattr(target, name):
            target = getattr(target, name)
        else:
            raise ComponentNotFoundError(
                f"Component provider '{path}': no property '{name}' on {target!r}"
            )

    if not callable(target):
        raise ConfigurationError(
            f"Component provider '{path}' does not resolve to a descriptor function: {target!r}"
        )
    return target


class MappingLoader:
    """Serve descriptor functions from a mapping of paths.

    Values may be descriptor functions or any object whose properties are
    walked by a ``:property.path`` suffix.

    Example:
        >>> def register(registration, config, path):
        ...     registration.value(42)
        >>> loader = MappingLoader({"answer": register})
    """

    def __init__(self, descriptors: Mapping[str, Any]):
        self._descriptors = dict(descriptors)

    def load(self, path: str) -> DescriptorFunction:
        module_path, properties = split_property_path(path)
        try:
            target = self._descriptors[module_path]
        except KeyError:
            raise ComponentNotFoundError(
                f"Component provider '{path}' not found in {sorted(self._descriptors)}"
            ) from None
        return _select(target, properties, path)


class ImportLoader:
    """Load descriptor modules from an ordered list of search roots.

    Each root is either a directory on the filesystem or the dotted name of an
    importable package. Every root is tried in order, followed by the
    unprefixed form of the path (an absolute file path or a dotted module
    name). A ``None`` root stands for the unprefixed form explicitly.

    Without a ``:property.path`` suffix the module's ``register`` attribute is
    the descriptor function.
    """

    def __init__(self, search_paths: SearchPaths):
        if not search_paths:
            raise ConfigurationError("No component search paths specified")

        if isinstance(search_paths, (str, os.PathLike)):
            search_paths = [search_paths]

        self.search_paths: list[Optional[str]] = [
            os.fspath(root) if root is not None else None for root in search_paths
        ]
        self._modules: dict[str, Any] = {}

    def load(self, path: str) -> DescriptorFunction:
        module_path, properties = split_property_path(path)
        if not module_path:
            raise ComponentNotFoundError(f"Component provider '{path}' names no module")
        if not properties:
            properties = [DESCRIPTOR_ATTRIBUTE]

        roots = list(self.search_paths)
        if None not in roots:
            roots.append(None)
        if os.path.isabs(module_path):
            roots = [None]

        for root in roots:
            module = self._load_module(root, module_path)
            if module is not None:
                logger.debug("Loaded descriptor module for '%s' from %s", path, root or "<unprefixed>")
                return _select(module, properties, path)

        raise ComponentNotFoundError(
            f"Component provider '{path}' not found in search path {self.search_paths}"
        )

    def _load_module(self, root: Optional[str], module_path: str):
        if root is None:
            if os.path.isabs(module_path):
                return self._load_file(module_path)
            return self._import(module_path.replace("/", "."))

        if os.path.isdir(root):
            return self._load_file(os.path.join(root, *module_path.split("/")))

        if not all(part.isidentifier() for part in root.split(".")):
            return None

        return self._import(f"{root}.{module_path.replace('/', '.')}")

    def _load_file(self, base: str):
        for location in (base + ".py", os.path.join(base, "__init__.py")):
            if not os.path.isfile(location):
                continue

            location = os.path.abspath(location)
            if location in self._modules:
                return self._modules[location]

            name = "componentry.loaded._" + location.encode("utf-8").hex()
            spec = importlib.util.spec_from_file_location(name, location)
            module = importlib.util.module_from_spec(spec)
            sys.modules[name] = module
            try:
                spec.loader.exec_module(module)
            except BaseException:
                del sys.modules[name]
                raise
            self._modules[location] = module
            return module

        return None

    @staticmethod
    def _import(name: str):
        try:
            return importlib.import_module(name)
        except ModuleNotFoundError as err:
            # Only a miss on the candidate itself (or its parents) means "try the
            # next root"; a missing import inside the module is a real error.
            if err.name and (name == err.name or name.startswith(err.name + ".")):
                return None
            raise
