"""Utilities for invoking component builders.

This module provides the ComponentBuilder class, which calls a recipe's
builder with its resolved dependencies, waits for deferred results and
reports every successful build to the registered observers.
"""

import inspect
import logging
import uuid
from typing import Any, Callable

from componentry.domain import BuiltComponent, Recipe

__all__ = ["ComponentBuilder", "BuildObserver"]

logger = logging.getLogger(__name__)

BuildObserver = Callable[[BuiltComponent], None]


class ComponentBuilder:
    """Build component instances from recipes and notify observers."""

    def __init__(self, observers: list[BuildObserver]):
        self._observers = observers

    def add_observer(self, observer: BuildObserver):
        self._observers.append(observer)

    async def build(self, path: str, recipe: Recipe, arguments: list[Any]) -> Any:
        """Invoke a recipe's builder and report the result.

        Args:
            path: The canonical path being built.
            recipe: The recipe whose builder is invoked.
            arguments: Resolved dependency instances, in the recipe's declared
                order.

        Returns:
            The built instance.
        """
        component = recipe.builder(*arguments)
        if inspect.isawaitable(component):
            component = await component

        built = BuiltComponent(uuid.uuid4(), path, component, list(recipe.dependencies))
        logger.debug("Built component '%s' (%s)", path, built.id)

        for observer in self._observers:
            observer(built)

        return component
