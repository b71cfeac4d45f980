__all__ = [
    "DependencyError",
    "ComponentNotFoundError",
    "ConfigurationError",
    "MalformedDeclarationError",
    "DuplicateRegistrationError",
    "CircularReferenceError",
    "AliasLoopError",
    "AliasChainError",
]


class DependencyError(Exception):
    """Raised when a component's dependency cannot be resolved or is misdeclared."""

    pass


class ComponentNotFoundError(DependencyError, LookupError):
    """No descriptor module could be found for a path on any search root."""

    pass


class ConfigurationError(DependencyError):
    """The registry or one of its descriptor modules is set up incorrectly."""

    pass


class MalformedDeclarationError(ConfigurationError, TypeError):
    """A registration call did not match the ``[dependencies..., builder]`` shape."""

    pass


class DuplicateRegistrationError(ConfigurationError):
    pass


class CircularReferenceError(DependencyError):
    """A path's transitive dependencies contain a cycle."""

    def __init__(self, paths):
        self.paths = list(paths)
        super().__init__(f"Circular reference detected between {self.paths}")


class AliasLoopError(DependencyError):
    pass


class AliasChainError(AliasLoopError):
    pass
