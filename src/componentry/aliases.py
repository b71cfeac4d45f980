"""Path-prefix redirects applied before provider lookup."""

import logging
from collections.abc import Mapping

from componentry.errors import AliasChainError, AliasLoopError

__all__ = ["AliasTable", "MAX_ALIAS_HOPS"]

logger = logging.getLogger(__name__)

MAX_ALIAS_HOPS = 10

_SEPARATORS = ("/", ":")


class AliasTable:
    """Mapping from path prefixes to replacement prefixes.

    A prefix matches a path when it equals the path, ends with a separator,
    or is followed in it by a namespace separator (``/``) or a property suffix
    (``:``). Aliasing ``db`` redirects ``db/users`` but leaves ``dbx`` alone,
    and aliasing ``legacy/`` to ``modern/`` redirects ``legacy/users``. When
    several prefixes match, the longest wins.

    Example:
        >>> aliases = AliasTable()
        >>> aliases.add("storage", "backends/sqlite")
        >>> aliases.dealias("storage:engine")
        'backends/sqlite:engine'
    """

    def __init__(self):
        self._targets: dict[str, str] = {}

    def add(self, prefix: str, target: str):
        self._targets[prefix] = target
        logger.debug("Aliased '%s' to '%s'", prefix, target)

    @property
    def targets(self) -> Mapping[str, str]:
        return dict(self._targets)

    def __contains__(self, prefix: str) -> bool:
        return prefix in self._targets

    def __len__(self) -> int:
        return len(self._targets)

    def dealias(self, path: str) -> str:
        """Follow alias redirects until ``path`` no longer matches any prefix.

        Raises:
            AliasLoopError: If a rewritten path repeats an earlier one.
            AliasChainError: If more than :data:`MAX_ALIAS_HOPS` rewrites are
                needed.
        """
        history = [path]

        while True:
            prefix = self._match(path)
            if prefix is None:
                return path

            path = self._targets[prefix] + path[len(prefix):]

            if path in history:
                raise AliasLoopError(
                    f"Alias loop detected: {' -> '.join(history + [path])}"
                )
            if len(history) > MAX_ALIAS_HOPS:
                raise AliasChainError(
                    f"Possible infinite loop resolving alias chain: {' -> '.join(history)} -> ..."
                )
            history.append(path)

    def _match(self, path: str):
        matches = [
            prefix
            for prefix in self._targets
            if path == prefix
            or (
                path.startswith(prefix)
                and (prefix.endswith(_SEPARATORS) or path[len(prefix)] in _SEPARATORS)
            )
        ]
        return max(matches, key=len, default=None)
