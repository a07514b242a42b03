"""Name -> descriptor map with uniqueness and exclusion rules."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator

from .errors import ActionNotFound, DuplicateAction
from .views import ActionDescriptor


logger = logging.getLogger(__name__)


class ActionStore:
    """Registered actions in insertion order.

    Duplicate names are rejected unless an overwrite is requested for the
    call or allowed store-wide. An overwrite keeps the original position so
    prompt descriptions stay stable. Names on the exclusion list are skipped
    without error.
    """

    def __init__(self, exclude_actions: Iterable[str] = (), *, allow_overwrite: bool = False) -> None:
        self.exclude_actions: frozenset[str] = frozenset(exclude_actions)
        self.allow_overwrite = allow_overwrite
        self._actions: dict[str, ActionDescriptor] = {}

    def register(self, descriptor: ActionDescriptor, *, overwrite: bool = False) -> bool:
        """Add a descriptor.

        Returns:
            True if stored, False if the name is excluded.

        Raises:
            ValueError: Empty name.
            DuplicateAction: Name taken and no overwrite allowed.
        """
        name = descriptor.name
        if not name:
            raise ValueError("Action name must not be empty")
        if name in self.exclude_actions:
            logger.debug("Skipping excluded action %s", name)
            return False
        if name in self._actions:
            if not (overwrite or self.allow_overwrite):
                raise DuplicateAction(name)
            logger.info("Overwriting action %s", name)
        self._actions[name] = descriptor
        logger.debug("Registered action %s", name)
        return True

    def lookup(self, name: str) -> ActionDescriptor:
        try:
            return self._actions[name]
        except KeyError:
            raise ActionNotFound(name) from None

    def list(self) -> list[ActionDescriptor]:
        return list(self._actions.values())

    def names(self) -> list[str]:
        return list(self._actions)

    def __contains__(self, name: object) -> bool:
        return name in self._actions

    def __len__(self) -> int:
        return len(self._actions)

    def __iter__(self) -> Iterator[ActionDescriptor]:
        return iter(self.list())
