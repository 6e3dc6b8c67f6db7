"""Action registry - name-keyed store of loaded actions."""

import logging
from typing import Dict, List, Optional

from actionhost.actions.types import ActionRecord

logger = logging.getLogger(__name__)


class ActionRegistry:
    """Central registry for actions.

    ``register`` is insert-or-replace: the last record registered under a
    name wins. Callers encode precedence by registering lower-priority
    sources first.
    """

    def __init__(self):
        self._actions: Dict[str, ActionRecord] = {}

    def register(self, action: ActionRecord) -> None:
        """Register an action, replacing any action with the same name."""
        previous = self._actions.get(action.name)
        if previous is not None:
            logger.debug(
                f"Overwriting action '{action.name}' from {previous.location} "
                f"with {action.location} (last-wins)"
            )
        self._actions[action.name] = action
        logger.debug(f"Registered action: {action.name} ({action.location})")

    def register_all(self, actions: List[ActionRecord]) -> None:
        for action in actions:
            self.register(action)

    def get_by_name(self, name: str) -> Optional[ActionRecord]:
        return self._actions.get(name)

    def get_all(self) -> List[ActionRecord]:
        """All actions in first-registration order."""
        return list(self._actions.values())

    def get_by_category(self, category: str) -> List[ActionRecord]:
        return [a for a in self._actions.values() if a.category == category]

    def names(self) -> List[str]:
        return list(self._actions)

    def has(self, name: str) -> bool:
        return name in self._actions

    def count(self) -> int:
        return len(self._actions)

    def clear(self) -> None:
        self._actions.clear()
        logger.debug("Cleared all actions from registry")
