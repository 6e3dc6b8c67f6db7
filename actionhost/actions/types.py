"""Action records and the ``define_action`` helper."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union, TYPE_CHECKING

if TYPE_CHECKING:
    from actionhost.actions.context import ExecutionContext

ACTION_NAME_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")

Description = Union[str, Callable[["ExecutionContext"], str]]
RunFunction = Callable[["ExecutionContext"], Any]
Translations = Dict[str, Dict[str, Any]]


class ActionSource(str, Enum):
    """Where an action came from. ``rank`` orders registration (lowest first)."""

    PROJECT = "project"
    GLOBAL = "global"
    PLUGIN = "plugin"

    @property
    def rank(self) -> int:
        return _SOURCE_RANKS[self]


# Registered in ascending rank; a later registration replaces an earlier one
_SOURCE_RANKS = {
    ActionSource.PROJECT: 0,
    ActionSource.GLOBAL: 1,
    ActionSource.PLUGIN: 2,
}


@dataclass
class ActionRecord:
    """A loaded action."""

    name: str
    description: Description
    run: RunFunction
    file_path: Optional[Path] = None
    source: Optional[ActionSource] = None
    category: Optional[str] = None
    tags: List[str] = field(default_factory=list)
    translations: Optional[Translations] = field(default=None, repr=False)
    plugin_name: Optional[str] = None
    plugin_namespace: Optional[str] = None

    @property
    def location(self) -> str:
        """``project``, ``global`` or ``plugin:<name>``."""
        if self.source is ActionSource.PLUGIN and self.plugin_name:
            return f"plugin:{self.plugin_name}"
        return self.source.value if self.source else "unknown"

    def resolve_description(self, context: Optional["ExecutionContext"] = None) -> str:
        """Description text; callable descriptions are evaluated with ``context``."""
        if callable(self.description):
            if context is None:
                return self.name
            return str(self.description(context))
        return self.description


def validate_action_name(name: str) -> None:
    if not ACTION_NAME_PATTERN.match(name):
        raise ValueError(
            f"Action name must contain only alphanumeric characters, dashes, "
            f"and underscores, got: {name!r}"
        )


def validate_description(description: Any) -> None:
    if not description:
        raise ValueError("Action description is required")
    if not isinstance(description, str) and not callable(description):
        raise TypeError("Action description must be a string or function")


def define_action(
    description: Description,
    run: RunFunction,
    name: Optional[str] = None,
    category: Optional[str] = None,
    tags: Optional[List[str]] = None,
    translations: Optional[Translations] = None,
) -> ActionRecord:
    """Declare an action in an action file.

    Example::

        action = define_action(
            description="Say hello",
            run=lambda ctx: ctx.output.success(ctx.t("greeting")),
            translations={"en": {"greeting": "Hello"}},
        )

    The name may be omitted; the loader derives it from the file name.

    Raises:
        ValueError / TypeError: If the definition is invalid
    """
    validate_description(description)
    if not callable(run):
        raise TypeError("Action run function is required")
    if name:
        validate_action_name(name)

    return ActionRecord(
        name=name or "",
        description=description,
        run=run,
        category=category,
        tags=list(tags or []),
        translations=translations,
    )
