"""Actions: definition, discovery, loading, registry and execution."""

from actionhost.actions.context import ExecutionContext, create_action_context
from actionhost.actions.executor import ActionExecutor, ExecutionResult
from actionhost.actions.loader import load_action, load_actions
from actionhost.actions.output import OutputCollector, OutputMessage
from actionhost.actions.registry import ActionRegistry
from actionhost.actions.resolver import find_actions, find_actions_with_priority
from actionhost.actions.shell import ShellExecutor, ShellResult
from actionhost.actions.types import ActionRecord, ActionSource, define_action

__all__ = [
    "ActionExecutor",
    "ActionRecord",
    "ActionRegistry",
    "ActionSource",
    "ExecutionContext",
    "ExecutionResult",
    "OutputCollector",
    "OutputMessage",
    "ShellExecutor",
    "ShellResult",
    "create_action_context",
    "define_action",
    "find_actions",
    "find_actions_with_priority",
    "load_action",
    "load_actions",
]
