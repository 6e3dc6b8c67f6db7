"""Execution context handed to an action's ``run``."""

import copy
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from actionhost.actions.control import ControlAPI, FeedbackSink
from actionhost.actions.output import OutputCallback, OutputCollector
from actionhost.actions.shell import ShellExecutor
from actionhost.i18n import translation_manager
from actionhost.i18n.manager import TranslationManager
from actionhost.i18n.scoped import TranslationFunction, create_scoped_t
from actionhost.prompt import PromptAPI


@dataclass
class ExecutionContext:
    """Capabilities available to a running action.

    Attributes:
        action_name: Name of the running action
        t: Translator scoped to the action (and its plugin) namespace
        output: Output API (buffered, optionally streamed)
        shell: ``await ctx.shell("git log -n {}", 5)``
        prompt: Interactive prompts, answered by the host's prompt handler
        control: Delays, spinner and progress
        config: Snapshot of the merged configuration
        plugin_config: Validated plugin configuration, for plugin actions
        cwd: Working directory
        env: Snapshot of the process environment
        args: Extra arguments supplied by the caller
        logger: ``plugin.<namespace>`` for plugin actions, else ``action.<name>``
    """

    action_name: str
    t: TranslationFunction
    output: OutputCollector
    shell: ShellExecutor
    prompt: PromptAPI
    control: ControlAPI
    config: Mapping[str, Any]
    plugin_config: Optional[Dict[str, Any]] = None
    cwd: Path = field(default_factory=Path.cwd)
    env: Mapping[str, str] = field(default_factory=dict)
    args: Tuple[str, ...] = ()
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("action"))


def create_action_context(
    action_name: str,
    config: Mapping[str, Any],
    plugin_namespace: Optional[str] = None,
    plugin_config: Optional[Dict[str, Any]] = None,
    on_output: Optional[OutputCallback] = None,
    on_visual_feedback: Optional[FeedbackSink] = None,
    args: Sequence[str] = (),
    translator: Optional[TranslationManager] = None,
    cwd: Optional[Path] = None,
) -> Tuple[ExecutionContext, OutputCollector]:
    """Build the context for one invocation.

    Synchronous and side-effect free apart from the snapshots it takes.

    Returns:
        The context and its output collector (for reading the buffer afterwards)
    """
    collector = OutputCollector(on_output)
    prompt = PromptAPI()
    work_dir = Path(cwd) if cwd else Path.cwd()
    env = dict(os.environ)

    context = ExecutionContext(
        action_name=action_name,
        t=create_scoped_t(translator or translation_manager, action_name, plugin_namespace),
        output=collector,
        shell=ShellExecutor(cwd=work_dir),
        prompt=prompt,
        control=ControlAPI(prompt, on_visual_feedback),
        config=MappingProxyType(copy.deepcopy(dict(config))),
        plugin_config=copy.deepcopy(plugin_config) if plugin_config is not None else None,
        cwd=work_dir,
        env=MappingProxyType(env),
        args=tuple(args),
        logger=logging.getLogger(
            f"plugin.{plugin_namespace}" if plugin_namespace else f"action.{action_name}"
        ),
    )
    return context, collector
