"""Runs an action and always returns an ``ExecutionResult``."""

import inspect
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Sequence

from actionhost.actions.context import create_action_context
from actionhost.actions.control import FeedbackSink
from actionhost.actions.output import OutputCallback, OutputCollector
from actionhost.actions.types import ActionRecord
from actionhost.errors import ActionExecutionError, format_error
from actionhost.i18n.manager import TranslationManager

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExecutionResult:
    success: bool
    duration_ms: int
    output: OutputCollector
    error: Optional[ActionExecutionError] = None


def _elapsed_ms(start: float) -> int:
    return round((time.perf_counter() - start) * 1000)


class ActionExecutor:
    """Builds the execution context and invokes actions.

    ``run`` never raises for failures inside the action or while building the
    context; they come back as ``ExecutionResult(success=False, error=...)``.
    """

    def __init__(
        self,
        load_config: Callable[[], Dict[str, Any]],
        plugins: Optional[Callable[[], Iterable[Any]]] = None,
        translator: Optional[TranslationManager] = None,
        cwd: Optional[Path] = None,
    ):
        """Initialize the executor.

        Args:
            load_config: Returns the merged configuration (e.g. FileConfigStore.load_merged)
            plugins: Returns the loaded plugins, used to find plugin configuration
            translator: Translation manager (process-wide one by default)
            cwd: Working directory for actions
        """
        self._load_config = load_config
        self._plugins = plugins or (lambda: [])
        self.translator = translator
        self.cwd = cwd

    def _plugin_config_for(self, action: ActionRecord) -> Optional[Dict[str, Any]]:
        if not action.plugin_namespace:
            return None
        for plugin in self._plugins():
            if plugin.meta.i18n_namespace == action.plugin_namespace:
                return plugin.user_config
        return None

    async def run(
        self,
        action: ActionRecord,
        config: Optional[Mapping[str, Any]] = None,
        args: Sequence[str] = (),
        on_output: Optional[OutputCallback] = None,
        on_visual_feedback: Optional[FeedbackSink] = None,
    ) -> ExecutionResult:
        """Run ``action``.

        Args:
            action: Action to run
            config: Merged configuration; loaded through ``load_config`` when omitted
            args: Extra arguments exposed as ``ctx.args``
            on_output: Streaming sink receiving each output message as it is emitted
            on_visual_feedback: Sink for spinner/progress updates

        Returns:
            ExecutionResult with duration recorded for both success and failure
        """
        logger.info(f"Running action: {action.name}")
        start = time.perf_counter()

        try:
            if config is None:
                config = self._load_config()
            context, collector = create_action_context(
                action_name=action.name,
                config=config,
                plugin_namespace=action.plugin_namespace,
                plugin_config=self._plugin_config_for(action),
                on_output=on_output,
                on_visual_feedback=on_visual_feedback,
                args=args,
                translator=self.translator,
                cwd=self.cwd,
            )
        except Exception as e:
            duration = _elapsed_ms(start)
            error = ActionExecutionError(action.name, e)
            logger.error(f"Could not prepare action \"{action.name}\": {format_error(error)}")
            return ExecutionResult(False, duration, OutputCollector(), error)

        try:
            outcome = action.run(context)
            if inspect.isawaitable(outcome):
                await outcome
        except (Exception, SystemExit) as e:
            duration = _elapsed_ms(start)
            error = ActionExecutionError(action.name, e)
            logger.error(
                f"Action \"{action.name}\" failed after {duration}ms: {format_error(error)}"
            )
            return ExecutionResult(False, duration, collector, error)

        duration = _elapsed_ms(start)
        logger.info(f"Action \"{action.name}\" completed successfully in {duration}ms")
        return ExecutionResult(True, duration, collector)
