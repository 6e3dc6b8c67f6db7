"""ActionHost - wires config, plugins, action loading and execution together."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

from actionhost.actions.control import FeedbackSink
from actionhost.actions.executor import ActionExecutor, ExecutionResult
from actionhost.actions.loader import load_actions
from actionhost.actions.output import OutputCallback
from actionhost.actions.registry import ActionRegistry
from actionhost.actions.resolver import find_actions_with_priority
from actionhost.actions.types import ActionRecord, ActionSource
from actionhost.config.paths import get_action_directories
from actionhost.config.store import FileConfigStore
from actionhost.errors import ActionNotFoundError
from actionhost.i18n import translation_manager
from actionhost.i18n.manager import TranslationManager
from actionhost.plugins import create_plugin_manager
from actionhost.plugins.manager import PluginManager

logger = logging.getLogger(__name__)


class ActionHost:
    """Loads actions from every source and runs them by name.

    Registration order is fixed: project, then global, then plugin actions.
    The registry is last-wins, so for a duplicated name the plugin action is
    the one that runs.
    """

    def __init__(
        self,
        cwd: Optional[Path] = None,
        store: Optional[FileConfigStore] = None,
        plugin_manager: Optional[PluginManager] = None,
        registry: Optional[ActionRegistry] = None,
        translator: Optional[TranslationManager] = None,
    ):
        self.cwd = Path(cwd) if cwd else Path.cwd()
        self.translator = translator or translation_manager
        self.store = store or FileConfigStore(self.cwd)
        self.plugin_manager = plugin_manager or create_plugin_manager(self.cwd, self.translator)
        self.registry = registry or ActionRegistry()
        self.executor = ActionExecutor(
            load_config=self.store.load_merged,
            plugins=self.plugin_manager.get_plugins,
            translator=self.translator,
            cwd=self.cwd,
        )
        self.config: Dict[str, Any] = {}
        self._batches: Dict[ActionSource, List[ActionRecord]] = {}

    def _register_batches(self) -> None:
        self.registry.clear()
        for source in sorted(self._batches, key=lambda s: s.rank):
            self.registry.register_all(self._batches[source])

    def _load_source(self, source: ActionSource, directories: List[Path]) -> List[ActionRecord]:
        paths = find_actions_with_priority(directories)
        return load_actions(paths, source, self.translator)

    async def load(self, config: Optional[Mapping[str, Any]] = None) -> List[ActionRecord]:
        """Load project, global and plugin actions into the registry.

        The three sources load concurrently; registration happens afterwards
        in source rank order regardless of which finished first.

        Returns:
            All registered actions
        """
        self.config = dict(config) if config is not None else self.store.load_merged()
        directories = get_action_directories(self.cwd)

        async def plugin_actions() -> List[ActionRecord]:
            await self.plugin_manager.load_all(self.config)
            return self.plugin_manager.get_actions()

        project, global_, plugin = await asyncio.gather(
            asyncio.to_thread(self._load_source, ActionSource.PROJECT, directories["project"]),
            asyncio.to_thread(self._load_source, ActionSource.GLOBAL, directories["global"]),
            plugin_actions(),
        )

        self._batches = {
            ActionSource.PROJECT: project,
            ActionSource.GLOBAL: global_,
            ActionSource.PLUGIN: plugin,
        }
        self._register_batches()

        logger.info(
            f"Loaded {self.registry.count()} action(s): {len(project)} project, "
            f"{len(global_)} global, {len(plugin)} plugin"
        )
        return self.registry.get_all()

    async def reload_plugins(self, config: Optional[Mapping[str, Any]] = None) -> List[ActionRecord]:
        """Re-read plugin enable/config settings and rebuild the registry.

        The project and global batches from the last ``load()`` are kept in
        full, so a name a plugin no longer provides falls back to the global
        or project action it was shadowing.
        """
        self.config = dict(config) if config is not None else self.store.load_merged()
        self._batches[ActionSource.PLUGIN] = await self.plugin_manager.reload_actions(self.config)
        self._register_batches()
        return self.registry.get_all()

    def get_action(self, name: str) -> ActionRecord:
        """Look up an action by name.

        Raises:
            ActionNotFoundError: If no action is registered under ``name``
        """
        action = self.registry.get_by_name(name)
        if action is None:
            raise ActionNotFoundError(name)
        return action

    async def run(
        self,
        name: str,
        args: Sequence[str] = (),
        on_output: Optional[OutputCallback] = None,
        on_visual_feedback: Optional[FeedbackSink] = None,
    ) -> ExecutionResult:
        """Run an action by name.

        Raises:
            ActionNotFoundError: If the action does not exist (failures inside
                the action are reported in the result instead)
        """
        action = self.get_action(name)
        return await self.executor.run(
            action,
            args=args,
            on_output=on_output,
            on_visual_feedback=on_visual_feedback,
        )
