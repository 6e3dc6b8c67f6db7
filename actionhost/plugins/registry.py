"""Loaded plugin state."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Type

from pydantic import BaseModel


class PluginState(str, Enum):
    """Plugin lifecycle states."""

    DISCOVERED = "discovered"
    LOADED = "loaded"
    ACTIONS_LOADED = "actions_loaded"
    ERROR = "error"


@dataclass
class LoadedPluginMeta:
    name: str
    version: str
    description: str = ""
    author: Optional[str] = None
    i18n_namespace: str = ""


@dataclass
class LoadedPlugin:
    """A plugin whose entry module has been loaded and validated.

    ``enabled`` and ``user_config`` are updated in place when the
    configuration is reloaded.
    """

    meta: LoadedPluginMeta
    path: Path
    action_paths: List[Path] = field(default_factory=list)
    locales_path: Optional[Path] = None
    config_schema: Optional[Type[BaseModel]] = field(default=None, repr=False)
    user_config: Optional[Dict[str, Any]] = None
    enabled: bool = True
    state: PluginState = PluginState.LOADED

    @property
    def name(self) -> str:
        return self.meta.name

    def to_dict(self) -> dict:
        """Serialize for listings."""
        return {
            "name": self.meta.name,
            "version": self.meta.version,
            "description": self.meta.description,
            "author": self.meta.author,
            "i18n_namespace": self.meta.i18n_namespace,
            "path": str(self.path),
            "actions": len(self.action_paths),
            "enabled": self.enabled,
            "state": self.state.value,
            "config": self.user_config,
            "config_schema": self.config_schema.model_json_schema() if self.config_schema else None,
        }
