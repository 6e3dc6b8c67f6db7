"""Plugin manifest model - describes a plugin package without importing it."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PluginManifest(BaseModel):
    """Plugin manifest loaded from plugin.json."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(..., min_length=1, description="Package name (actionhost-plugin-*)")
    version: str = Field(..., min_length=1, description="Plugin version")
    description: str = Field(default="", description="Plugin description")
    author: Optional[str] = Field(default=None, description="Plugin author")
    entry_point: Optional[str] = Field(
        default=None,
        description="Python file relative to the plugin directory exporting `plugin` "
        "(defaults to plugin.py)",
    )


@dataclass(frozen=True)
class PluginDescriptor:
    """A discovered plugin package. No plugin code has been executed."""

    name: str
    path: Path
    manifest: PluginManifest
