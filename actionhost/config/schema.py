"""Configuration schema and compiled-in defaults."""

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool

LogLevel = Literal["trace", "debug", "info", "warn", "error", "fatal"]
Locale = Literal["en", "ja"]


class ThemeConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    primary_color: Optional[str] = None


class UIConfig(BaseModel):
    model_config = ConfigDict(extra="allow")

    dynamic_kaomoji: Optional[bool] = None
    bookmark_icon: Optional[str] = None
    action_list_format: Optional[str] = None


class PluginEntryObject(BaseModel):
    """Object form of a plugin entry: ``{"enabled": bool, "config": {...}}``."""

    enabled: Optional[StrictBool] = None
    config: Optional[Dict[str, Any]] = None


# ``true``/``false`` is shorthand for ``{"enabled": ...}``
PluginConfigEntry = Union[StrictBool, PluginEntryObject]


class ConfigDocument(BaseModel):
    """One configuration layer. Every field is optional.

    Unknown top-level keys are dropped on validation; writes go through the
    raw file so they survive on disk.
    """

    model_config = ConfigDict(extra="ignore")

    actions_dir: Optional[str] = None
    log_level: Optional[LogLevel] = None
    locale: Optional[Locale] = None
    theme: Optional[ThemeConfig] = None
    ui: Optional[UIConfig] = None
    plugins: Optional[Dict[str, PluginConfigEntry]] = None
    bookmarks: Optional[List[str]] = Field(default=None)


DEFAULT_CONFIG: Dict[str, Any] = {
    "actions_dir": "./.actionhost",
    "log_level": "info",
    "theme": {
        "primary_color": "green",
    },
    "ui": {
        "bookmark_icon": "♥",
        "action_list_format": (
            "${selectIcon:width(2)}[${category:max}] ${name:max} "
            "${description:grow} ${tags:max:dim:right} ${bookmark:width(2)}"
        ),
    },
}


def validate_layer(data: Any) -> Dict[str, Any]:
    """Validate a raw layer document and return only the keys it set.

    Raises:
        pydantic.ValidationError: If the document does not match the schema
    """
    document = ConfigDocument.model_validate(data)
    return document.model_dump(exclude_unset=True)
