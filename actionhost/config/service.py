"""Configuration use cases: change/reset a key and apply its side effects."""

import logging
from typing import Any, Dict

from actionhost.config.store import FileConfigStore
from actionhost.i18n import translation_manager
from actionhost.i18n.manager import TranslationManager
from actionhost.utils.logger import apply_log_level

logger = logging.getLogger(__name__)


class ConfigService:
    """Writes a setting, applies runtime side effects, returns the new merged config."""

    def __init__(self, store: FileConfigStore, translator: TranslationManager = translation_manager):
        self.store = store
        self.translator = translator

    def get_config(self) -> Dict[str, Any]:
        return self.store.load_merged()

    def change_config(self, key: str, value: Any, layer: str = "workspace") -> Dict[str, Any]:
        """Save ``key`` to ``layer`` and reload.

        Raises:
            ConfigWriteError: If the settings file cannot be written
        """
        self.store.save(layer, key, value)
        self._apply_side_effects(key, value)
        logger.info(f"Changed config {key} in {layer} layer")
        return self.store.load_merged()

    def reset_config(self, key: str, layer: str) -> Dict[str, Any]:
        """Delete ``key`` from ``layer`` so the lower layer (or default) applies."""
        self.store.delete(layer, key)
        merged = self.store.load_merged()
        if key in ("locale", "log_level"):
            self._apply_side_effects(key, merged.get(key))
        logger.info(f"Reset config {key} in {layer} layer")
        return merged

    def _apply_side_effects(self, key: str, value: Any) -> None:
        if key == "locale" and value:
            self.translator.change_locale(value)
        elif key == "log_level":
            apply_log_level(value)
