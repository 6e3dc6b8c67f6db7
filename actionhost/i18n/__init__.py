"""Translations: process-wide manager plus loading helpers."""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from actionhost.constants import FALLBACK_LOCALE, LOCALES_DIR, SUPPORTED_LOCALES
from actionhost.i18n.manager import TranslationManager
from actionhost.i18n.scoped import TranslationFunction, create_scoped_t

logger = logging.getLogger(__name__)

BUILTIN_NAMESPACES = ("common", "errors")

translation_manager = TranslationManager()


def detect_locale(config_locale: Optional[str] = None) -> str:
    """Configured locale, else derived from LANG / LC_ALL."""
    if config_locale:
        return config_locale

    lang = os.getenv("LANG") or os.getenv("LC_ALL") or ""
    if lang.startswith("ja"):
        return "ja"
    return FALLBACK_LOCALE


def _read_bundle(path: Path) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    if not isinstance(data, dict):
        raise ValueError(f"Translation file must contain an object: {path}")
    return data


def init_i18n(config_locale: Optional[str] = None, locales_dir: Path = LOCALES_DIR) -> str:
    """Load the bundled namespaces and select the locale.

    Returns:
        The active locale
    """
    for locale in SUPPORTED_LOCALES:
        for namespace in BUILTIN_NAMESPACES:
            path = locales_dir / locale / f"{namespace}.json"
            try:
                translation_manager.add_resource_bundle(locale, namespace, _read_bundle(path))
            except (OSError, ValueError) as e:
                logger.warning(f"Failed to load translation {locale}/{namespace}: {e}")

    locale = detect_locale(config_locale)
    translation_manager.change_locale(locale)
    return locale


def register_translations(namespace: str, translations: Dict[str, Dict[str, Any]]) -> None:
    translation_manager.register_translations(namespace, translations)


def register_plugin_translations(
    namespace: str,
    locales_path: Path,
    manager: Optional[TranslationManager] = None,
) -> int:
    """Load ``<locales_path>/<locale>/translation.json`` for each supported locale.

    Missing locale files are skipped silently.

    Returns:
        Number of locale bundles registered
    """
    manager = manager or translation_manager
    loaded = 0
    for locale in SUPPORTED_LOCALES:
        path = Path(locales_path) / locale / "translation.json"
        if not path.exists():
            continue
        manager.add_resource_bundle(locale, namespace, _read_bundle(path))
        loaded += 1
    return loaded


def scoped_t(namespace: str, plugin_namespace: Optional[str] = None) -> TranslationFunction:
    return create_scoped_t(translation_manager, namespace, plugin_namespace)


__all__ = [
    "TranslationManager",
    "TranslationFunction",
    "create_scoped_t",
    "detect_locale",
    "init_i18n",
    "register_plugin_translations",
    "register_translations",
    "scoped_t",
    "translation_manager",
]
