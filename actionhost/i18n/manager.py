"""Translation store with locale fallback."""

import re
from typing import Any, Dict, List, Optional

from actionhost.constants import FALLBACK_LOCALE

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

# locale -> namespace -> nested resources
TranslationStore = Dict[str, Dict[str, Dict[str, Any]]]


def get_by_path(obj: Dict[str, Any], path: str) -> Any:
    current: Any = obj
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def interpolate(text: str, variables: Optional[Dict[str, Any]] = None) -> str:
    """Replace ``{{name}}`` placeholders; missing variables become ''."""
    if not variables:
        return text

    def replace(match: "re.Match[str]") -> str:
        value = variables.get(match.group(1))
        return "" if value is None else str(value)

    return _PLACEHOLDER.sub(replace, text)


class TranslationManager:
    """Holds translation bundles and resolves ``namespace:key`` lookups."""

    def __init__(self, locale: str = FALLBACK_LOCALE):
        self._translations: TranslationStore = {}
        self._locale = locale
        self.fallback_locale = FALLBACK_LOCALE

    @property
    def locale(self) -> str:
        return self._locale

    def change_locale(self, locale: str) -> None:
        self._locale = locale

    def init(self, resources: TranslationStore) -> None:
        self._translations = {
            locale: {ns: dict(data) for ns, data in namespaces.items()}
            for locale, namespaces in resources.items()
        }

    def t(self, key: str, **options: Any) -> str:
        """Translate ``namespace:key`` (namespace defaults to ``common``).

        Falls back to the fallback locale, then to ``default_value``, then to
        the key itself.
        """
        namespace, _, actual_key = key.partition(":")
        if not actual_key:
            namespace, actual_key = "common", key

        value = self._lookup(self._locale, namespace, actual_key)
        if value is None and self._locale != self.fallback_locale:
            value = self._lookup(self.fallback_locale, namespace, actual_key)

        if value is None:
            default = options.get("default_value")
            return str(default) if default is not None else key

        return interpolate(str(value), options)

    def _lookup(self, locale: str, namespace: str, key: str) -> Any:
        data = self._translations.get(locale, {}).get(namespace)
        if not data:
            return None
        return get_by_path(data, key)

    def register_translations(
        self, namespace: str, translations: Dict[str, Dict[str, Any]]
    ) -> None:
        """Register ``{locale: resources}`` under ``namespace``."""
        for locale, resources in translations.items():
            self.add_resource_bundle(locale, namespace, resources)

    def add_resource_bundle(
        self, locale: str, namespace: str, resources: Dict[str, Any]
    ) -> None:
        bundles = self._translations.setdefault(locale, {})
        existing = bundles.get(namespace, {})
        bundles[namespace] = {**existing, **resources}

    def has_namespace(self, namespace: str) -> bool:
        return any(namespace in bundles for bundles in self._translations.values())

    def get_namespaces(self) -> List[str]:
        names = set()
        for bundles in self._translations.values():
            names.update(bundles)
        return sorted(names)
