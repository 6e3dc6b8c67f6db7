"""Namespace-scoped translator handed to actions."""

from typing import Any, Callable, Optional

from actionhost.i18n.manager import TranslationManager

TranslationFunction = Callable[..., str]

COMMON_NAMESPACE = "common"
PLUGIN_ALIAS = "plugin"


def create_scoped_t(
    manager: TranslationManager,
    namespace: str,
    plugin_namespace: Optional[str] = None,
) -> TranslationFunction:
    """Build a translator confined to the action's own namespaces.

    - ``"key"`` resolves as ``"<namespace>:key"``
    - ``"plugin:key"`` resolves as ``"<plugin_namespace>:key"``
    - ``"ns:key"`` resolves only for ``namespace``, ``plugin_namespace`` or
      ``common``; any other namespace returns the input unchanged
    """
    allowed = {namespace, COMMON_NAMESPACE}
    if plugin_namespace:
        allowed.add(plugin_namespace)

    def t(key: str, **options: Any) -> str:
        prefix, sep, actual_key = key.partition(":")
        if not sep:
            return manager.t(f"{namespace}:{key}", **options)

        if prefix == PLUGIN_ALIAS:
            if plugin_namespace:
                return manager.t(f"{plugin_namespace}:{actual_key}", **options)
            return key

        if prefix in allowed:
            return manager.t(key, **options)

        return key

    return t
