"""Dot-notation access to nested configuration dicts.

All writers are copy-on-write: only the ancestor chain of the touched key is
copied, the input is never mutated.
"""

from typing import Any, Dict

from actionhost.config.merge import UNSET


def _split(path: str) -> list:
    keys = path.split(".")
    if not path or any(not key for key in keys):
        raise ValueError(f"Invalid config key: {path!r}")
    return keys


def get_nested_value(obj: Dict[str, Any], path: str, default: Any = UNSET) -> Any:
    """Get a value by dot path (``"theme.primary_color"``).

    Returns ``default`` (``UNSET`` unless given) when any segment is missing.
    """
    current: Any = obj
    for key in _split(path):
        if not isinstance(current, dict) or key not in current:
            return default
        current = current[key]
    return current


def set_nested_value(obj: Dict[str, Any], path: str, value: Any) -> Dict[str, Any]:
    """Return a copy of ``obj`` with ``value`` stored at ``path``.

    Missing or non-dict intermediate segments are replaced by new dicts.

    Example:
        >>> set_nested_value({"theme": {"font_size": 14}}, "theme.primary_color", "cyan")
        {'theme': {'font_size': 14, 'primary_color': 'cyan'}}
    """
    keys = _split(path)
    result = dict(obj)
    current = result

    for key in keys[:-1]:
        child = current.get(key)
        current[key] = dict(child) if isinstance(child, dict) else {}
        current = current[key]

    current[keys[-1]] = value
    return result


def delete_nested_value(obj: Dict[str, Any], path: str) -> Dict[str, Any]:
    """Return a copy of ``obj`` without the key at ``path``.

    If the path does not exist the copy is returned unchanged.
    """
    keys = _split(path)
    result = dict(obj)
    current = result

    for key in keys[:-1]:
        child = current.get(key)
        if not isinstance(child, dict):
            return result
        current[key] = dict(child)
        current = current[key]

    current.pop(keys[-1], None)
    return result
