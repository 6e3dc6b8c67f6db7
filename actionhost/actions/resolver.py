"""Find action files in a directory."""

import logging
from pathlib import Path
from typing import Iterable, List

logger = logging.getLogger(__name__)

ACTION_SUFFIX = ".py"
EXCLUDED_DIRS = frozenset(
    {"__pycache__", ".git", ".venv", "venv", "node_modules", "build", "dist", ".cache"}
)


def _is_action_file(path: Path) -> bool:
    return path.is_file() and path.suffix == ACTION_SUFFIX and not path.name.startswith(("_", "."))


def find_actions(directory: Path, recursive: bool = False) -> List[Path]:
    """Action files under ``directory``, sorted by path.

    Files starting with ``_`` (helpers, ``__init__.py``) are ignored. A missing
    or unreadable directory yields an empty list.
    """
    directory = Path(directory)
    if not directory.is_dir():
        logger.debug(f"Action directory does not exist: {directory}")
        return []

    found: List[Path] = []
    pending = [directory]
    while pending:
        current = pending.pop()
        try:
            entries = list(current.iterdir())
        except OSError as e:
            logger.warning(f"Failed to read directory {current}: {e}")
            continue

        for entry in entries:
            if entry.is_dir():
                if recursive and entry.name not in EXCLUDED_DIRS:
                    pending.append(entry)
            elif _is_action_file(entry):
                found.append(entry.resolve())

    return sorted(found)


def find_actions_with_priority(directories: Iterable[Path], recursive: bool = False) -> List[Path]:
    """Concatenate ``find_actions`` over ``directories`` in the given order."""
    paths: List[Path] = []
    for directory in directories:
        actions = find_actions(directory, recursive=recursive)
        logger.debug(f"Found {len(actions)} action(s) in {directory}")
        paths.extend(actions)
    return paths
