"""Load action files into ``ActionRecord``s."""

import logging
from pathlib import Path
from types import ModuleType
from typing import Iterable, List, Optional

from actionhost.actions.types import (
    ActionRecord,
    ActionSource,
    validate_action_name,
    validate_description,
)
from actionhost.errors import ActionLoadError
from actionhost.i18n import translation_manager
from actionhost.i18n.manager import TranslationManager
from actionhost.utils.module_loader import load_module_from_path, unique_module_name

logger = logging.getLogger(__name__)


def derive_action_name(file_path: Path) -> str:
    return Path(file_path).stem


def _record_from_module(module: ModuleType, file_path: Path) -> ActionRecord:
    exported = getattr(module, "action", None)
    if isinstance(exported, ActionRecord):
        record = exported
    else:
        description = getattr(module, "description", None)
        validate_description(description)
        run = getattr(module, "run", None)
        if not callable(run):
            raise TypeError('Action must have a "run" function')
        record = ActionRecord(
            name=getattr(module, "name", "") or "",
            description=description,
            run=run,
            category=getattr(module, "category", None),
            tags=list(getattr(module, "tags", None) or []),
            translations=getattr(module, "translations", None),
        )

    if not record.name:
        record.name = derive_action_name(file_path)
        logger.debug(f"Deriving action name from filename: {file_path} -> {record.name}")
    validate_action_name(record.name)

    record.file_path = file_path
    return record


def load_action(
    file_path: Path,
    source: Optional[ActionSource] = None,
    translator: Optional[TranslationManager] = None,
) -> ActionRecord:
    """Import and validate one action file.

    Module contract: either ``action = define_action(...)`` or module-level
    ``description``/``run`` (plus optional ``name``, ``category``, ``tags``,
    ``translations``). Inline translations are registered under the action
    name.

    Raises:
        ActionLoadError: If the file is missing, fails to import or is invalid
    """
    file_path = Path(file_path)
    if not file_path.is_file():
        raise ActionLoadError(str(file_path), FileNotFoundError("File does not exist"))

    try:
        module = load_module_from_path(file_path, unique_module_name("actionhost_action", file_path))
        record = _record_from_module(module, file_path)
    except Exception as e:
        raise ActionLoadError(str(file_path), e) from e

    record.source = source
    if record.translations:
        (translator or translation_manager).register_translations(record.name, record.translations)

    logger.debug(f"Loaded action: {record.name} from {file_path}")
    return record


def load_actions(
    file_paths: Iterable[Path],
    source: Optional[ActionSource] = None,
    translator: Optional[TranslationManager] = None,
) -> List[ActionRecord]:
    """Load each file independently; failures are logged and skipped."""
    actions: List[ActionRecord] = []
    for file_path in file_paths:
        try:
            actions.append(load_action(file_path, source, translator))
        except ActionLoadError as e:
            logger.warning(f"{e.message}: {e.cause}")
    return actions
