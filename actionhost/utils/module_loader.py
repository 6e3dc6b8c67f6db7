"""Import a Python source file as an isolated module."""

import hashlib
import importlib.util
import sys
import threading
from pathlib import Path
from types import ModuleType

# sys.path is process-global; module bodies run one at a time
_load_lock = threading.Lock()


def unique_module_name(prefix: str, path: Path) -> str:
    digest = hashlib.sha1(str(path).encode("utf-8")).hexdigest()[:12]
    return f"{prefix}_{path.stem.replace('-', '_')}_{digest}"


def load_module_from_path(path: Path, module_name: str) -> ModuleType:
    """Execute ``path`` as a fresh module named ``module_name``.

    The file's directory is on ``sys.path`` while the module executes so it can
    import its siblings. Each call re-executes the file.

    Raises:
        ImportError: If no loader can be created for the file
        Exception: Anything raised by the module body
    """
    spec = importlib.util.spec_from_file_location(module_name, path)
    if spec is None or spec.loader is None:
        raise ImportError(f"Cannot load module from {path}")

    module = importlib.util.module_from_spec(spec)

    module_dir = str(path.parent)
    with _load_lock:
        added = module_dir not in sys.path
        if added:
            sys.path.insert(0, module_dir)
        try:
            spec.loader.exec_module(module)
        finally:
            if added and module_dir in sys.path:
                sys.path.remove(module_dir)

    return module
