"""Utility helpers for the action host."""

from .logger import apply_log_level, configure_logging, to_logging_level
from .module_loader import load_module_from_path, unique_module_name

__all__ = [
    'apply_log_level',
    'configure_logging',
    'to_logging_level',
    'load_module_from_path',
    'unique_module_name',
]
