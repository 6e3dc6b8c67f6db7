"""Error hierarchy for the action host."""

from typing import Optional


class ActionHostError(Exception):
    """Base error. Carries a machine-readable code and an optional cause."""

    code: Optional[str] = None

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.message = message
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause


class ConfigError(ActionHostError):
    code = "CONFIG_ERROR"


class ConfigLoadError(ConfigError):
    """A configuration layer could not be loaded."""

    code = "CONFIG_LOAD_ERROR"

    def __init__(self, layer: str, path: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to load {layer} config from {path}", cause)
        self.layer = layer
        self.path = path


class ConfigWriteError(ConfigError):
    """A configuration value could not be written."""

    code = "CONFIG_WRITE_ERROR"

    def __init__(self, layer: str, key: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to write {key} to {layer} config", cause)
        self.layer = layer
        self.key = key


class PluginLoadError(ActionHostError):
    code = "PLUGIN_LOAD_ERROR"

    def __init__(self, plugin_name: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to load plugin: {plugin_name}", cause)
        self.plugin_name = plugin_name


class ActionLoadError(ActionHostError):
    code = "ACTION_LOAD_ERROR"

    def __init__(self, file_path: str, cause: Optional[BaseException] = None):
        super().__init__(f"Failed to load action from {file_path}", cause)
        self.file_path = str(file_path)


class ActionExecutionError(ActionHostError):
    code = "ACTION_EXECUTION_ERROR"

    def __init__(self, action_name: str, cause: Optional[BaseException] = None):
        super().__init__(f"Action '{action_name}' failed", cause)
        self.action_name = action_name


class ActionNotFoundError(ActionHostError):
    code = "ACTION_NOT_FOUND"

    def __init__(self, action_name: str):
        super().__init__(f"Action '{action_name}' not found")
        self.action_name = action_name


class PromptError(ActionHostError):
    code = "PROMPT_ERROR"


class PromptUnavailableError(PromptError):
    """No prompt handler is installed (e.g. stdin is not interactive)."""

    code = "PROMPT_UNAVAILABLE"


class PromptBusyError(PromptError):
    """A second prompt was issued while another one is still pending."""

    code = "PROMPT_BUSY"


def _describe(error: BaseException) -> str:
    if isinstance(error, ActionHostError):
        return f"[{error.code}] {error.message}" if error.code else error.message
    message = str(error)
    if not message:
        return type(error).__name__
    if type(error) is not Exception:
        return f"{type(error).__name__}: {message}"
    return message


def format_error(error: object) -> str:
    """Render an error and its cause chain, one ``Caused by:`` line per link.

    Args:
        error: Anything that was raised or otherwise reported as a failure

    Returns:
        Human-readable multi-line description
    """
    if not isinstance(error, BaseException):
        return str(error)

    lines = [_describe(error)]
    seen = {id(error)}
    current = error.__cause__
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        lines.append(f"Caused by: {_describe(current)}")
        current = current.__cause__
    return "\n".join(lines)
