"""Single-active-prompt mediator between actions and the host's input layer.

The host installs one handler (interactive terminal, readline, test double).
Actions call the ``PromptAPI`` on their context; each call becomes a
``PromptRequest`` answered by the current handler. Only one request may be
pending at a time.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Union

from actionhost.errors import PromptBusyError, PromptUnavailableError

logger = logging.getLogger(__name__)

PROMPT_KINDS = (
    "text",
    "number",
    "password",
    "confirm",
    "select",
    "multi_select",
    "wait_for_enter",
    "wait_for_key",
)


@dataclass(frozen=True)
class SelectChoice:
    label: str
    value: Any
    description: Optional[str] = None


@dataclass(frozen=True)
class PromptRequest:
    kind: str
    message: str = ""
    choices: List[SelectChoice] = field(default_factory=list)
    options: Dict[str, Any] = field(default_factory=dict)


PromptHandler = Callable[[PromptRequest], Awaitable[Any]]

_current_handler: Optional[PromptHandler] = None
_pending = False


def set_prompt_handler(handler: PromptHandler) -> None:
    global _current_handler
    _current_handler = handler


def clear_prompt_handler() -> None:
    global _current_handler, _pending
    _current_handler = None
    _pending = False


def get_prompt_handler() -> Optional[PromptHandler]:
    return _current_handler


def is_prompt_pending() -> bool:
    return _pending


async def render_prompt(request: PromptRequest) -> Any:
    """Hand ``request`` to the current handler and wait for the answer.

    Raises:
        PromptUnavailableError: No handler is installed
        PromptBusyError: Another prompt is still pending
    """
    global _pending
    handler = _current_handler
    if handler is None:
        raise PromptUnavailableError("Prompts are not available in this mode")
    if _pending:
        raise PromptBusyError("Another prompt is already waiting for an answer")

    _pending = True
    try:
        logger.debug(f"Prompt requested: {request.kind}")
        return await handler(request)
    finally:
        _pending = False


def _normalize_choices(choices: Sequence[Union[SelectChoice, Any]]) -> List[SelectChoice]:
    normalized = []
    for choice in choices:
        if isinstance(choice, SelectChoice):
            normalized.append(choice)
        elif isinstance(choice, dict) and "value" in choice:
            normalized.append(
                SelectChoice(
                    label=str(choice.get("label", choice["value"])),
                    value=choice["value"],
                    description=choice.get("description"),
                )
            )
        else:
            normalized.append(SelectChoice(label=str(choice), value=choice))
    return normalized


class PromptAPI:
    """Prompt methods available to actions as ``ctx.prompt``."""

    async def text(self, message: str, **options: Any) -> str:
        answer = await render_prompt(PromptRequest("text", message, options=options))
        return str(answer)

    async def number(self, message: str, **options: Any) -> Union[int, float]:
        answer = await render_prompt(PromptRequest("number", message, options=options))
        value = float(answer)
        minimum, maximum = options.get("min"), options.get("max")
        if minimum is not None and value < minimum:
            raise ValueError(f"Value must be >= {minimum}")
        if maximum is not None and value > maximum:
            raise ValueError(f"Value must be <= {maximum}")
        return int(value) if value.is_integer() else value

    async def password(self, message: str, **options: Any) -> str:
        answer = await render_prompt(PromptRequest("password", message, options=options))
        return str(answer)

    async def confirm(self, message: str, **options: Any) -> bool:
        answer = await render_prompt(PromptRequest("confirm", message, options=options))
        return bool(answer)

    async def select(self, message: str, choices: Sequence[Any], **options: Any) -> Any:
        request = PromptRequest("select", message, _normalize_choices(choices), options)
        return await render_prompt(request)

    async def multi_select(self, message: str, choices: Sequence[Any], **options: Any) -> List[Any]:
        request = PromptRequest("multi_select", message, _normalize_choices(choices), options)
        answer = await render_prompt(request)
        return list(answer or [])

    async def wait_for_enter(self, message: str = "") -> None:
        await render_prompt(PromptRequest("wait_for_enter", message))

    async def wait_for_key(self, message: str = "", keys: Optional[List[str]] = None) -> str:
        answer = await render_prompt(PromptRequest("wait_for_key", message, options={"keys": keys}))
        return str(answer)
