"""prompt_toolkit answers for ``PromptRequest`` objects."""

import logging
from typing import Any, List, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.formatted_text import HTML
from prompt_toolkit.validation import ValidationError, Validator
from rich.console import Console

from actionhost.prompt import PromptRequest, SelectChoice

logger = logging.getLogger(__name__)


def _number_validator(options: dict) -> Validator:
    minimum, maximum = options.get("min"), options.get("max")

    def check(text: str) -> bool:
        try:
            value = float(text)
        except ValueError:
            return False
        if minimum is not None and value < minimum:
            return False
        return maximum is None or value <= maximum

    return Validator.from_callable(check, error_message="Enter a number in range", move_cursor_to_end=True)


def _parse_indexes(text: str, count: int) -> List[int]:
    indexes = []
    for part in text.replace(",", " ").split():
        index = int(part) - 1
        if not 0 <= index < count:
            raise ValueError(part)
        indexes.append(index)
    return indexes


class _ChoiceValidator(Validator):
    def __init__(self, count: int, multiple: bool):
        self.count = count
        self.multiple = multiple

    def validate(self, document) -> None:
        text = document.text.strip()
        if not text and self.multiple:
            return
        try:
            indexes = _parse_indexes(text, self.count)
        except ValueError:
            raise ValidationError(message=f"Enter a number between 1 and {self.count}")
        if not indexes or (not self.multiple and len(indexes) != 1):
            raise ValidationError(message="Choose one option")


class TerminalPromptHandler:
    """Prompt handler backed by a prompt_toolkit ``PromptSession``.

    Install it with ``set_prompt_handler(TerminalPromptHandler())``.
    """

    def __init__(self, session: Optional[PromptSession] = None, console: Optional[Console] = None):
        self.session = session or PromptSession()
        self.console = console or Console()

    async def __call__(self, request: PromptRequest) -> Any:
        handler = getattr(self, f"_ask_{request.kind}", None)
        if handler is None:
            raise ValueError(f"Unsupported prompt kind: {request.kind}")
        return await handler(request)

    async def _ask(self, message: str, **kwargs) -> str:
        return await self.session.prompt_async(HTML(f"<b>?</b> {message} "), **kwargs)

    async def _ask_text(self, request: PromptRequest) -> str:
        default = request.options.get("default") or ""
        return await self._ask(request.message, default=str(default))

    async def _ask_password(self, request: PromptRequest) -> str:
        return await self._ask(request.message, is_password=True)

    async def _ask_number(self, request: PromptRequest) -> float:
        default = request.options.get("default")
        answer = await self._ask(
            request.message,
            default="" if default is None else str(default),
            validator=_number_validator(request.options),
        )
        return float(answer)

    async def _ask_confirm(self, request: PromptRequest) -> bool:
        default = bool(request.options.get("default", False))
        hint = "Y/n" if default else "y/N"
        answer = (await self._ask(f"{request.message} ({hint})")).strip().lower()
        if not answer:
            return default
        return answer in ("y", "yes")

    def _print_choices(self, choices: List[SelectChoice]) -> None:
        for number, choice in enumerate(choices, start=1):
            suffix = f" [dim]- {choice.description}[/dim]" if choice.description else ""
            self.console.print(f"  [cyan]{number}[/cyan]) {choice.label}{suffix}")

    async def _ask_select(self, request: PromptRequest) -> Any:
        self.console.print(f"[bold]?[/bold] {request.message}")
        self._print_choices(request.choices)
        answer = await self.session.prompt_async(
            "> ", validator=_ChoiceValidator(len(request.choices), multiple=False)
        )
        index = _parse_indexes(answer, len(request.choices))[0]
        return request.choices[index].value

    async def _ask_multi_select(self, request: PromptRequest) -> List[Any]:
        self.console.print(f"[bold]?[/bold] {request.message} [dim](numbers separated by spaces)[/dim]")
        self._print_choices(request.choices)
        answer = await self.session.prompt_async(
            "> ", validator=_ChoiceValidator(len(request.choices), multiple=True)
        )
        return [request.choices[i].value for i in _parse_indexes(answer, len(request.choices))]

    async def _ask_wait_for_enter(self, request: PromptRequest) -> None:
        await self._ask(request.message or "Press Enter to continue")

    async def _ask_wait_for_key(self, request: PromptRequest) -> str:
        keys = request.options.get("keys")
        while True:
            answer = (await self._ask(request.message or "Press a key")).strip()[:1]
            if not keys or answer in keys:
                return answer
            logger.debug(f"Ignored key {answer!r}, expected one of {keys}")
