"""Output API: buffers every message and optionally streams it live."""

import json
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

MESSAGE_TYPES = (
    "log",
    "success",
    "error",
    "warn",
    "info",
    "newline",
    "code",
    "section",
    "list",
    "key_value",
    "table",
    "json",
    "separator",
    "step",
)


@dataclass(frozen=True)
class OutputMessage:
    type: str
    content: Any
    timestamp: float = field(default_factory=time.time)
    meta: Dict[str, Any] = field(default_factory=dict)


OutputCallback = Callable[[OutputMessage], None]


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if value is None:
        return "None"
    if isinstance(value, (dict, list, tuple)):
        try:
            return json.dumps(value, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(value)
    return str(value)


class OutputCollector:
    """Collects action output.

    Every message is appended to the buffer and, when ``on_message`` is set,
    forwarded to it immediately in emission order.
    """

    def __init__(self, on_message: Optional[OutputCallback] = None):
        self._messages: List[OutputMessage] = []
        self._on_message = on_message

    @property
    def messages(self) -> List[OutputMessage]:
        return list(self._messages)

    def __len__(self) -> int:
        return len(self._messages)

    def clear(self) -> None:
        self._messages.clear()

    def _add(self, type_: str, content: Any, **meta: Any) -> None:
        message = OutputMessage(type=type_, content=content, meta=meta)
        self._messages.append(message)
        if self._on_message is not None:
            self._on_message(message)

    def log(self, *args: Any) -> None:
        self._add("log", " ".join(_stringify(arg) for arg in args))

    def success(self, message: str) -> None:
        self._add("success", message)

    def error(self, message: str) -> None:
        self._add("error", message)

    def warn(self, message: str) -> None:
        self._add("warn", message)

    def info(self, message: str) -> None:
        self._add("info", message)

    def newline(self) -> None:
        self._add("newline", "")

    def code(self, snippet: str) -> None:
        self._add("code", snippet)

    def section(self, title: str) -> None:
        self._add("section", title)

    def list(self, items: List[str]) -> None:
        self._add("list", list(items))

    def key_value(self, data: Dict[str, Any]) -> None:
        self._add("key_value", dict(data))

    def table(self, rows: List[Dict[str, Any]]) -> None:
        self._add("table", [dict(row) for row in rows])

    def json(self, data: Any, indent: int = 2) -> None:
        self._add("json", data, indent=indent)

    def separator(self, char: str = "─", length: int = 50) -> None:
        self._add("separator", "", char=char, length=length)

    def step(self, number: int, description: str) -> None:
        self._add("step", description, number=number)
