"""Timing and visual-feedback controls exposed to actions as ``ctx.control``."""

import asyncio
import shutil
import sys
from dataclasses import dataclass, replace
from typing import Callable, Optional, Tuple

from actionhost.prompt import PromptAPI


@dataclass(frozen=True)
class VisualFeedback:
    """Spinner/progress state pushed to the rendering layer."""

    kind: str  # "spinner" | "progress"
    message: str = ""
    value: Optional[float] = None
    total: Optional[float] = None
    status: str = "running"  # "running" | "succeeded" | "failed" | "stopped"


FeedbackSink = Callable[[VisualFeedback], None]


class SpinnerControl:
    def __init__(self, sink: FeedbackSink, message: str = ""):
        self._sink = sink
        self._state = VisualFeedback(kind="spinner", message=message, status="idle")

    def _push(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        self._sink(self._state)

    def start(self, message: Optional[str] = None) -> None:
        self._push(status="running", message=message or self._state.message)

    def update(self, message: str) -> None:
        self._push(message=message)

    def succeed(self, message: Optional[str] = None) -> None:
        self._push(status="succeeded", message=message or self._state.message)

    def fail(self, message: Optional[str] = None) -> None:
        self._push(status="failed", message=message or self._state.message)

    def stop(self) -> None:
        self._push(status="stopped")


class ProgressControl:
    def __init__(self, sink: FeedbackSink, total: float = 100, message: str = ""):
        self._sink = sink
        self._state = VisualFeedback(kind="progress", message=message, value=0, total=total)
        self._sink(self._state)

    def _push(self, **changes) -> None:
        self._state = replace(self._state, **changes)
        self._sink(self._state)

    def update(self, value: float, message: Optional[str] = None) -> None:
        value = max(0, min(value, self._state.total or value))
        self._push(value=value, message=message or self._state.message)

    def increment(self, amount: float = 1) -> None:
        self.update((self._state.value or 0) + amount)

    def succeed(self, message: Optional[str] = None) -> None:
        self._push(status="succeeded", value=self._state.total, message=message or self._state.message)

    def fail(self, message: Optional[str] = None) -> None:
        self._push(status="failed", message=message or self._state.message)


_NO_FEEDBACK = (
    "{name}() requires visual feedback support. This action is running without "
    "a rendering layer; spinner/progress are only available in interactive mode."
)


class ControlAPI:
    def __init__(self, prompt: PromptAPI, on_visual_feedback: Optional[FeedbackSink] = None):
        self._prompt = prompt
        self._sink = on_visual_feedback

    async def delay(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def wait_for_enter(self, message: str = "") -> None:
        await self._prompt.wait_for_enter(message)

    def is_interactive(self) -> bool:
        return sys.stdin.isatty() and sys.stdout.isatty()

    def terminal_size(self) -> Tuple[int, int]:
        size = shutil.get_terminal_size()
        return size.columns, size.lines

    def spinner(self, message: str = "") -> SpinnerControl:
        if self._sink is None:
            raise RuntimeError(_NO_FEEDBACK.format(name="spinner"))
        return SpinnerControl(self._sink, message)

    def progress(self, total: float = 100, message: str = "") -> ProgressControl:
        if self._sink is None:
            raise RuntimeError(_NO_FEEDBACK.format(name="progress"))
        return ProgressControl(self._sink, total, message)
