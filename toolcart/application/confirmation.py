"""Checkout confirmation providers.

A checkout asks its caller to approve or decline before anything is
charged. The request may suspend for as long as the caller needs; there is
no timeout. Declining is a normal outcome, not an error.
"""

import asyncio
import inspect
from dataclasses import dataclass
from typing import Awaitable, Callable, Protocol

import structlog

logger = structlog.get_logger()


class ConfirmationProvider(Protocol):
    """Capability to ask the caller a yes/no question."""

    async def request_confirmation(self, prompt: str) -> bool:
        ...


class ConsolePrompt:
    """Synchronous yes/no prompt on the terminal.

    Used when the caller offers no confirmation capability of its own. The
    blocking ``input`` call runs in a worker thread so the event loop stays
    free while the operator decides.
    """

    YES = frozenset({"y", "yes"})

    def __init__(self, input_func: Callable[[str], str] = input) -> None:
        self._input = input_func

    async def request_confirmation(self, prompt: str) -> bool:
        try:
            answer = await asyncio.to_thread(self._input, f"{prompt} [y/N] ")
        except EOFError:
            logger.warning("No terminal available for confirmation, declining", prompt=prompt)
            return False
        return answer.strip().lower() in self.YES


@dataclass(frozen=True)
class StaticConfirmation:
    """Answer decided before the call, e.g. by a UI confirm dialog."""

    approve: bool

    async def request_confirmation(self, prompt: str) -> bool:
        return self.approve


class CallbackConfirmation:
    """Delegate to a function returning a bool or an awaitable bool."""

    def __init__(self, callback: Callable[[str], bool | Awaitable[bool]]) -> None:
        self._callback = callback

    async def request_confirmation(self, prompt: str) -> bool:
        result = self._callback(prompt)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)


@dataclass(frozen=True)
class CallerContext:
    """What the caller of an operation offers besides its input.

    Attributes:
        confirmation: Caller's own way to approve a checkout, if any.
        source: Activity-log prefix for the call ("tool", "ui", "demo").
    """

    confirmation: ConfirmationProvider | None = None
    source: str = "tool"
