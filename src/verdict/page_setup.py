"""Page setup callables: put the page in the state to verify."""

from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Union

from src.renderer.page_renderer import PageRenderer

from .errors import UsageError

PageSetup = Callable[[PageRenderer], Union[None, Awaitable[Any]]]


def noop_setup(renderer: PageRenderer) -> None:
    return None


async def run_page_setup(page_setup: PageSetup, renderer: PageRenderer) -> None:
    """Call page_setup, awaiting its result when it is a coroutine."""
    result = page_setup(renderer)
    if inspect.isawaitable(result):
        await result


def require_setup(page_setup: Any, operation: str) -> None:
    if not callable(page_setup):
        raise UsageError(f"No page setup callable specified in '{operation}'.")


def require_name(value: Any, argument: str, operation: str) -> None:
    if not isinstance(value, str) or not value:
        raise UsageError(f"'{operation}' requires a non-empty {argument}.")
