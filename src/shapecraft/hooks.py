"""
Extension points run once the package has loaded.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from .serializer import Serializer

__all__ = [
    "LoadHookType",
    "on_load",
    "run_load_hooks",
]

type LoadHookType = Callable[[type[Serializer]], None]
"""
Callback taking the `Serializer` base class, e.g. to register extensions.
"""

logger = logging.getLogger(__name__)

_hooks: list[LoadHookType] = []
_loaded: type[Serializer] | None = None


def on_load(func: LoadHookType, /) -> LoadHookType:
    """
    Register a hook to run with the `Serializer` base class once the package has
    loaded; runs immediately if it already has. Usable as a decorator.
    """
    if _loaded is not None:
        func(_loaded)
    else:
        _hooks.append(func)
    return func


def run_load_hooks(base: type[Serializer], /):
    """
    Run pending hooks. Invoked once upon package import.
    """
    global _loaded
    assert _loaded is None, "Load hooks already run"
    _loaded = base
    while _hooks:
        hook = _hooks.pop(0)
        logger.debug("Running load hook %s", hook)
        hook(base)
