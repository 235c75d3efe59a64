"""In-memory implementation of HookRegistryPort.

Single-process only. Stands in for the host's hook dispatch in the HTTP
surface and in tests.
"""
from __future__ import annotations

import inspect
import itertools
from dataclasses import dataclass, field
from typing import Any

from application.ports.hooks import Callback, DEFAULT_PRIORITY, HookRegistryPort


@dataclass(order=True)
class _Registration:
    priority: int
    seq: int
    callback: Callback = field(compare=False)
    accepted_args: int = field(compare=False, default=1)


class InMemoryHookRegistry(HookRegistryPort):
    def __init__(self) -> None:
        self._hooks: dict[str, list[_Registration]] = {}
        self._seq = itertools.count()

    def _add(self, name: str, callback: Callback, priority: int, accepted_args: int) -> None:
        if accepted_args < 0:
            raise ValueError("accepted_args must be >= 0")
        regs = self._hooks.setdefault(name, [])
        regs.append(_Registration(priority, next(self._seq), callback, accepted_args))
        regs.sort()

    def add_filter(
        self,
        name: str,
        callback: Callback,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> None:
        self._add(name, callback, priority, accepted_args)

    def add_action(
        self,
        name: str,
        callback: Callback,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> None:
        self._add(name, callback, priority, accepted_args)

    def has_hook(self, name: str) -> bool:
        return bool(self._hooks.get(name))

    async def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        for reg in list(self._hooks.get(name, [])):
            call_args = (value, *args)[: reg.accepted_args]
            value = await _call(reg.callback, call_args)
        return value

    async def do_action(self, name: str, *args: Any) -> None:
        for reg in list(self._hooks.get(name, [])):
            await _call(reg.callback, args[: reg.accepted_args])


async def _call(callback: Callback, args: tuple) -> Any:
    result = callback(*args)
    if inspect.isawaitable(result):
        result = await result
    return result
