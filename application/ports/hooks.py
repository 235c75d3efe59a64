"""
Host hook port: filter/action registration in the style of the host CMS.

Filters receive a value and return a (possibly replaced) value that is
handed to the next callback. Actions return nothing.
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Protocol, Union

Callback = Callable[..., Union[Any, Awaitable[Any]]]

DEFAULT_PRIORITY = 10


class HookRegistryPort(Protocol):
    def add_filter(
        self,
        name: str,
        callback: Callback,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> None: ...

    def add_action(
        self,
        name: str,
        callback: Callback,
        priority: int = DEFAULT_PRIORITY,
        accepted_args: int = 1,
    ) -> None: ...

    async def apply_filters(self, name: str, value: Any, *args: Any) -> Any: ...

    async def do_action(self, name: str, *args: Any) -> None: ...

    def has_hook(self, name: str) -> bool: ...


# Hook names used by the media library
HOOK_HANDLE_UPLOAD = "wp_handle_upload"
HOOK_DELETE_ATTACHMENT = "delete_attachment"
HOOK_IMAGE_SIZES = "intermediate_image_sizes_advanced"
HOOK_ATTACHMENT_URL = "wp_get_attachment_url"


__all__ = [
    "Callback",
    "DEFAULT_PRIORITY",
    "HookRegistryPort",
    "HOOK_HANDLE_UPLOAD",
    "HOOK_DELETE_ATTACHMENT",
    "HOOK_IMAGE_SIZES",
    "HOOK_ATTACHMENT_URL",
]
