"""Application-owned storage port abstraction (hexagonal architecture).

Defines the minimal methods the media sync use cases need so that the
application layer does not depend on infrastructure details. Remote
operations report their outcome as a ``RemoteResult`` instead of raising;
callers decide whether to surface, retry or ignore a failure.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable
from dataclasses import dataclass


@dataclass
class RemoteResult:
    operation: str  # "put" | "delete"
    key: str
    ok: bool
    url: Optional[str] = None
    skipped: bool = False
    error: Optional[str] = None
    error_type: Optional[str] = None
    transient: bool = False

    @classmethod
    def success(cls, operation: str, key: str, url: Optional[str] = None) -> "RemoteResult":
        return cls(operation=operation, key=key, ok=True, url=url)

    @classmethod
    def skip(cls, operation: str, key: str) -> "RemoteResult":
        return cls(operation=operation, key=key, ok=True, skipped=True)

    @classmethod
    def failure(cls, operation: str, key: str, error: Exception, transient: bool = False) -> "RemoteResult":
        return cls(
            operation=operation,
            key=key,
            ok=False,
            error=str(error),
            error_type=type(error).__name__,
            transient=transient,
        )


@dataclass
class StorageInfo:
    type: str
    bucket: Optional[str]
    region: Optional[str]


@runtime_checkable
class StoragePort(Protocol):
    def info(self) -> StorageInfo: ...

    async def put_file(
        self,
        path: str,
        key: str,
        content_type: Optional[str] = None,
    ) -> RemoteResult: ...

    async def delete(self, key: str) -> RemoteResult: ...

    async def health_check(self) -> bool: ...
