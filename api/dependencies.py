"""
API dependencies.
"""
from fastapi import HTTPException, Request, status

from infrastructure.media_sync import MediaSyncRuntime


async def get_media_runtime(request: Request) -> MediaSyncRuntime:
    runtime = getattr(request.app.state, "media_sync", None)
    if runtime is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Media sync is not initialized",
        )
    return runtime
