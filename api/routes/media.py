"""Webhook routes through which a remote host delivers media lifecycle events."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_media_runtime
from application.dto import (
    AttachmentRegisterDTO,
    AttachmentUrlDTO,
    SizeVariantsDTO,
    StorageHealthDTO,
    UploadEventDTO,
)
from application.ports.hooks import (
    HOOK_ATTACHMENT_URL,
    HOOK_DELETE_ATTACHMENT,
    HOOK_HANDLE_UPLOAD,
    HOOK_IMAGE_SIZES,
)
from core.response import Response as ApiResponse, success_response
from infrastructure.media_sync import MediaSyncRuntime


router = APIRouter(
    prefix="/media",
    tags=["media"],
)


@router.post("/uploads", summary="Upload completed", response_model=ApiResponse[dict])
async def upload_completed(
    payload: UploadEventDTO,
    runtime: MediaSyncRuntime = Depends(get_media_runtime),
):
    metadata = payload.model_dump(exclude_unset=True)
    result = await runtime.hooks.apply_filters(HOOK_HANDLE_UPLOAD, metadata)
    return success_response(data=dict(result), message="Upload processed")


@router.post("/attachments", summary="Register attachment", response_model=ApiResponse[AttachmentUrlDTO])
async def register_attachment(
    payload: AttachmentRegisterDTO,
    runtime: MediaSyncRuntime = Depends(get_media_runtime),
):
    runtime.host.register_attachment(payload.id, payload.url)
    return success_response(data=AttachmentUrlDTO(id=payload.id, url=payload.url), message="Attachment registered")


@router.delete("/attachments/{record_id}", summary="Attachment deleted", response_model=ApiResponse[None])
async def delete_attachment(
    record_id: int,
    runtime: MediaSyncRuntime = Depends(get_media_runtime),
):
    await runtime.hooks.do_action(HOOK_DELETE_ATTACHMENT, record_id)
    runtime.host.forget_attachment(record_id)
    return success_response(message="Attachment deleted")


@router.post("/sizes", summary="Size variants proposed", response_model=ApiResponse[SizeVariantsDTO])
async def size_variants(
    payload: SizeVariantsDTO,
    runtime: MediaSyncRuntime = Depends(get_media_runtime),
):
    sizes = await runtime.hooks.apply_filters(HOOK_IMAGE_SIZES, payload.sizes)
    return success_response(data=SizeVariantsDTO(sizes=sizes))


@router.get("/attachments/{record_id}/url", summary="Attachment URL requested", response_model=ApiResponse[AttachmentUrlDTO])
async def attachment_url(
    record_id: int,
    url: str = Query(..., description="URL the host would serve"),
    runtime: MediaSyncRuntime = Depends(get_media_runtime),
):
    rewritten = await runtime.hooks.apply_filters(HOOK_ATTACHMENT_URL, url, record_id)
    return success_response(data=AttachmentUrlDTO(id=record_id, url=rewritten))


@router.get("/health", summary="Storage health", response_model=ApiResponse[StorageHealthDTO])
async def storage_health(runtime: MediaSyncRuntime = Depends(get_media_runtime)):
    info = runtime.storage.info()
    healthy = await runtime.storage.health_check()
    return success_response(
        data=StorageHealthDTO(healthy=healthy, type=info.type, bucket=info.bucket, region=info.region)
    )
