"""
Data transfer objects between the application layer and the HTTP surface.
"""
from typing import Any, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class DTOBase(BaseModel):
    """Base DTO."""
    model_config = ConfigDict(populate_by_name=True)


class UploadEventDTO(DTOBase):
    """Payload of the host's upload-completed event.

    Extra host keys are kept so the filter can return the payload as received.
    """
    model_config = ConfigDict(extra="allow")

    file: str = Field(..., description="Local path of the uploaded file")
    url: str = Field(..., description="Public URL assigned by the host")
    type: Optional[str] = Field(None, description="MIME type")


class AttachmentRegisterDTO(DTOBase):
    id: int = Field(..., ge=1, description="Attachment record id")
    url: str = Field(..., description="Public URL of the attachment")


class SizeVariantsDTO(DTOBase):
    sizes: Union[dict[str, Any], list[Any]] = Field(default_factory=dict)


class AttachmentUrlDTO(DTOBase):
    id: int
    url: str


class StorageHealthDTO(DTOBase):
    healthy: bool
    type: str
    bucket: Optional[str] = None
    region: Optional[str] = None
