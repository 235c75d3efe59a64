"""Storage data transfer objects."""
from typing import Optional
from pydantic import BaseModel


class UploadResult(BaseModel):
    """Upload operation result."""
    key: str
    etag: Optional[str] = None
    size: int
    content_type: Optional[str] = None
    url: Optional[str] = None  # Object URL of the stored object
