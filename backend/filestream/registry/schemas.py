"""Pydantic schemas for registered files.

- MediaKind: the four attachment kinds the bot accepts
- FileRecord: everything needed to re-resolve a key to live bytes
"""
import time
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_MIME_TYPE = "application/octet-stream"


class MediaKind(str, Enum):
    """Attachment kinds accepted for ingestion.

    Audio and video files get a watch link in addition to the direct link.
    """
    DOCUMENT = "document"
    VIDEO = "video"
    AUDIO = "audio"
    PHOTO = "photo"

    @property
    def playable(self) -> bool:
        return self in (MediaKind.VIDEO, MediaKind.AUDIO)


class FileRecord(BaseModel):
    """One successfully ingested file.

    Records are frozen: they are created once at the end of an ingestion and
    only read afterwards.
    """
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., description="Public key of the file")
    remote_location_id: int = Field(..., description="Message ID inside the storage conversation")
    remote_file_id: str = Field(..., description="Upstream ID of the media object")
    file_name: str = Field(..., description="Attachment name used for downloads")
    mime_type: str = Field(DEFAULT_MIME_TYPE, description="MIME type served on retrieval")
    file_size: Optional[int] = Field(None, description="Size in bytes, informational only")
    media_kind: MediaKind = Field(..., description="Attachment kind")
    created_at: float = Field(default_factory=time.time, description="Registration timestamp")
