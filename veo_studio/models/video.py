from enum import Enum
from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
import uuid

class GenerateVideoRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    # Both optional so that missing fields reach the bridge's own 400 handling
    prompt: Optional[str] = None
    # repr=False keeps the credential out of logs and tracebacks
    credential: Optional[str] = Field(default=None, alias="apiKey", repr=False)

class GenerateVideoResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_url: str = Field(alias="videoUrl")
    message: str = "Video generated successfully"

class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None

class VideoSource(str, Enum):
    """Which part of the upstream payload supplied the video reference."""
    VIDEO_URL = "video_url"
    FILE_URI = "file_uri"
    INLINE_DATA = "inline_data"
    PLACEHOLDER = "placeholder"

class NormalizedVideoResult(BaseModel):
    video_url: str
    source: VideoSource

# Client-side record of one generation attempt; lives only in the session's record book
class RecordStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    FAILED = "failed"

def new_record_id() -> str:
    """Time-based unique token for a record."""
    return uuid.uuid1().hex

class GenerationRecord(BaseModel):
    identifier: str = Field(default_factory=new_record_id)
    prompt: str
    status: RecordStatus = RecordStatus.PENDING
    video_url: Optional[str] = None
    error: Optional[str] = None
