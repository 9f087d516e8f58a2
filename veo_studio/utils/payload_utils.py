"""Decoding of the upstream generation payload.

The generative API does not promise a response shape for video output, so the
first content part is classified against the known variants in priority order:

1. an explicit video URL (``videoUrl``)
2. a file reference (``fileData.fileUri``)
3. inline bytes (``inlineData.data`` + ``inlineData.mimeType``), re-encoded as a data URI

Keys are accepted in camelCase (wire form) and snake_case (SDK attribute form).
"""
import base64
import logging
from typing import Any, Mapping, Optional

from veo_studio.core.config import settings
from veo_studio.core.errors import EmptyResponse, UnrecognizedResponse
from veo_studio.models.video import NormalizedVideoResult, VideoSource

logger = logging.getLogger(__name__)

DEFAULT_VIDEO_MIME_TYPE = "video/mp4"

def _field(container: Any, *names: str) -> Any:
    """Returns the first of ``names`` present in a mapping, else None."""
    if not isinstance(container, Mapping):
        return None
    for name in names:
        if name in container and container[name] is not None:
            return container[name]
    return None

def _first(items: Any) -> Any:
    if isinstance(items, (list, tuple)) and items:
        return items[0]
    return None

def first_content_part(payload: Mapping[str, Any]) -> Optional[Mapping[str, Any]]:
    """Returns ``candidates[0].content.parts[0]`` or None if any step is missing."""
    candidate = _first(_field(payload, "candidates"))
    content = _field(candidate, "content")
    part = _first(_field(content, "parts"))
    return part if isinstance(part, Mapping) else None

def build_data_uri(mime_type: Optional[str], data: Any) -> str:
    if isinstance(data, (bytes, bytearray)):
        data = base64.b64encode(bytes(data)).decode("ascii")
    return f"data:{mime_type or DEFAULT_VIDEO_MIME_TYPE};base64,{data}"

def decode_video_part(part: Mapping[str, Any]) -> NormalizedVideoResult:
    """Classifies a content part. Exactly one branch produces the result."""
    video_url = _field(part, "videoUrl", "video_url")
    if video_url is not None:
        if not isinstance(video_url, str):
            raise UnrecognizedResponse(details=f"videoUrl has type {type(video_url).__name__}")
        if not video_url:
            raise EmptyResponse("Upstream returned an empty video URL")
        return NormalizedVideoResult(video_url=video_url, source=VideoSource.VIDEO_URL)

    file_data = _field(part, "fileData", "file_data")
    file_uri = _field(file_data, "fileUri", "file_uri")
    if file_uri is not None:
        if not isinstance(file_uri, str):
            raise UnrecognizedResponse(details=f"fileUri has type {type(file_uri).__name__}")
        if not file_uri:
            raise EmptyResponse("Upstream returned an empty file URI")
        return NormalizedVideoResult(video_url=file_uri, source=VideoSource.FILE_URI)

    inline_data = _field(part, "inlineData", "inline_data")
    if inline_data is not None:
        data = _field(inline_data, "data")
        if data is not None and not isinstance(data, (str, bytes, bytearray)):
            raise UnrecognizedResponse(details=f"inlineData.data has type {type(data).__name__}")
        if not data:
            raise EmptyResponse("Upstream returned empty inline video data")
        mime_type = _field(inline_data, "mimeType", "mime_type")
        return NormalizedVideoResult(video_url=build_data_uri(mime_type, data), source=VideoSource.INLINE_DATA)

    if settings.allow_placeholder_fallback:
        logger.warning(f"No recognizable video field in upstream part (keys: {sorted(part.keys())}); using placeholder.")
        return NormalizedVideoResult(video_url=settings.placeholder_video_url, source=VideoSource.PLACEHOLDER)

    raise UnrecognizedResponse(details=f"Part keys: {sorted(part.keys())}")

def normalize_generation_payload(payload: Mapping[str, Any]) -> NormalizedVideoResult:
    """Extracts a single playable video reference from an upstream response."""
    part = first_content_part(payload)
    if not part:
        raise EmptyResponse()
    return decode_video_part(part)
