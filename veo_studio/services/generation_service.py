import asyncio
import logging
import time
import traceback
from typing import Optional

from veo_studio.core.config import settings
from veo_studio.core.errors import InvalidRequest, UnknownGenerationFailure, classify_upstream_error
from veo_studio.models.video import NormalizedVideoResult
from veo_studio.services.genai_service import VideoGenerationUpstream
from veo_studio.utils.payload_utils import normalize_generation_payload

logger = logging.getLogger(__name__)

def _is_blank(value: Optional[str]) -> bool:
    # Whitespace-only counts as missing here too, not just in the client form
    return value is None or not value.strip()

def build_instruction(prompt: str) -> str:
    """Wraps the user prompt in the configured cinematic directive."""
    return settings.instruction_template.format(prompt=prompt)

def _preview(prompt: str, limit: int = 60) -> str:
    return prompt if len(prompt) <= limit else f"{prompt[:limit]}..."

async def generate_video(
    prompt: Optional[str],
    credential: Optional[str],
    upstream: VideoGenerationUpstream,
) -> NormalizedVideoResult:
    """Runs one bridge call: validate, call upstream once, normalize.

    Raises a ``BridgeGenerationError`` subclass on every failure path.
    """
    if _is_blank(prompt) or _is_blank(credential):
        raise InvalidRequest()

    instruction = build_instruction(prompt)
    start_time = time.monotonic()
    logger.info(f"Generating video for prompt: {_preview(prompt)!r}")

    try:
        try:
            payload = await asyncio.wait_for(
                upstream.generate(credential, settings.genai_model, instruction),
                timeout=settings.max_call_duration_s,
            )
        except asyncio.TimeoutError:
            raise UnknownGenerationFailure(
                f"Video generation timed out after {settings.max_call_duration_s:g} seconds"
            )
        result = normalize_generation_payload(payload)
    except Exception as e:
        logger.error(f"Error generating video: {e}")
        details = None if settings.is_production else traceback.format_exc()
        classified = classify_upstream_error(e, details=details)
        if classified is e:
            raise
        raise classified from e

    elapsed = time.monotonic() - start_time
    logger.info(f"Video generated via {result.source.value} in {elapsed:.1f}s")
    return result
