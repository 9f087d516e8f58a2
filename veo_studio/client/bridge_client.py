import aiohttp
import asyncio
import logging
from typing import Any, Dict, Optional

from veo_studio.core.config import settings

logger = logging.getLogger(__name__)

DEFAULT_FAILURE_MESSAGE = "Failed to generate video"

# Headroom past the bridge's own deadline so its timeout answer arrives first
TIMEOUT_MARGIN_S = 30.0

class BridgeError(Exception):
    """The bridge answered with a non-2xx status or could not be reached."""

    def __init__(self, message: str, status: int = 0):
        self.status = status
        super().__init__(message)

def default_timeout() -> float:
    return settings.max_call_duration_s + TIMEOUT_MARGIN_S

async def request_generation(
    bridge_url: str,
    prompt: str,
    credential: str,
    timeout: Optional[float] = None,
) -> Dict[str, Any]:
    """POSTs one generation request to the bridge and returns its JSON body."""
    payload = {"prompt": prompt, "apiKey": credential}
    total = timeout if timeout is not None else default_timeout()
    try:
        async with aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=total)) as session:
            async with session.post(bridge_url, json=payload) as response:
                try:
                    data = await response.json(content_type=None)
                except ValueError:
                    data = {}
                if not isinstance(data, dict):
                    data = {}
                if response.status >= 300:
                    raise BridgeError(data.get("error") or DEFAULT_FAILURE_MESSAGE, status=response.status)
                return data
    except asyncio.TimeoutError as e:
        logger.error(f"Generation bridge at {bridge_url} did not answer within {total:g}s")
        raise BridgeError(f"The generation service did not respond within {total:g} seconds") from e
    except aiohttp.ClientError as e:
        logger.error(f"Could not reach generation bridge at {bridge_url}: {e}")
        raise BridgeError(str(e) or DEFAULT_FAILURE_MESSAGE) from e
