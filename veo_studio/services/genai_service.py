import logging
from typing import Any, Dict, Protocol

from google import genai
from google.genai import types

logger = logging.getLogger(__name__)

class VideoGenerationUpstream(Protocol):
    """Anything that can turn an instruction into a JSON-shaped generation response."""

    async def generate(self, credential: str, model: str, instruction: str) -> Dict[str, Any]:
        ...

class GenaiUpstream:
    """Calls the Google generative API with the caller's own credential.

    A fresh SDK client is built for every call and closed before returning, so
    the credential never outlives the request that carried it.
    """

    async def generate(self, credential: str, model: str, instruction: str) -> Dict[str, Any]:
        client = genai.Client(api_key=credential)
        try:
            logger.info(f"Sending generation request to model {model}")
            response = await client.aio.models.generate_content(
                model=model,
                contents=[
                    types.Content(
                        role="user",
                        parts=[types.Part(text=instruction)],
                    )
                ],
            )
        finally:
            await client.aio.aclose()
        # camelCase aliases and base64 bytes, i.e. the REST wire shape
        return response.model_dump(mode="json", by_alias=True, exclude_none=True)

genai_upstream = GenaiUpstream()

def get_upstream() -> VideoGenerationUpstream:
    """FastAPI dependency; tests override it with a fake upstream."""
    return genai_upstream
