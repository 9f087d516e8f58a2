import logging
import uuid
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple

from veo_studio.client.bridge_client import DEFAULT_FAILURE_MESSAGE, request_generation
from veo_studio.client.records import RecordBook
from veo_studio.core.config import settings
from veo_studio.models.video import GenerationRecord

logger = logging.getLogger(__name__)

# (bridge_url, prompt, credential) -> bridge response body
SendFn = Callable[[str, str, str], Awaitable[Dict[str, Any]]]

class SubmissionRejected(ValueError):
    """Raised before any network call when the form is incomplete."""

class StudioSession:
    """Client-side controller: submits prompts to the bridge and tracks their records.

    Submissions are independent; several may be pending at once and each one
    resolves only the record it created.
    """

    def __init__(self, bridge_url: Optional[str] = None, send: SendFn = request_generation):
        self.bridge_url = bridge_url or settings.bridge_url
        self.records = RecordBook()
        self._send = send

    @property
    def is_generating(self) -> bool:
        return self.records.is_generating

    def start(self, prompt: str, credential: str) -> GenerationRecord:
        """Validates the form and records a pending generation. No network call."""
        if not prompt or not prompt.strip() or not credential or not credential.strip():
            raise SubmissionRejected("Please enter both a prompt and API key")
        return self.records.add(prompt)

    async def complete(self, identifier: str, prompt: str, credential: str) -> GenerationRecord:
        """Sends one request to the bridge and settles the record it belongs to."""
        logger.info(f"[{identifier}] Submitting generation request")
        try:
            data = await self._send(self.bridge_url, prompt, credential)
        except Exception as e:
            logger.error(f"[{identifier}] Generation failed: {e}")
            return self.records.fail(identifier, str(e) or DEFAULT_FAILURE_MESSAGE)

        video_url = data.get("videoUrl")
        if not video_url:
            return self.records.fail(identifier, data.get("error") or DEFAULT_FAILURE_MESSAGE)

        logger.info(f"[{identifier}] Generation completed")
        return self.records.resolve(identifier, video_url)

    async def submit(self, prompt: str, credential: str) -> GenerationRecord:
        record = self.start(prompt, credential)
        return await self.complete(record.identifier, prompt, credential)

class StudioSessions:
    """One StudioSession per browser, looked up by the studio cookie."""

    def __init__(self, bridge_url: Optional[str] = None, send: SendFn = request_generation):
        self.bridge_url = bridge_url
        self._send = send
        self._sessions: Dict[str, StudioSession] = {}

    def get_or_create(self, session_id: Optional[str]) -> Tuple[str, StudioSession]:
        if session_id and session_id in self._sessions:
            return session_id, self._sessions[session_id]
        session_id = uuid.uuid4().hex
        session = StudioSession(bridge_url=self.bridge_url, send=self._send)
        self._sessions[session_id] = session
        return session_id, session

studio_sessions = StudioSessions()

def get_studio_sessions() -> StudioSessions:
    """FastAPI dependency; tests override it with sessions that use a fake bridge."""
    return studio_sessions
