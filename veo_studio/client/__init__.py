from veo_studio.client.bridge_client import BridgeError, request_generation
from veo_studio.client.records import RecordBook
from veo_studio.client.render import render_records, render_studio_page
from veo_studio.client.session import StudioSession, StudioSessions, SubmissionRejected, get_studio_sessions

__all__ = [
    "BridgeError",
    "RecordBook",
    "StudioSession",
    "StudioSessions",
    "SubmissionRejected",
    "get_studio_sessions",
    "render_records",
    "render_studio_page",
    "request_generation",
]
