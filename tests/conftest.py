import os
import sys

import pytest

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from veo_studio.core.config import settings  # noqa: E402


class FakeUpstream:
    """Stands in for the generative API; records every call it receives."""

    def __init__(self, payload=None, error=None):
        self.payload = payload
        self.error = error
        self.calls = []

    async def generate(self, credential, model, instruction):
        self.calls.append({"credential": credential, "model": model, "instruction": instruction})
        if self.error is not None:
            raise self.error
        return self.payload


def part_payload(part):
    """Wraps a single content part in the upstream response envelope."""
    return {"candidates": [{"content": {"role": "model", "parts": [part]}}]}


@pytest.fixture
def fake_upstream():
    return FakeUpstream(payload=part_payload({"fileData": {"fileUri": "https://x/y.mp4", "mimeType": "video/mp4"}}))


@pytest.fixture
def production(monkeypatch):
    monkeypatch.setattr(settings, "environment", "production")


@pytest.fixture
def development(monkeypatch):
    monkeypatch.setattr(settings, "environment", "development")


@pytest.fixture
def make_upstream():
    return FakeUpstream


@pytest.fixture
def wrap_part():
    return part_payload
