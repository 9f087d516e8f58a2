"""
Client submission tests: record book, session submit flow, bridge HTTP client.

Run with:
    python -m pytest tests/test_client_session.py -v
"""

import asyncio

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from veo_studio.client import BridgeError, RecordBook, StudioSession, SubmissionRejected, request_generation
from veo_studio.client.bridge_client import default_timeout
from veo_studio.core.config import settings
from veo_studio.models.video import RecordStatus


class TestRecordBook:
    """Records are keyed by identifier and only leave pending once."""

    def test_newest_first(self):
        book = RecordBook()
        first = book.add("first")
        second = book.add("second")

        assert [r.identifier for r in book] == [second.identifier, first.identifier]
        assert first.identifier != second.identifier

    def test_resolve_targets_only_its_record(self):
        book = RecordBook()
        a = book.add("a")
        b = book.add("b")

        book.resolve(a.identifier, "https://x/a.mp4")

        assert book.get(a.identifier).status is RecordStatus.COMPLETED
        assert book.get(a.identifier).video_url == "https://x/a.mp4"
        assert book.get(b.identifier).status is RecordStatus.PENDING
        assert book.is_generating

    def test_failed_record_is_terminal(self):
        book = RecordBook()
        record = book.add("a")
        book.fail(record.identifier, "boom")

        book.resolve(record.identifier, "https://x/a.mp4")

        settled = book.get(record.identifier)
        assert settled.status is RecordStatus.FAILED
        assert settled.video_url is None
        assert settled.error == "boom"
        assert not book.is_generating

    def test_unknown_identifier_is_ignored(self):
        book = RecordBook()
        assert book.resolve("missing", "https://x/a.mp4") is None
        assert len(book) == 0

    def test_counts(self):
        book = RecordBook()
        book.add("a")
        done = book.add("b")
        book.resolve(done.identifier, "u")

        counts = book.counts()
        assert counts[RecordStatus.PENDING] == 1
        assert counts[RecordStatus.COMPLETED] == 1
        assert counts[RecordStatus.FAILED] == 0


class TestStudioSession:
    """submit() creates one record per call and settles it from the bridge reply."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("prompt, credential", [("", "k"), ("a fox", ""), ("   ", "k"), ("a fox", "  ")])
    async def test_blank_fields_rejected_locally(self, prompt, credential):
        calls = []

        async def send(url, p, c):
            calls.append(p)
            return {}

        session = StudioSession(bridge_url="http://bridge/generate", send=send)
        with pytest.raises(SubmissionRejected):
            await session.submit(prompt, credential)

        assert calls == []
        assert len(session.records) == 0

    @pytest.mark.asyncio
    async def test_success_completes_record(self):
        async def send(url, prompt, credential):
            return {"videoUrl": "https://x/y.mp4", "message": "Video generated successfully"}

        session = StudioSession(bridge_url="http://bridge/generate", send=send)
        record = await session.submit("a fox", "k")

        assert record.status is RecordStatus.COMPLETED
        assert record.video_url == "https://x/y.mp4"
        assert not session.is_generating

    @pytest.mark.asyncio
    async def test_bridge_error_fails_record(self):
        async def send(url, prompt, credential):
            raise BridgeError("Invalid API key. Please check your Google AI API key.", status=401)

        session = StudioSession(bridge_url="http://bridge/generate", send=send)
        record = await session.submit("a fox", "bad")

        assert record.status is RecordStatus.FAILED
        assert record.error == "Invalid API key. Please check your Google AI API key."

    @pytest.mark.asyncio
    async def test_concurrent_submissions_resolve_independently(self):
        gates = {"first": asyncio.Event(), "second": asyncio.Event()}

        async def send(url, prompt, credential):
            await gates[prompt].wait()
            if prompt == "first":
                raise BridgeError("model not found", status=500)
            return {"videoUrl": f"https://x/{prompt}.mp4"}

        session = StudioSession(bridge_url="http://bridge/generate", send=send)
        first = asyncio.create_task(session.submit("first", "k"))
        second = asyncio.create_task(session.submit("second", "k"))
        await asyncio.sleep(0)

        assert len(session.records) == 2
        assert session.is_generating

        # Replies arrive in reverse submission order
        gates["second"].set()
        second_record = await second
        assert second_record.status is RecordStatus.COMPLETED
        assert session.is_generating

        gates["first"].set()
        first_record = await first

        assert first_record.status is RecordStatus.FAILED
        assert session.records.get(second_record.identifier).video_url == "https://x/second.mp4"
        assert [r.prompt for r in session.records] == ["second", "first"]

    @pytest.mark.asyncio
    async def test_resubmission_creates_new_record(self):
        outcomes = [BridgeError("quota"), {"videoUrl": "https://x/ok.mp4"}]

        async def send(url, prompt, credential):
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        session = StudioSession(bridge_url="http://bridge/generate", send=send)
        failed = await session.submit("a fox", "k")
        retried = await session.submit("a fox", "k")

        assert failed.identifier != retried.identifier
        assert session.records.get(failed.identifier).status is RecordStatus.FAILED
        assert session.records.get(retried.identifier).status is RecordStatus.COMPLETED


class TestRequestGeneration:
    """HTTP round trip against a throwaway bridge."""

    @staticmethod
    def _bridge(status, body):
        received = []

        async def handler(request):
            received.append(await request.json())
            return web.json_response(body, status=status)

        app = web.Application()
        app.router.add_post("/generate", handler)
        return app, received

    @pytest.mark.asyncio
    async def test_posts_prompt_and_api_key(self):
        app, received = self._bridge(200, {"videoUrl": "https://x/y.mp4", "message": "Video generated successfully"})
        async with TestServer(app) as server:
            data = await request_generation(str(server.make_url("/generate")), "a fox", "k")

        assert received == [{"prompt": "a fox", "apiKey": "k"}]
        assert data["videoUrl"] == "https://x/y.mp4"

    @pytest.mark.asyncio
    async def test_non_2xx_raises_with_bridge_error_text(self):
        app, _ = self._bridge(429, {"error": "API quota exceeded. Please check your usage limits."})
        async with TestServer(app) as server:
            with pytest.raises(BridgeError) as exc_info:
                await request_generation(str(server.make_url("/generate")), "a fox", "k")

        assert exc_info.value.status == 429
        assert str(exc_info.value) == "API quota exceeded. Please check your usage limits."

    @pytest.mark.asyncio
    async def test_non_2xx_without_body_uses_default_text(self):
        app, _ = self._bridge(500, {})
        async with TestServer(app) as server:
            with pytest.raises(BridgeError) as exc_info:
                await request_generation(str(server.make_url("/generate")), "a fox", "k")

        assert str(exc_info.value) == "Failed to generate video"

    @pytest.mark.asyncio
    async def test_slow_bridge_raises_bridge_error(self):
        async def slow_handler(request):
            await asyncio.sleep(0.5)
            return web.json_response({"videoUrl": "https://x/late.mp4"})

        app = web.Application()
        app.router.add_post("/generate", slow_handler)
        async with TestServer(app) as server:
            with pytest.raises(BridgeError) as exc_info:
                await request_generation(str(server.make_url("/generate")), "a fox", "k", timeout=0.05)

        assert "did not respond" in str(exc_info.value)
        assert exc_info.value.status == 0

    def test_default_timeout_outlasts_bridge_deadline(self):
        assert default_timeout() > settings.max_call_duration_s
