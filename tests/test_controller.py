"""Tests for the client-side chat controller."""

import asyncio
import json

import httpx
import pytest

from personachat.client.controller import ChatController
from personachat.utils.bot_data import CHALLENGE_PROFILE, LEGAL_PROFILE

PLAIN = {"content-type": "text/plain; charset=utf-8"}


async def byte_stream(*chunks):
    for chunk in chunks:
        yield chunk


class Recorder:
    """Transport handler that records requests and replays a canned response."""

    def __init__(self, respond):
        self.respond = respond
        self.requests = []

    def __call__(self, request):
        self.requests.append(json.loads(request.content))
        return self.respond()


def make_controller(respond, profile=CHALLENGE_PROFILE, **kwargs):
    recorder = Recorder(respond)
    client = httpx.AsyncClient(transport=httpx.MockTransport(recorder), base_url="http://test")
    controller = ChatController(profile, client, tick_interval=3600, **kwargs)
    return controller, recorder, client


class TestSubmit:
    @pytest.mark.asyncio
    async def test_streamed_reply_grows_assistant_message(self):
        snapshots = []

        def on_change(controller):
            last = controller.transcript.last()
            if last.role == "assistant" and last.id != "1":
                snapshots.append(last.content)

        controller, recorder, client = make_controller(
            lambda: httpx.Response(200, headers=PLAIN, content=byte_stream(b"Drink ", b"caf", b"\xc3", b"\xa9 water")),
            on_change=on_change,
        )
        async with client:
            await controller.submit("Give me a habit")

        messages = list(controller.transcript)
        assert [m.role for m in messages] == ["assistant", "user", "assistant"]
        assert messages[2].content == "Drink café water"
        assert controller.is_loading is False
        assert controller.error is None

        assert snapshots[0] == ""
        assert snapshots[-1] == "Drink café water"
        for shorter, longer in zip(snapshots, snapshots[1:]):
            assert longer.startswith(shorter)

        sent = recorder.requests[0]["messages"]
        assert sent[0] == {"id": "1", "role": "assistant", "content": CHALLENGE_PROFILE.greeting}
        assert sent[1]["role"] == "user"
        assert sent[1]["content"] == "Give me a habit"

    @pytest.mark.asyncio
    async def test_submit_uses_and_clears_input(self):
        controller, recorder, client = make_controller(
            lambda: httpx.Response(200, headers=PLAIN, content=b"ok")
        )
        async with client:
            controller.set_input("hello")
            await controller.submit()

        assert controller.input_text == ""
        assert recorder.requests[0]["messages"][-1]["content"] == "hello"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", "\n\t"])
    async def test_blank_input_is_noop(self, text):
        controller, recorder, client = make_controller(
            lambda: httpx.Response(200, headers=PLAIN, content=b"ok")
        )
        async with client:
            await controller.submit(text)

        assert len(controller.transcript) == 1
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_submit_ignored_while_loading(self):
        controller, recorder, client = make_controller(
            lambda: httpx.Response(200, headers=PLAIN, content=b"ok")
        )
        controller.is_loading = True
        async with client:
            await controller.submit("hi")

        assert len(controller.transcript) == 1
        assert recorder.requests == []

    @pytest.mark.asyncio
    async def test_enter_submits_but_shift_enter_does_not(self):
        controller, recorder, client = make_controller(
            lambda: httpx.Response(200, headers=PLAIN, content=b"ok")
        )
        async with client:
            controller.set_input("first")
            assert await controller.handle_key("Enter", shift=True) is False
            assert recorder.requests == []

            assert await controller.handle_key("Enter") is True
        assert len(recorder.requests) == 1


class TestFailures:
    @pytest.mark.asyncio
    async def test_server_error_sets_banner(self):
        controller, _, client = make_controller(
            lambda: httpx.Response(500, json={"error": "API key not valid"})
        )
        async with client:
            await controller.submit("hi")

        assert controller.error == "API key not valid"
        assert [m.role for m in controller.transcript] == ["assistant", "user"]
        assert controller.retry_seconds is None

    @pytest.mark.asyncio
    async def test_error_body_without_json(self):
        controller, _, client = make_controller(lambda: httpx.Response(502, text="Bad gateway"))
        async with client:
            await controller.submit("hi")
        assert controller.error == "Failed to get response"

    @pytest.mark.asyncio
    async def test_unexpected_content_type(self):
        controller, _, client = make_controller(lambda: httpx.Response(200, json={"text": "hi"}))
        async with client:
            await controller.submit("hi")
        assert controller.error == "Unexpected response format from server"

    @pytest.mark.asyncio
    async def test_network_failure(self):
        def refuse():
            raise httpx.ConnectError("Connection refused")

        controller, _, client = make_controller(refuse)
        async with client:
            await controller.submit("hi")
        assert controller.error == "Connection refused"
        assert controller.is_loading is False

    @pytest.mark.asyncio
    async def test_unexpected_exception_becomes_banner(self):
        def explode():
            raise RuntimeError("decoder exploded")

        controller, _, client = make_controller(explode)
        async with client:
            await controller.submit("hi")
        assert controller.error == "decoder exploded"
        assert controller.is_loading is False


class TestRateLimitCountdown:
    def _rate_limited(self):
        return httpx.Response(
            429,
            headers={"Retry-After": "3"},
            json={"error": "Rate limit exceeded", "message": "Try again in 3 seconds.", "retryAfter": 3},
        )

    @pytest.mark.asyncio
    async def test_429_starts_countdown_and_blocks_input(self):
        controller, recorder, client = make_controller(self._rate_limited)
        async with client:
            await controller.submit("hi")

            assert controller.retry_seconds == 3
            assert controller.error == "Try again in 3 seconds."

            controller.set_input("again")
            assert controller.can_submit is False
            await controller.submit()
            assert len(recorder.requests) == 1

            controller.tick()
            controller.tick()
            assert controller.retry_seconds == 1
            assert controller.error == "Try again in 3 seconds."

            controller.tick()
            assert controller.retry_seconds is None
            assert controller.error is None
            assert controller.can_submit is True
            await controller.close()

    @pytest.mark.asyncio
    async def test_countdown_runs_on_event_loop(self):
        controller, _, client = make_controller(self._rate_limited)
        controller._tick_interval = 0.01
        async with client:
            await controller.submit("hi")
            assert controller.retry_seconds == 3
            await asyncio.sleep(0.3)

        assert controller.retry_seconds is None
        assert controller.error is None
        await controller.close()

    @pytest.mark.asyncio
    async def test_429_without_retry_after_is_plain_error(self):
        controller, _, client = make_controller(
            lambda: httpx.Response(429, json={"error": "Rate limit exceeded"})
        )
        async with client:
            await controller.submit("hi")
        assert controller.retry_seconds is None
        assert controller.error == "Rate limit exceeded"

    @pytest.mark.asyncio
    async def test_fractional_retry_after_is_truncated(self):
        controller, _, client = make_controller(
            lambda: httpx.Response(
                429, json={"error": "Rate limit exceeded", "message": "Slow down.", "retryAfter": "17.5"}
            )
        )
        async with client:
            await controller.submit("hi")

            assert controller.retry_seconds == 17
            assert controller.error == "Slow down."
            await controller.close()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("retry_after", ["soon", "", None, -5, "nan"])
    async def test_unusable_retry_after_is_plain_error(self, retry_after):
        controller, _, client = make_controller(
            lambda: httpx.Response(
                429, json={"error": "Rate limit exceeded", "retryAfter": retry_after}
            )
        )
        async with client:
            await controller.submit("hi")

        assert controller.retry_seconds is None
        assert controller.error == "Rate limit exceeded"
        assert controller.is_loading is False

    @pytest.mark.asyncio
    async def test_unusable_retry_after_without_error_field(self):
        controller, _, client = make_controller(
            lambda: httpx.Response(429, json={"retryAfter": "soon"})
        )
        async with client:
            await controller.submit("hi")

        assert controller.retry_seconds is None
        assert controller.error == "Failed to get response"


class TestViewHelpers:
    def test_greeting_seeds_transcript(self):
        controller = ChatController(LEGAL_PROFILE, httpx.AsyncClient())
        (greeting,) = controller.transcript
        assert greeting.id == "1"
        assert greeting.role == "assistant"
        assert greeting.content == LEGAL_PROFILE.greeting

    def test_use_example(self):
        controller = ChatController(LEGAL_PROFILE, httpx.AsyncClient())
        assert controller.use_example(0) == "What are my rights as a tenant?"
        assert controller.input_text == "What are my rights as a tenant?"
        with pytest.raises(IndexError):
            controller.use_example(10)
        with pytest.raises(IndexError):
            controller.use_example(-1)

    def test_is_refusal(self):
        controller = ChatController(LEGAL_PROFILE, httpx.AsyncClient())
        refusal = controller.transcript.last().model_copy(
            update={"content": f"Sorry. {LEGAL_PROFILE.refusal_message}"}
        )
        assert controller.is_refusal(refusal)
        assert not controller.is_refusal(controller.transcript.last())
