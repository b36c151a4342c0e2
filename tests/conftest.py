"""
Shared fixtures: a fake async OpenAI client and helpers that wire it into the
FastAPI app through dependency overrides. Nothing here touches the network.
"""
from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx
import pytest

from complaint_relay.main import app, get_relay_handler
from complaint_relay.relay import RelayHandler


class _Obj:
    """Simple attribute container to mimic SDK objects (choices/message/usage)."""

    def __init__(self, **kw):
        for k, v in kw.items():
            setattr(self, k, v)


class FakeCompletions:
    def __init__(self, content: Optional[str] = "ok", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[Dict[str, Any]] = []

    async def create(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        msg = _Obj(role="assistant", content=self.content)
        usage = _Obj(prompt_tokens=10, completion_tokens=5, total_tokens=15)
        return _Obj(choices=[_Obj(message=msg)], usage=usage)


class FakeOpenAI:
    """Stands in for openai.AsyncOpenAI: `.chat.completions.create` plus `async with`."""

    def __init__(self, content: Optional[str] = "ok", error: Optional[Exception] = None):
        self.chat = _Obj(completions=FakeCompletions(content, error))
        self.closed = False

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        self.closed = True

    @property
    def calls(self) -> List[Dict[str, Any]]:
        return self.chat.completions.calls


class FakeClientFactory:
    """Client factory for RelayHandler that hands out one FakeOpenAI and counts calls."""

    def __init__(self, fake: FakeOpenAI):
        self.fake = fake
        self.keys: List[str] = []

    def __call__(self, api_key: str) -> FakeOpenAI:
        self.keys.append(api_key)
        return self.fake


@pytest.fixture
def fake_llm() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def factory(fake_llm: FakeOpenAI) -> FakeClientFactory:
    return FakeClientFactory(fake_llm)


@pytest.fixture
def handler(factory: FakeClientFactory) -> RelayHandler:
    return RelayHandler(api_key="test-key", client_factory=factory)


@pytest.fixture
def override_handler():
    """Install a RelayHandler on the app for the duration of a test."""

    def _install(relay: RelayHandler) -> None:
        app.dependency_overrides[get_relay_handler] = lambda: relay

    yield _install
    app.dependency_overrides.clear()


@pytest.fixture
def asgi_client(handler: RelayHandler, override_handler):
    """httpx client that talks to the in-process app, for client-library tests."""
    override_handler(handler)
    transport = httpx.ASGITransport(app=app)
    return httpx.AsyncClient(transport=transport, base_url="http://testserver")
