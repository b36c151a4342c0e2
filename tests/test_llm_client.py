import openai
import pytest

from complaint_relay.config import GEMINI_MODEL
from complaint_relay.llm_client import (
    LLMError,
    MissingCredentialError,
    create_openai_client,
    generate,
)
from complaint_relay.prompts import ANALYSIS_OUTPUT_SHAPE
from conftest import FakeOpenAI


def test_missing_credential_fails_before_client_creation():
    with pytest.raises(MissingCredentialError):
        create_openai_client("")


def test_client_disables_sdk_retries():
    client = create_openai_client("secret")
    assert isinstance(client, openai.AsyncOpenAI)
    assert client.max_retries == 0


@pytest.mark.asyncio
async def test_generate_sends_json_schema_when_shape_given():
    fake = FakeOpenAI(content='{"tags": [], "summary": "x"}')
    text = await generate("prompt", ANALYSIS_OUTPUT_SHAPE, fake)

    assert text == '{"tags": [], "summary": "x"}'
    call = fake.calls[0]
    assert call["model"] == GEMINI_MODEL
    assert call["messages"] == [{"role": "user", "content": "prompt"}]
    assert call["response_format"] == {"type": "json_schema", "json_schema": ANALYSIS_OUTPUT_SHAPE}


@pytest.mark.asyncio
async def test_generate_free_text_has_no_response_format():
    fake = FakeOpenAI(content="## Titolo\n")
    await generate("prompt", None, fake)
    assert "response_format" not in fake.calls[0]


@pytest.mark.asyncio
async def test_generate_returns_raw_text_untrimmed():
    fake = FakeOpenAI(content="  testo con spazi \n")
    assert await generate("prompt", None, fake) == "  testo con spazi \n"


@pytest.mark.asyncio
async def test_provider_error_is_wrapped_and_not_retried():
    fake = FakeOpenAI(error=openai.OpenAIError("quota exceeded"))
    with pytest.raises(LLMError, match="quota exceeded"):
        await generate("prompt", None, fake)
    assert len(fake.calls) == 1


@pytest.mark.asyncio
async def test_empty_content_is_a_provider_error():
    fake = FakeOpenAI(content=None)
    with pytest.raises(LLMError):
        await generate("prompt", None, fake)
