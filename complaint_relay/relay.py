"""Relay handler: one {action, payload} request in, one {text} or {error} envelope out."""

import logging
from typing import Callable, Optional

import openai

from complaint_relay.llm_client import create_openai_client, generate
from complaint_relay.prompts import build_prompt
from complaint_relay.schemas import ErrorResponse, RelayRequest, TextResponse

logger = logging.getLogger(__name__)

ALLOWED_METHOD = "POST"
MISSING_KEY_MESSAGE = "API key not configured on the server."
GENERIC_ERROR_MESSAGE = "An internal server error occurred."

Envelope = tuple[int, dict]
ClientFactory = Callable[[str], openai.AsyncOpenAI]


def _error(status: int, message: str, details: Optional[str] = None) -> Envelope:
    return status, ErrorResponse(error=message, details=details).model_dump(exclude_none=True)


class RelayHandler:
    def __init__(
        self,
        api_key: str,
        client_factory: ClientFactory = create_openai_client,
    ):
        self._api_key = api_key
        self._client_factory = client_factory

    @property
    def has_credential(self) -> bool:
        return bool(self._api_key)

    async def handle(self, method: str, body: bytes) -> Envelope:
        if method.upper() != ALLOWED_METHOD:
            logger.warning(f"Rejected {method} request")
            return _error(405, "Method Not Allowed")

        if not self._api_key:
            logger.error("Relay called without a configured API key")
            return _error(500, MISSING_KEY_MESSAGE)

        try:
            request = RelayRequest.model_validate_json(body)
            logger.info(f"Relay request: action={request.action!r}")
            prompt, output_shape = build_prompt(request.action, request.payload)
            client = self._client_factory(self._api_key)
            async with client:
                text = await generate(prompt, output_shape, client)
        except Exception as exc:
            logger.error(f"Proxy error: {exc}", exc_info=True)
            return _error(500, str(exc) or GENERIC_ERROR_MESSAGE, f"{type(exc).__name__}: {exc}")

        logger.info(f"Relay response: {len(text)} chars")
        return 200, TextResponse(text=text).model_dump()
