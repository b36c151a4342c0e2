"""Client-side access to the relay. The public coroutines never raise."""

import json
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Optional

import httpx

from complaint_relay.config import RELAY_BASE_URL, RELAY_PATH, REQUEST_TIMEOUT
from complaint_relay.prompts import Action
from complaint_relay.schemas import AnalysisResult, ExperienceReport

logger = logging.getLogger(__name__)

INVALID_ERROR_BODY = {"error": "Network error or invalid JSON response"}

ANALYSIS_FAILED = AnalysisResult(
    tags=["Analisi Fallita"],
    summary=(
        "Non è stato possibile analizzare il contenuto. Il proxy di sicurezza "
        "o il servizio AI potrebbero essere non disponibili."
    ),
)
INCOMPLETE_TAG = "Analisi Incompleta"
INCOMPLETE_SUMMARY = "L'analisi ha prodotto un risultato in formato inatteso."

ADVICE_FALLBACK = "Non è stato possibile generare suggerimenti in questo momento. Riprova più tardi."
RESOURCES_FALLBACK = (
    "### Errore nel caricamento delle risorse\n\n"
    "Non è stato possibile caricare le informazioni in questo momento. Riprova più tardi."
)


class RelayError(Exception):
    pass


@asynccontextmanager
async def create_client() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Create an httpx async client configured for the relay."""
    async with httpx.AsyncClient(base_url=RELAY_BASE_URL, timeout=REQUEST_TIMEOUT) as client:
        yield client


async def call_relay(action: Action, payload: dict, client: httpx.AsyncClient) -> str:
    """POST one action to the relay and return its text."""
    response = await client.post(RELAY_PATH, json={"action": action.value, "payload": payload})

    if not response.is_success:
        try:
            error_data = response.json()
        except ValueError:
            error_data = INVALID_ERROR_BODY
        if not isinstance(error_data, dict):
            error_data = INVALID_ERROR_BODY
        logger.error(f"Error calling relay for action {action.value!r}: {error_data}")
        raise RelayError(
            error_data.get("error") or f"Proxy request failed with status {response.status_code}"
        )

    data = response.json()
    text = data.get("text") if isinstance(data, dict) else None
    if not isinstance(text, str):
        raise RelayError(f"Relay response for {action.value!r} has no text")
    return text


async def _call(action: Action, payload: dict, client: Optional[httpx.AsyncClient]) -> str:
    if client is not None:
        return await call_relay(action, payload, client)
    async with create_client() as own_client:
        return await call_relay(action, payload, own_client)


def _matches_analysis_shape(parsed: Any) -> bool:
    return (
        isinstance(parsed, dict)
        and isinstance(parsed.get("tags"), list)
        and all(isinstance(tag, str) for tag in parsed["tags"])
        and isinstance(parsed.get("summary"), str)
    )


def interpret_analysis(text: str) -> AnalysisResult:
    """Parse the analyze action's text. Raises ValueError if it is not JSON."""
    parsed = json.loads(text)
    if _matches_analysis_shape(parsed):
        return AnalysisResult(tags=parsed["tags"], summary=parsed["summary"])

    logger.warning(f"AI response was not in the expected AnalysisResult format: {parsed!r}")
    summary = parsed.get("summary") if isinstance(parsed, dict) else None
    if not isinstance(summary, str) or not summary:
        summary = INCOMPLETE_SUMMARY
    return AnalysisResult(tags=[INCOMPLETE_TAG], summary=summary)


async def analyze_report_content(
    description: str, client: Optional[httpx.AsyncClient] = None
) -> AnalysisResult:
    try:
        text = await _call(Action.ANALYZE, {"description": description}, client)
        return interpret_analysis(text)
    except Exception as exc:
        logger.error(f"Error analyzing report content via relay: {exc}")
        return ANALYSIS_FAILED.model_copy(deep=True)


async def generate_boycott_advice(
    report: ExperienceReport, client: Optional[httpx.AsyncClient] = None
) -> str:
    try:
        return await _call(Action.ADVICE, {"report": report.model_dump(by_alias=True)}, client)
    except Exception as exc:
        logger.error(f"Error generating advice via relay: {exc}")
        return ADVICE_FALLBACK


async def generate_resource_content(client: Optional[httpx.AsyncClient] = None) -> str:
    try:
        return await _call(Action.RESOURCES, {}, client)
    except Exception as exc:
        logger.error(f"Error generating resource content via relay: {exc}")
        return RESOURCES_FALLBACK
