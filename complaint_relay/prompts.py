import logging
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class InvalidActionError(Exception):
    def __init__(self, action: Any):
        self.action = action
        super().__init__(f"Invalid action: {action}")


class Action(str, Enum):
    ANALYZE = "analyze"
    ADVICE = "advice"
    RESOURCES = "resources"


ANALYZE_TEMPLATE = """\
Analizza la seguente descrizione di un'esperienza lavorativa negativa. Estrai le problematiche principali come una lista di stringhe per i "tags" (massimo 3) e fornisci un breve "summary" del problema.
Descrizione: "{description}"
Restituisci ESATTAMENTE e SOLO un oggetto JSON con questa struttura: {{ "tags": ["tag1", "tag2"], "summary": "riassunto del problema" }}"""

ADVICE_TEMPLATE = """\
Un utente ha segnalato l'azienda "{company_name}" nel settore "{sector}" per le seguenti ragioni: {title}. La sua descrizione del problema è: "{description}".
Basandoti su questo, fornisci suggerimenti costruttivi e pratici su come i consumatori, altri lavoratori e la community possono agire.
Struttura la risposta in Markdown. Includi:
- Un paragrafo su come diffondere consapevolezza in modo efficace.
- Suggerimenti per trovare alternative etiche all'azienda (se applicabile).
- Modi concreti per sostenere i lavoratori attuali o passati.
Evita un linguaggio aggressivo. Sii propositivo e focalizzati su azioni realizzabili."""

RESOURCES_PROMPT = """\
Crea una sezione di risorse utili per i lavoratori in Italia, formattata in Markdown. La risposta deve essere chiara, ben strutturata e facile da leggere. Includi:
- Un'introduzione sui diritti fondamentali del lavoratore (orario, ferie, contratto).
- Una sezione "A chi rivolgersi" con una lista di enti utili come Ispettorato del Lavoro, sindacati e patronati (usa nomi generici, non link specifici).
- Una sezione "Come Documentare gli Abusi" con consigli pratici (es. salvare email, screenshot, tenere un diario).
- Un paragrafo finale sull'importanza della privacy e della condivisione anonima per proteggere se stessi e aiutare gli altri."""

# response_format.json_schema for the analyze action. The 3-tag cap lives in
# the prompt only; the schema does not enforce it.
ANALYSIS_OUTPUT_SHAPE: dict = {
    "name": "analysis_result",
    "schema": {
        "type": "object",
        "properties": {
            "tags": {"type": "array", "items": {"type": "string"}},
            "summary": {"type": "string"},
        },
        "required": ["tags", "summary"],
    },
}

PromptSpec = tuple[str, Optional[dict]]


def _field(mapping: dict, key: str) -> str:
    value = mapping.get(key)
    return "" if value is None else str(value)


def _build_analyze(payload: dict) -> PromptSpec:
    prompt = ANALYZE_TEMPLATE.format(description=_field(payload, "description"))
    return prompt, ANALYSIS_OUTPUT_SHAPE


def _build_advice(payload: dict) -> PromptSpec:
    report = payload.get("report") or {}
    prompt = ADVICE_TEMPLATE.format(
        company_name=_field(report, "companyName"),
        sector=_field(report, "sector"),
        title=_field(report, "title"),
        description=_field(report, "description"),
    )
    return prompt, None


def _build_resources(payload: dict) -> PromptSpec:
    return RESOURCES_PROMPT, None


_BUILDERS: dict[Action, Callable[[dict], PromptSpec]] = {
    Action.ANALYZE: _build_analyze,
    Action.ADVICE: _build_advice,
    Action.RESOURCES: _build_resources,
}


def parse_action(value: Any) -> Action:
    """Map a raw action value onto Action. Anything else is an InvalidActionError."""
    if isinstance(value, Action):
        return value
    try:
        return Action(value)
    except ValueError:
        raise InvalidActionError(value) from None


def build_prompt(action: Any, payload: Optional[dict]) -> PromptSpec:
    """Return (prompt text, output shape or None) for an action and its payload."""
    resolved = parse_action(action)
    if payload is None:
        payload = {}
    prompt, output_shape = _BUILDERS[resolved](payload)
    logger.debug(f"Built {resolved.value} prompt ({len(prompt)} chars)")
    return prompt, output_shape
