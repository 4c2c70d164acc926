import logging
from dataclasses import dataclass
from typing import Any

from vetnotes.errors import EmptyResponse, ProviderError
from vetnotes.services.intake import normalize
from vetnotes.services.llm import LLMClient
from vetnotes.services.prompts import build_prompt
from vetnotes.services.stub import stub

logger = logging.getLogger(__name__)

# Structured SOAP output runs cooler than free-form toolbox/consult text
MODE_TEMPERATURES = {
    "appointment": 0.3,
    "surgery": 0.3,
    "toolbox": 0.4,
    "consult": 0.4,
}


@dataclass(frozen=True)
class GenerationResult:
    mode: str
    text: str
    source: str  # "model" or "stub"


async def generate_document(mode: str | None, body: Any, client: LLMClient) -> GenerationResult:
    """Normalize intake, build the prompt, and generate text or fall back to the stub.

    Raises ``ValidationError`` for malformed input. Provider failures never
    propagate: they are logged and answered with the deterministic stub.
    """
    intake = normalize(mode, body)

    if not client.available():
        return GenerationResult(mode=intake.mode, text=stub(intake), source="stub")

    prompt = build_prompt(intake)
    config = client.config(MODE_TEMPERATURES[intake.mode])
    try:
        text = await client.generate_text(prompt.system, prompt.user, config)
    except EmptyResponse as e:
        logger.warning("Empty %s generation from %s; using stub: %s", intake.mode, client.provider, e)
    except ProviderError as e:
        logger.error("%s generation failed; using stub: %s", intake.mode.capitalize(), e)
    else:
        return GenerationResult(mode=intake.mode, text=text, source="model")

    return GenerationResult(mode=intake.mode, text=stub(intake), source="stub")
