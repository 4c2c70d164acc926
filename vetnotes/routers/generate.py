import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from vetnotes.models.api import GenerateResponse
from vetnotes.services.generation import generate_document
from vetnotes.services.llm import LLMClient, get_llm_client

logger = logging.getLogger(__name__)

router = APIRouter(tags=["generate"])


@router.post("/generate", response_model=GenerateResponse)
async def generate(
    body: dict[str, Any] = Body(...),
    client: LLMClient = Depends(get_llm_client),
):
    """Generate a SOAP note, toolbox output or consult answer from intake.

    The ``mode`` key selects appointment, surgery, toolbox or consult; the
    remaining keys are that mode's intake fields. Without a configured
    provider, or when the provider fails, the deterministic stub is returned.
    """
    result = await generate_document(body.get("mode"), body, client)
    logger.debug("Generated %s document (source=%s)", result.mode, result.source)
    return GenerateResponse(mode=result.mode, text=result.text, source=result.source)
