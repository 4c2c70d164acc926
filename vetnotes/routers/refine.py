from fastapi import APIRouter, Depends

from vetnotes.models.api import RefineRequest, RefineResponse
from vetnotes.services.llm import LLMClient, get_llm_client
from vetnotes.services.refine import refine as refine_text

router = APIRouter(tags=["refine"])


@router.post("/refine", response_model=RefineResponse)
async def refine(body: RefineRequest, client: LLMClient = Depends(get_llm_client)):
    """Revise a previously generated text with free-form feedback.

    On provider failure the original text comes back unchanged with
    ``refined`` set to false.
    """
    improved = await refine_text(body.kind, body.original, body.feedback, body.extra, client)
    return RefineResponse(improved=improved, refined=improved != body.original)
