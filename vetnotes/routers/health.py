from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from vetnotes.config import SERVICE_NAME
from vetnotes.models.api import HealthResponse
from vetnotes.services.llm import LLMClient, get_llm_client

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health(client: LLMClient = Depends(get_llm_client)):
    return HealthResponse(
        service=SERVICE_NAME,
        time=datetime.now(UTC).isoformat(),
        provider=client.provider if client.available() else "stub",
        model=client.model if client.available() else "",
    )
