from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Wire(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ErrorResponse(BaseModel):
    ok: bool = False
    error: str


class GenerateResponse(BaseModel):
    ok: bool = True
    mode: str
    text: str
    source: str  # "model" or "stub"


class RelaySendRequest(_Wire):
    relay_id: str | None = Field(None, alias="relayId")
    payload: Any = None


class RelaySendResponse(_Wire):
    ok: bool = True
    relay_id: str = Field(serialization_alias="relayId")


class RelayReceiveRequest(_Wire):
    relay_id: str | None = Field(None, alias="relayId")


class RelayReceiveResponse(BaseModel):
    ok: bool = True
    payload: Any = None


class RefineRequest(BaseModel):
    kind: str | None = None
    original: str | None = None
    feedback: str | None = None
    extra: dict[str, Any] | None = None


class RefineResponse(BaseModel):
    ok: bool = True
    improved: str
    refined: bool


class HealthResponse(BaseModel):
    ok: bool = True
    service: str
    time: str
    provider: str
    model: str
