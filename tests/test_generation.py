"""Tests for the generate pipeline: prompt, gateway call and stub fallback."""

import logging

import pytest

from vetnotes.errors import EmptyResponse, GenerationError, ProviderError, ValidationError
from vetnotes.services.generation import generate_document
from vetnotes.services.intake import normalize
from vetnotes.services.llm import LLMClient
from vetnotes.services.prompts import build_prompt
from vetnotes.services.stub import stub


@pytest.mark.asyncio
async def test_no_provider_uses_stub(caplog):
    with caplog.at_level(logging.WARNING):
        result = await generate_document("appointment", {"reason": "Limping"}, LLMClient(provider="dummy"))
    assert result.source == "stub"
    assert result.mode == "appointment"
    assert result.text == stub(normalize("appointment", {"reason": "Limping"}))
    assert caplog.records == []


@pytest.mark.asyncio
async def test_model_text_returned(fake_llm):
    llm = fake_llm(reply="Subjective:\nLimping")
    result = await generate_document("appointment", {"reason": "Limping"}, llm)
    assert result.source == "model"
    assert result.text == "Subjective:\nLimping"

    system, user, _ = llm.calls[0]
    expected = build_prompt(normalize("appointment", {"reason": "Limping"}))
    assert (system, user) == (expected.system, expected.user)


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "mode,temperature",
    [("appointment", 0.3), ("surgery", 0.3), ("toolbox", 0.4), ("consult", 0.4)],
)
async def test_temperature_per_mode(fake_llm, mode, temperature):
    llm = fake_llm(reply="done")
    await generate_document(mode, {}, llm)
    assert llm.calls[0][2].temperature == temperature


@pytest.mark.asyncio
async def test_provider_error_falls_back_to_stub(fake_llm, caplog):
    llm = fake_llm(error=ProviderError("openai call timed out after 60s"))
    result = await generate_document("surgery", {"notes": "Neuter"}, llm)
    assert result.source == "stub"
    assert result.text == stub(normalize("surgery", {"notes": "Neuter"}))
    assert "Surgery generation failed; using stub" in caplog.text
    assert "timed out" in caplog.text


@pytest.mark.asyncio
async def test_empty_response_falls_back_to_stub(fake_llm, caplog):
    result = await generate_document("consult", {"question": "Next step?"}, fake_llm(reply=""))
    assert result.source == "stub"
    assert "Empty consult generation" in caplog.text
    assert any(r.levelno == logging.WARNING for r in caplog.records)


@pytest.mark.asyncio
async def test_validation_error_propagates_before_gateway(fake_llm):
    llm = fake_llm(reply="unused")
    with pytest.raises(ValidationError):
        await generate_document("dental", {}, llm)
    assert llm.calls == []


def test_gateway_errors_share_a_base():
    assert issubclass(EmptyResponse, GenerationError)
    assert issubclass(ProviderError, GenerationError)
