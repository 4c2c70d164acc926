import logging
from typing import Any

from vetnotes.errors import GenerationError, ValidationError
from vetnotes.services.formatting import SOAP_SECTIONS, join_sections, section_headers
from vetnotes.services.llm import LLMClient
from vetnotes.services.prompts import PromptPair

logger = logging.getLogger(__name__)

REFINE_KINDS = ("soap", "toolbox", "consult")
REFINE_TEMPERATURE = 0.3

_SHARED_RULES = """Rules:
- Keep every medical fact EXACTLY the same. Do not add vitals, drugs, doses or data that are not already present.
- Apply the requested feedback and improve clarity, flow and grammar.
- Plain text that pastes cleanly into Avimark: no markdown, no emojis, hyphens are the only bullet symbol.
- Return only the revised text, with no commentary before or after it."""

REFINE_SYSTEM_PROMPTS = {
    "soap": f"""You are the SOAP refinement engine for a small-animal veterinary clinic.
Revise the SOAP note you are given according to the clinician's feedback.

{_SHARED_RULES}
- Keep the SOAP structure exactly: the same section headers, in the same order, each exactly once.
- Keep exactly one blank line between sections and no blank lines inside a section.
- Keep drug concentrations in square brackets and never add administration times to the Plan.""",
    "toolbox": f"""You are the toolbox refinement engine for a small-animal veterinary clinic.
Revise the toolbox output you are given according to the user's feedback.

{_SHARED_RULES}
- Keep the intent and clinical content the same; stay short, clinical and vet-friendly.""",
    "consult": f"""You are the consult refinement engine for a small-animal veterinary clinic.
Revise the consult answer you are given according to the user's feedback.

{_SHARED_RULES}
- Preserve the medical reasoning and differential ranking; adjust tone, length or structure as requested.
- Keep a concise vet-to-vet tone.""",
}


def _selected_sections(extra: dict[str, Any]) -> list[str]:
    raw = extra.get("sections") or extra.get("sectionsToRefine") or []
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        raise ValidationError("extra.sections", "must be a list of section names")
    canonical = {name.lower(): name for name in SOAP_SECTIONS}
    picked = []
    for item in raw:
        name = canonical.get(str(item).strip().lower())
        if name and name not in picked:
            picked.append(name)
    return picked


def build_refine_prompt(kind: str, original: str, feedback: str, extra: dict[str, Any]) -> PromptPair:
    context = [f"CONTEXT: {kind}", f"FEEDBACK:\n{feedback.strip()}"]
    if kind == "soap":
        sections = _selected_sections(extra)
        if sections:
            context.append(
                f"ONLY REVISE THESE SECTIONS: {', '.join(sections)}. "
                "Leave every other section exactly as written."
            )
    elif kind == "consult":
        if extra.get("question"):
            context.append(f"QUESTION:\n{extra['question']}")
        if extra.get("context"):
            context.append(f"CASE CONTEXT:\n{extra['context']}")
    elif kind == "toolbox" and extra.get("task"):
        context.append(f"TOOLBOX TASK: {extra['task']}")

    user = join_sections(context) + f"\n\nTEXT TO REFINE:\n{original}"
    return PromptPair(system=REFINE_SYSTEM_PROMPTS[kind], user=user)


async def refine(
    kind: str | None,
    original: str | None,
    feedback: str | None,
    extra: dict[str, Any] | None,
    client: LLMClient,
) -> str:
    """Revise ``original`` per ``feedback``; return ``original`` unchanged if generation fails.

    Refinement is best-effort: it never destroys the previously accepted
    document. For SOAP notes, a revision that drops a section header present
    in the original is rejected.
    """
    kind = (kind or "").strip().lower()
    if kind not in REFINE_KINDS:
        raise ValidationError("kind", f"must be one of {', '.join(REFINE_KINDS)}")
    if not original or not original.strip():
        raise ValidationError("original", "is required")
    if not feedback or not feedback.strip():
        raise ValidationError("feedback", "is required")

    prompt = build_refine_prompt(kind, original, feedback, extra or {})

    if not client.available():
        return original

    try:
        improved = await client.generate_text(prompt.system, prompt.user, client.config(REFINE_TEMPERATURE))
    except GenerationError as e:
        logger.error("Refine (%s) failed, returning original: %s: %s", kind, type(e).__name__, e)
        return original

    if kind == "soap":
        kept = section_headers(improved)
        missing = [name for name in section_headers(original) if name not in kept]
        if missing:
            logger.warning("Refined SOAP dropped sections %s; returning original", ", ".join(missing))
            return original

    return improved
