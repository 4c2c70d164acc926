"""Section layout shared by the prompt builder, stub generator and refinement guard.

A document is a sequence of blocks. Each block opens with ``Header:`` on its
own line, blocks are separated by exactly one blank line, and no block
contains a blank line.
"""

import re
from collections.abc import Iterable

SOAP_SECTIONS = (
    "Subjective",
    "Objective",
    "Assessment",
    "Plan",
    "Medications Dispensed",
    "Aftercare",
)

SURGERY_PLAN_CATEGORIES = (
    "IV Catheter/Fluids",
    "Pre-medications",
    "Induction/Maintenance",
    "Surgical Prep",
    "Surgical Procedure",
    "Intra-op Medications",
    "Recovery",
    "Medications Dispensed",
    "Aftercare",
)

_HEADER_RE = re.compile(
    r"^(" + "|".join(re.escape(name) for name in SOAP_SECTIONS) + r"):",
    re.IGNORECASE,
)
_BLOCK_HEADER_RE = re.compile(
    r"^(" + "|".join(re.escape(name) for name in SOAP_SECTIONS + SURGERY_PLAN_CATEGORIES) + r"):",
    re.IGNORECASE,
)


def labelled(label: str, value: str) -> str:
    return f"{label}: {value}"


def compact(text: str) -> str:
    """Drop blank lines and trailing whitespace.

    Lines that would read as a section or surgery Plan category header are
    prefixed with a hyphen so user text can never open a second copy of one.
    """
    out = []
    for line in text.splitlines():
        line = line.rstrip()
        if not line.strip():
            continue
        if _BLOCK_HEADER_RE.match(line.strip()):
            line = f"- {line.strip()}"
        out.append(line)
    return "\n".join(out)


def section(header: str, *lines: str) -> str:
    body = compact("\n".join(lines))
    return f"{header}:\n{body}" if body else f"{header}:"


def join_sections(blocks: Iterable[str]) -> str:
    return "\n\n".join(block.strip() for block in blocks if block and block.strip())


def section_headers(text: str) -> list[str]:
    """Return the SOAP section headers found at line starts, in document order."""
    found = []
    canonical = {name.lower(): name for name in SOAP_SECTIONS}
    for line in text.splitlines():
        match = _HEADER_RE.match(line.strip())
        if match:
            found.append(canonical[match.group(1).lower()])
    return found
