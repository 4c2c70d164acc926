"""Tests for the deterministic stub generator and its section layout."""

import pytest

from vetnotes.services.formatting import SOAP_SECTIONS, section_headers
from vetnotes.services.intake import normalize
from vetnotes.services.stub import STUB_NOTICE, stub

SURGERY_BLOCK_HEADERS = [
    "Subjective:",
    "Objective:",
    "Assessment:",
    "Plan:",
    "Pre-medications:",
    "Induction/Maintenance:",
    "Surgical Prep:",
    "Surgical Procedure:",
    "Intra-op Medications:",
    "Recovery:",
    "Medications Dispensed:",
    "Aftercare:",
]

FULL_APPOINTMENT = {
    "reason": "Vomiting x2 days",
    "history": "Ate a sock",
    "pe": "Mild cranial abdominal pain",
    "diagnostics": "Rads: gas pattern",
    "assessmentHints": "Possible FB",
    "planHints": "Recheck rads",
    "medsHints": "Cerenia",
}


def assert_layout(text: str) -> list[str]:
    """Blocks separated by exactly one blank line, no blank lines inside a block."""
    assert text == text.strip()
    assert "\n\n\n" not in text
    blocks = text.split("\n\n")
    for block in blocks:
        assert all(line.strip() for line in block.splitlines())
    return [block.splitlines()[0] for block in blocks]


APPOINTMENT_SUBSETS = [
    {},
    {"reason": "vomiting x2 days"},
    {"history": "Ate a sock", "medsHints": "Cerenia"},
    {"pe": "Mild cranial abdominal pain", "diagnostics": "Rads: gas pattern"},
    FULL_APPOINTMENT,
]


class TestAppointmentStub:
    @pytest.mark.parametrize("body", APPOINTMENT_SUBSETS)
    def test_sections_once_in_order(self, body):
        text = stub(normalize("appointment", body))
        assert section_headers(text) == list(SOAP_SECTIONS)
        assert assert_layout(text) == [f"{name}:" for name in SOAP_SECTIONS]

    def test_placeholders_rendered(self):
        text = stub(normalize("appointment", {"reason": "vomiting x2 days"}))
        assert "Reason for visit: vomiting x2 days" in text
        assert "History: [History not provided]" in text
        assert "Physical exam: [PE/diagnostics data not provided]" in text
        assert "Diagnostics: (not provided)" in text

    def test_literal_values_rendered(self):
        text = stub(normalize("appointment", FULL_APPOINTMENT))
        for value in FULL_APPOINTMENT.values():
            assert value in text

    def test_blank_lines_in_values_are_collapsed(self):
        text = stub(normalize("appointment", {"history": "Line one\n\n\nLine two"}))
        assert "History: Line one\nLine two" in text
        assert_layout(text)

    def test_header_lookalike_lines_cannot_duplicate_sections(self):
        text = stub(normalize("appointment", {"history": "Stable\nAssessment: owner thinks fine"}))
        assert section_headers(text) == list(SOAP_SECTIONS)
        assert "- Assessment: owner thinks fine" in text

    def test_deterministic(self):
        intake = normalize("appointment", FULL_APPOINTMENT)
        assert stub(intake) == stub(intake)


SURGERY_SUBSETS = [
    {},
    {"surgeryMode": "simple", "notes": "Routine neuter"},
    {"surgeryMode": "advanced"},
    {"surgeryMode": "advanced", "preset": "Dental COHAT", "premed": "Dexmedetomidine [0.5 mg/mL]"},
    {
        "surgeryMode": "advanced",
        "preset": "Canine spay",
        "signalment": "2y FI Lab",
        "lines": "22g IV cephalic",
        "fluids": "LRS 5 mL/kg/hr",
        "premed": "Hydromorphone",
        "induction": "Propofol",
        "surgicalPrep": "Clipped and scrubbed",
        "procedureNotes": "Ventral midline OHE",
        "intraOp": "Cefazolin",
        "recovery": "Smooth",
        "medsDispensed": "Carprofen",
        "postOp": "E-collar 14 days",
    },
]


class TestSurgeryStub:
    @pytest.mark.parametrize("body", SURGERY_SUBSETS)
    def test_plan_categories_once_in_order(self, body):
        text = stub(normalize("surgery", body))
        assert section_headers(text) == list(SOAP_SECTIONS)
        first_lines = assert_layout(text)
        assert first_lines == SURGERY_BLOCK_HEADERS

    def test_plan_opens_with_first_category(self):
        text = stub(normalize("surgery", {}))
        assert "Plan:\nIV Catheter/Fluids:\n" in text

    def test_advanced_values_land_in_categories(self):
        text = stub(normalize("surgery", SURGERY_SUBSETS[-1]))
        assert "Pre-medications:\nHydromorphone" in text
        assert "Surgical Procedure:\nProcedure: Canine spay\nNotes: Ventral midline OHE" in text
        assert "Medications Dispensed:\nCarprofen" in text
        assert "Aftercare:\nE-collar 14 days" in text
        assert "Signalment: 2y FI Lab" in text

    @pytest.mark.parametrize("category", ["Recovery", "Pre-medications", "IV Catheter/Fluids", "Surgical Prep"])
    def test_category_lookalike_lines_cannot_duplicate_categories(self, category):
        body = {"surgeryMode": "advanced", "premed": f"Dexmedetomidine given\n{category}: smooth, extubated"}
        text = stub(normalize("surgery", body))
        header_lines = [line for line in text.splitlines() if line.startswith(f"{category}:")]
        assert header_lines == [f"{category}:"]
        assert f"- {category}: smooth, extubated" in text
        assert assert_layout(text) == SURGERY_BLOCK_HEADERS

    def test_simple_notes_land_in_procedure(self):
        text = stub(normalize("surgery", {"notes": "Routine neuter"}))
        assert "Surgical Procedure:\nNotes: Routine neuter" in text
        assert "Recovery:\n(not provided)" in text


class TestFreeformStubs:
    def test_toolbox(self):
        text = stub(normalize("toolbox", {"task": "bloodwork-summary", "text": "ALT 250", "files": ["cbc.pdf"]}))
        assert text.startswith("Bloodwork summary (draft)")
        assert "Input:\nALT 250" in text
        assert "Attachments: cbc.pdf (unknown)" in text
        assert text.endswith(STUB_NOTICE)

    def test_toolbox_unknown_task(self):
        text = stub(normalize("toolbox", {"task": "radiology"}))
        assert text.startswith("Toolbox request (draft)")
        assert "Input:\n[No text provided]" in text

    def test_consult(self):
        text = stub(normalize("consult", {}))
        assert "Consult question:\n[No question provided]" in text
        assert "Case context:\n(none)" in text
        assert "Attachments: (none)" in text
