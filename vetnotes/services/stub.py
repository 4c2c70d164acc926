"""Deterministic fallback documents used when no generation provider answers.

Output reuses the literal intake values (or their placeholders) inside the
same section skeleton the generator is asked for, so the client can always
render a result.
"""

from vetnotes.models.intake import (
    AppointmentIntake,
    ConsultIntake,
    FileRef,
    Intake,
    SurgeryIntake,
    ToolboxIntake,
)
from vetnotes.services.formatting import join_sections, labelled, section
from vetnotes.services.prompts import toolbox_title

AFTERCARE_PLACEHOLDER = "[Aftercare not provided]"
STUB_NOTICE = "Generated without a language model: review and complete before use."


def _files_line(files: list[FileRef]) -> str:
    if not files:
        return labelled("Attachments", "(none)")
    return labelled("Attachments", ", ".join(f"{f.name} ({f.type})" for f in files))


def _appointment_stub(intake: AppointmentIntake) -> str:
    return join_sections([
        section(
            "Subjective",
            labelled("Reason for visit", intake.reason),
            labelled("History", intake.history),
        ),
        section(
            "Objective",
            labelled("Species", intake.species),
            labelled("Weight (kg)", intake.weight_kg),
            labelled("TPR", intake.tpr),
            labelled("Physical exam", intake.pe),
            labelled("Diagnostics", intake.diagnostics),
        ),
        section("Assessment", labelled("Assessment notes", intake.assessment_hints)),
        section("Plan", labelled("Plan notes", intake.plan_hints)),
        section("Medications Dispensed", intake.meds_hints),
        section("Aftercare", AFTERCARE_PLACEHOLDER),
    ])


def _surgery_stub(intake: SurgeryIntake) -> str:
    if intake.advanced:
        procedure = (labelled("Procedure", intake.preset), labelled("Notes", intake.procedure_notes))
        subjective_extra = (labelled("Signalment", intake.signalment),)
    else:
        procedure = (labelled("Notes", intake.notes),)
        subjective_extra = ()

    plan = [
        section("IV Catheter/Fluids", labelled("Lines", intake.lines), labelled("Fluids", intake.fluids)),
        section("Pre-medications", intake.premed),
        section("Induction/Maintenance", intake.induction),
        section("Surgical Prep", intake.surgical_prep),
        section("Surgical Procedure", *procedure),
        section("Intra-op Medications", intake.intra_op),
        section("Recovery", intake.recovery),
        section("Medications Dispensed", intake.meds_dispensed),
        section("Aftercare", intake.post_op),
    ]
    # "Plan:" opens the first category block so no blank line sits inside it
    plan[0] = f"Plan:\n{plan[0]}"

    return join_sections([
        section(
            "Subjective",
            labelled("Reason for surgery", intake.reason),
            labelled("History", intake.history),
            *subjective_extra,
        ),
        section(
            "Objective",
            labelled("Species", intake.species),
            labelled("Weight (kg)", intake.weight_kg),
            labelled("TPR", intake.tpr),
            labelled("Physical exam", intake.pe),
            labelled("Diagnostics", intake.diagnostics),
        ),
        section("Assessment", labelled("ASA status", intake.asa)),
        *plan,
    ])


def _toolbox_stub(intake: ToolboxIntake) -> str:
    return join_sections([
        f"{toolbox_title(intake)} (draft)",
        f"Input:\n{intake.text}",
        f"Notes:\n{intake.notes}",
        _files_line(intake.files),
        STUB_NOTICE,
    ])


def _consult_stub(intake: ConsultIntake) -> str:
    return join_sections([
        f"Consult question:\n{intake.question}",
        f"Case context:\n{intake.context}",
        _files_line(intake.files),
        STUB_NOTICE,
    ])


_STUBS = {
    AppointmentIntake: _appointment_stub,
    SurgeryIntake: _surgery_stub,
    ToolboxIntake: _toolbox_stub,
    ConsultIntake: _consult_stub,
}


def stub(intake: Intake) -> str:
    """Render a structurally valid document from the intake alone. No I/O, no randomness."""
    return _STUBS[type(intake)](intake)
