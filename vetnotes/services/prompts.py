"""Prompt construction for every generation mode.

``build_prompt`` is pure: the same intake always yields byte-identical
prompts. Formatting rules (section order, spacing, drug concentrations, no
administration times) are instructions to the generator; nothing here
rewrites or interprets clinical content.
"""

from dataclasses import dataclass

from vetnotes.models.intake import (
    AppointmentIntake,
    ClinicalIntake,
    ConsultIntake,
    FileRef,
    Intake,
    SurgeryIntake,
    ToolboxIntake,
)
from vetnotes.services.formatting import SOAP_SECTIONS, SURGERY_PLAN_CATEGORIES, join_sections, labelled

PE_SYSTEMS = (
    "General",
    "Vitals",
    "Eyes",
    "Ears",
    "Oral cavity",
    "Nose",
    "Respiratory",
    "Cardiovascular",
    "Abdomen",
    "Urogenital",
    "Musculoskeletal",
    "Neurological",
    "Integument",
    "Lymphatic",
)
SURGERY_PE_SYSTEMS = PE_SYSTEMS + ("Diagnostics",)

DRUG_EXAMPLES = ("Metacam [1.5 mg/mL]", "Midazolam [5 mg/mL]")

NORMAL_LIMITS_PHRASE = "Not specifically documented, within normal limits unless otherwise noted."


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


def _rules(title: str, *rules: str) -> str:
    return "\n".join([title] + [f"- {rule}" for rule in rules])


FORMAT_RULES = _rules(
    "OUTPUT FORMAT",
    "Plain text that pastes cleanly into Avimark: no markdown, no emojis, hyphens are the only bullet symbol.",
    "Start every section with its header on its own line followed by a colon, e.g. \"Subjective:\".",
    "Separate sections with exactly one blank line. Never leave a blank line inside a section.",
    "Each section appears exactly once.",
)

MISSING_DATA_RULES = _rules(
    "MISSING DATA",
    "Inputs written in square brackets or parentheses, such as [History not provided] or (not provided), were not supplied.",
    "Do NOT invent vitals, drug names, doses or diagnostics that were not given or hinted at.",
)

OBJECTIVE_RULES = (
    "Objective reports diagnostic values as data only, with zero interpretation. "
    "This is a hard constraint: every interpretation of a value belongs in Assessment, never in Objective."
)

DRUG_RULES = (
    "Every drug you mention must be written with its concentration in square brackets, "
    f"e.g. {DRUG_EXAMPLES[0]}, {DRUG_EXAMPLES[1]}."
)

NO_TIMES_RULE = "Never include administration times (clock times) anywhere in the Plan."

DENTAL_RULES = _rules(
    "DENTAL CASE",
    "Document every regional nerve block with drug, [concentration], site and total dose.",
    "Lidocaine nerve block dose must not exceed 4 mg/kg in dogs or 2 mg/kg in cats.",
    "Describe closure of extraction sites as: \"Gingival flaps closed tension-free with absorbable "
    "monofilament suture in a simple interrupted pattern.\"",
    "Note continuous anesthetic monitoring (HR, RR, SpO2, ETCO2, blood pressure, temperature) "
    "throughout the dental procedure.",
)


def _accuracy_rules(intake: ClinicalIntake) -> str:
    if intake.strict:
        return _rules(
            "ACCURACY MODE: STRICT",
            "Use only the data given. Write \"__\" wherever a value is missing.",
            "Do not fill undocumented exam systems.",
        )
    return _rules(
        "ACCURACY MODE: HELP",
        f"For exam systems with no data, write \"{NORMAL_LIMITS_PHRASE}\"",
        "If something essential is missing, keep it generic (e.g. \"See anesthesia sheet for full details\") "
        "rather than inventing it.",
    )


def _attachments(files: list[FileRef]) -> str:
    if not files:
        return "ATTACHMENTS: (none)"
    listed = "\n".join(f"- {f.name} ({f.type})" for f in files)
    return f"ATTACHMENTS (file names and types only, contents not available):\n{listed}"


def _case_header(intake: ClinicalIntake, visit_type: str) -> str:
    return "\n".join([
        labelled("CASE", intake.case_label),
        labelled("VISIT TYPE", visit_type),
        labelled("ACCURACY MODE", intake.accuracy_mode.upper()),
    ])


def _transcript(intake: ClinicalIntake) -> str:
    return f"TRANSCRIPT (absorb its clinical content exactly, if present):\n{intake.transcript}"


# --- SOAP ---


def _soap_system(intake: ClinicalIntake, pe_systems: tuple[str, ...], plan_rules: str, dental: bool) -> str:
    blocks = [
        "You are the SOAP documentation engine for a small-animal veterinary clinic. "
        "Write one complete SOAP note from the structured intake you are given.",
        _rules(
            "SECTIONS",
            f"Output exactly these sections, in this order: {', '.join(SOAP_SECTIONS)}.",
        ),
        FORMAT_RULES,
        _rules(
            "SUBJECTIVE",
            "Concise: presenting problem and owner concerns only.",
        ),
        _rules(
            "OBJECTIVE",
            f"Physical exam in paragraph style, body systems in this exact order: {', '.join(pe_systems)}.",
            OBJECTIVE_RULES,
        ),
        _rules(
            "ASSESSMENT",
            "Problem list and overall assessment. Interpret diagnostics here and only here.",
        ),
        plan_rules,
        _rules(
            "MEDICATIONS DISPENSED",
            "Take-home medications only: name, [concentration], dose, route and duration.",
            NO_TIMES_RULE,
        ),
        _rules(
            "AFTERCARE",
            "Activity restriction, monitoring at home, recheck timing and any special notes.",
        ),
        _accuracy_rules(intake),
        MISSING_DATA_RULES,
    ]
    if dental:
        blocks.append(DENTAL_RULES)
    return join_sections(blocks)


def _appointment_prompt(intake: AppointmentIntake) -> PromptPair:
    plan_rules = _rules(
        "PLAN",
        "Diagnostics, treatments and follow-up in logical order.",
        DRUG_RULES,
        NO_TIMES_RULE,
    )
    system = _soap_system(intake, PE_SYSTEMS, plan_rules, dental=False)

    inputs = "\n".join([
        "APPOINTMENT INPUTS:",
        labelled("Species", intake.species),
        labelled("Weight (kg)", intake.weight_kg),
        labelled("TPR", intake.tpr),
        labelled("Reason", intake.reason),
        labelled("History", intake.history),
        labelled("PE", intake.pe),
        labelled("Diagnostics", intake.diagnostics),
        labelled("Assessment hints", intake.assessment_hints),
        labelled("Plan hints", intake.plan_hints),
        labelled("Medications dispensed hints", intake.meds_hints),
    ])
    user = join_sections([
        _case_header(intake, "Appointment"),
        inputs,
        _attachments(intake.files),
        _transcript(intake),
    ])
    return PromptPair(system=system, user=user)


def _surgery_prompt(intake: SurgeryIntake) -> PromptPair:
    categories = "\n".join(f"{i}) {name}" for i, name in enumerate(SURGERY_PLAN_CATEGORIES, start=1))
    plan_rules = "\n".join([
        _rules(
            "PLAN",
            "The surgical Plan MUST use these categories, exactly once each, in exactly this order, "
            "even when no input was given for a category:",
        ),
        categories,
        _rules(
            "PLAN LAYOUT",
            "Write each category name followed by a colon on its own line, then its content.",
            "Put exactly one blank line between categories. Medications Dispensed and Aftercare are the "
            "last two categories and double as their own sections; do not repeat them.",
            DRUG_RULES,
            NO_TIMES_RULE,
        ),
    ])
    system = _soap_system(intake, SURGERY_PE_SYSTEMS, plan_rules, dental=intake.is_dental)

    lines = [
        "SURGERY INPUTS:",
        labelled("Surgery mode", intake.surgery_mode),
        labelled("Species", intake.species),
        labelled("Weight (kg)", intake.weight_kg),
        labelled("ASA status", intake.asa),
        labelled("TPR", intake.tpr),
        labelled("Reason", intake.reason),
        labelled("History", intake.history),
        labelled("PE", intake.pe),
        labelled("Diagnostics", intake.diagnostics),
    ]
    if intake.advanced:
        lines += [
            labelled("Preset", intake.preset),
            labelled("Signalment", intake.signalment),
            labelled("Pre-medications", intake.premed),
            labelled("Induction", intake.induction),
            labelled("Fluids", intake.fluids),
            labelled("Lines/catheter", intake.lines),
            labelled("Surgical prep", intake.surgical_prep),
            labelled("Intra-op", intake.intra_op),
            labelled("Procedure notes", intake.procedure_notes),
            labelled("Recovery", intake.recovery),
            labelled("Post-op", intake.post_op),
            labelled("Medications dispensed", intake.meds_dispensed),
        ]
    else:
        lines.append(labelled("Surgery notes", intake.notes))

    user = join_sections([
        _case_header(intake, "Surgery"),
        "\n".join(lines),
        _attachments(intake.files),
        _transcript(intake),
    ])
    return PromptPair(system=system, user=user)


# --- Toolbox ---

TOOLBOX_TITLES = {
    "bloodwork-summary": "Bloodwork summary",
    "lab-interpretation": "Lab interpretation",
    "client-email": "Client email",
    "weight-consult": "Weight consult",
    "soap-transform": "SOAP transform",
}
GENERIC_TOOLBOX_TITLE = "Toolbox request"

TOOLBOX_TASKS = {
    "bloodwork-summary": (
        "Make a concise vet-level summary of the bloodwork below with a short assessment. "
        "Do NOT write a full SOAP; output an explanation a veterinarian can paste into the record."
    ),
    "lab-interpretation": (
        "Interpret the lab results below: list each abnormal value with its direction, "
        "its likely clinical significance, and what to recheck or investigate next."
    ),
    "client-email": (
        "Write a client-facing email in clear, friendly language suitable to paste into an email. "
        "Address the owner by name when given and sign off from the clinic."
    ),
    "weight-consult": (
        "Write a weight consult / weight maintenance client handout: current and target weight, "
        "daily calorie guidance, feeding and exercise plan, and a recheck schedule."
    ),
}

SOAP_TRANSFORMS = {
    "email": "Rewrite the SOAP note below as a client-friendly email summarizing the visit and home care.",
    "summary": "Condense the SOAP note below into a short clinical summary for the medical record.",
    "handout": "Turn the SOAP note below into a clean client handout with headings, short paragraphs and hyphen bullets.",
    "plan-meds-aftercare": (
        "Extract only the Plan, Medications Dispensed and Aftercare sections of the SOAP note below, "
        "keeping the clinic's section format."
    ),
    "rephrase": "Rephrase the SOAP note below for clarity and flow without changing any medical fact.",
}

GENERIC_TOOLBOX_TASK = (
    "Respond to the request below in a way a small-animal veterinary clinic can paste into Avimark."
)


def toolbox_title(intake: ToolboxIntake) -> str:
    return TOOLBOX_TITLES.get(intake.task, GENERIC_TOOLBOX_TITLE)


def _toolbox_task(intake: ToolboxIntake) -> str:
    if intake.task == "soap-transform":
        return SOAP_TRANSFORMS[intake.transform]
    return TOOLBOX_TASKS.get(intake.task, GENERIC_TOOLBOX_TASK)


def _toolbox_prompt(intake: ToolboxIntake) -> PromptPair:
    blocks = [
        "You are the toolbox helper for a small-animal veterinary clinic.",
        f"TASK: {_toolbox_task(intake)}",
        _rules(
            "OUTPUT FORMAT",
            "Plain text that pastes cleanly into Avimark: no markdown, no emojis, hyphens are the only bullet symbol.",
            DRUG_RULES,
            "Do not invent values that are not in the input.",
        ),
    ]
    if intake.task in ("bloodwork-summary", "lab-interpretation"):
        options = [f"Detail level: {intake.detail_level}."]
        if intake.include_diffs:
            options.append("Include a short ranked list of differentials.")
        if intake.include_client_friendly:
            options.append("Add a second, client-friendly version after the veterinary version.")
        blocks.append(_rules("OPTIONS", *options))
    system = join_sections(blocks)

    lines = [
        labelled("TOOLBOX TASK", intake.task),
        labelled("INPUT", intake.text),
        labelled("NOTES", intake.notes),
    ]
    if intake.task == "client-email":
        lines += [
            labelled("Pet name", intake.pet_name),
            labelled("Owner name", intake.owner_name),
            labelled("Clinic", intake.clinic),
            labelled("From", intake.from_name),
        ]
    user = join_sections(["\n".join(lines), _attachments(intake.files)])
    return PromptPair(system=system, user=user)


# --- Consult ---

CONSULT_SYSTEM = join_sections([
    "You are a small-animal internal medicine / general practice consult assistant.",
    _rules(
        "ANSWER",
        "Give concise reasoning, a ranked differential list, and practical next steps.",
        "Use a concise vet-to-vet tone.",
        DRUG_RULES,
        "Plain text that pastes cleanly into Avimark: no markdown, no emojis, hyphens are the only bullet symbol.",
    ),
])


def _consult_prompt(intake: ConsultIntake) -> PromptPair:
    user = join_sections([
        f"Question:\n{intake.question}",
        f"Case context:\n{intake.context}",
        _attachments(intake.files),
    ])
    return PromptPair(system=CONSULT_SYSTEM, user=user)


_BUILDERS = {
    AppointmentIntake: _appointment_prompt,
    SurgeryIntake: _surgery_prompt,
    ToolboxIntake: _toolbox_prompt,
    ConsultIntake: _consult_prompt,
}


def build_prompt(intake: Intake) -> PromptPair:
    """Build the (system, user) prompt pair for a normalized intake."""
    return _BUILDERS[type(intake)](intake)
