"""Pydantic models for clinical intake, one per generation mode.

Every text field is optional. Missing, null or blank values are replaced by
the field's default, which doubles as the documented placeholder shown to the
generator and rendered by the stub. Unknown keys are dropped.
"""

from typing import Literal

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationInfo,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

NOT_PROVIDED = "(not provided)"
NONE_GIVEN = "(none)"

SURGERY_MODES = ("simple", "advanced")
TOOLBOX_TASKS = (
    "bloodwork-summary",
    "lab-interpretation",
    "client-email",
    "weight-consult",
    "soap-transform",
    "other",
)
SOAP_TRANSFORMS = ("email", "summary", "handout", "plan-meds-aftercare", "rephrase")

DENTAL_MARKERS = ("dental", "cohat")


class _PlaceholderModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        frozen=True,
    )

    @field_validator("*", mode="before")
    @classmethod
    def _fill_placeholder(cls, value: object, info: ValidationInfo) -> object:
        field = cls.model_fields[info.field_name]
        if value is None:
            return field.get_default(call_default_factory=True)
        if isinstance(value, str):
            value = value.strip()
            if not value:
                return field.get_default(call_default_factory=True)
            return value
        if isinstance(value, (int, float)) and not isinstance(value, bool) and isinstance(field.default, str):
            return str(value)
        return value


class FileRef(_PlaceholderModel):
    """Attachment metadata. File content is never carried past this point."""

    name: str = "unnamed"
    type: str = "unknown"

    @model_validator(mode="before")
    @classmethod
    def _bare_name(cls, data: object) -> object:
        if isinstance(data, str):
            return {"name": data}
        return data


class ClinicalIntake(_PlaceholderModel):
    """Fields shared by appointment and surgery SOAP intake."""

    case_label: str = "(unlabelled case)"
    species: str = NOT_PROVIDED
    weight_kg: str = NOT_PROVIDED
    tpr: str = NOT_PROVIDED
    transcript: str = NONE_GIVEN
    accuracy_mode: str = "help"
    reason: str = "[Reason for visit not provided]"
    history: str = "[History not provided]"
    pe: str = "[PE/diagnostics data not provided]"
    diagnostics: str = NOT_PROVIDED
    files: list[FileRef] = Field(default_factory=list)

    @field_validator("accuracy_mode")
    @classmethod
    def _accuracy_mode(cls, value: str) -> str:
        return "strict" if value.lower() == "strict" else "help"

    @property
    def strict(self) -> bool:
        return self.accuracy_mode == "strict"


class AppointmentIntake(ClinicalIntake):
    mode: Literal["appointment"] = "appointment"
    assessment_hints: str = NONE_GIVEN
    plan_hints: str = NONE_GIVEN
    meds_hints: str = NONE_GIVEN


class SurgeryIntake(ClinicalIntake):
    mode: Literal["surgery"] = "surgery"
    surgery_mode: str = "simple"
    asa: str = NOT_PROVIDED

    # simple
    notes: str = "[Surgery notes not provided]"

    # advanced
    preset: str = "[Procedure not specified]"
    signalment: str = "[Signalment not provided]"
    premed: str = NOT_PROVIDED
    induction: str = NOT_PROVIDED
    fluids: str = NOT_PROVIDED
    lines: str = NOT_PROVIDED
    surgical_prep: str = NOT_PROVIDED
    intra_op: str = NOT_PROVIDED
    post_op: str = NOT_PROVIDED
    recovery: str = NOT_PROVIDED
    procedure_notes: str = NOT_PROVIDED
    meds_dispensed: str = NOT_PROVIDED

    @field_validator("surgery_mode")
    @classmethod
    def _surgery_mode(cls, value: str) -> str:
        value = value.lower()
        if value not in SURGERY_MODES:
            raise ValueError(f"must be one of {', '.join(SURGERY_MODES)}")
        return value

    @property
    def advanced(self) -> bool:
        return self.surgery_mode == "advanced"

    @property
    def is_dental(self) -> bool:
        haystack = f"{self.preset} {self.reason}".lower()
        return any(marker in haystack for marker in DENTAL_MARKERS)


class ToolboxIntake(_PlaceholderModel):
    mode: Literal["toolbox"] = "toolbox"
    task: str = Field("other", validation_alias=AliasChoices("task", "toolboxMode", "toolbox_mode"))
    transform: str = Field(
        "rephrase", validation_alias=AliasChoices("transform", "transformType", "transform_type")
    )
    text: str = "[No text provided]"
    notes: str = NONE_GIVEN
    detail_level: str = "standard"
    include_diffs: bool = False
    include_client_friendly: bool = False
    pet_name: str = NOT_PROVIDED
    owner_name: str = NOT_PROVIDED
    clinic: str = NOT_PROVIDED
    from_name: str = NOT_PROVIDED
    files: list[FileRef] = Field(default_factory=list)

    @field_validator("task")
    @classmethod
    def _task(cls, value: str) -> str:
        return value.lower().replace("_", "-")

    @field_validator("transform")
    @classmethod
    def _transform(cls, value: str) -> str:
        value = value.lower().replace("_", "-")
        return value if value in SOAP_TRANSFORMS else "rephrase"


class ConsultIntake(_PlaceholderModel):
    mode: Literal["consult"] = "consult"
    question: str = "[No question provided]"
    context: str = NONE_GIVEN
    files: list[FileRef] = Field(default_factory=list)


Intake = AppointmentIntake | SurgeryIntake | ToolboxIntake | ConsultIntake

INTAKE_MODELS: dict[str, type[_PlaceholderModel]] = {
    "appointment": AppointmentIntake,
    "surgery": SurgeryIntake,
    "toolbox": ToolboxIntake,
    "consult": ConsultIntake,
}
