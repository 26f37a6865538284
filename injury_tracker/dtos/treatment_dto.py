"""
DTOs for treatment add/edit forms.
"""

from datetime import date
from typing import Any, ClassVar

from pydantic import Field, field_validator

from injury_tracker.dtos.form_base import FormModel, blank_to_none
from injury_tracker.entities.enums import TreatmentType


class TreatmentForm(FormModel):
    """
    Validated treatment form input.

    ``result`` is offered from TreatmentResult but accepted as free text.
    ``followUpDate`` stays raw until cross-field validation so a stray value
    left behind by an unticked checkbox never blocks submission.
    """

    injury_id: int = Field(..., gt=0, alias="injuryID")
    treatment_date: date = Field(..., alias="treatmentDate")
    treatment_type: TreatmentType = Field(..., alias="treatmentType")
    provider: str = Field(default="", alias="provider")
    facility: str = Field(default="", alias="facility")
    notes: str = Field(default="", alias="notes")
    result: str = Field(default="", alias="result")
    recommendations: str = Field(default="", alias="recommendations")
    follow_up_required: bool = Field(default=False, alias="followUpRequired")
    follow_up_date: Any = Field(default=None, alias="followUpDate")

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {
        "injuryID": "Please select an injury.",
        "treatmentDate": "Treatment date is required.",
        "treatmentType": "Please select a treatment type.",
        "followUpRequired": "Follow-up required must be true or false.",
        "followUpDate": "Follow-up date is required when follow-up is required.",
    }
    DEFAULTS: ClassVar[dict[str, Any]] = {
        "injuryID": "",
        "treatmentDate": "",
        "treatmentType": "",
        "provider": "",
        "facility": "",
        "notes": "",
        "result": "",
        "recommendations": "",
        "followUpRequired": False,
        "followUpDate": "",
    }
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("treatmentDate", "followUpDate")

    @field_validator("injury_id", "treatment_date", "treatment_type", mode="before")
    @classmethod
    def _blank(cls, value):
        return blank_to_none(value)

    @field_validator(
        "provider", "facility", "notes", "result", "recommendations", mode="before"
    )
    @classmethod
    def _optional_text(cls, value):
        return "" if value is None else value

    @field_validator("follow_up_required", mode="before")
    @classmethod
    def _checkbox(cls, value):
        # Unticked checkboxes arrive as "" or not at all.
        return False if blank_to_none(value) is None else value

    def parsed_follow_up_date(self) -> date | None:
        raw = blank_to_none(self.follow_up_date)
        if raw is None:
            return None
        if isinstance(raw, date):
            return raw
        try:
            return date.fromisoformat(str(raw)[:10])
        except ValueError:
            return None

    def cross_field_errors(self) -> dict[str, str]:
        if self.follow_up_required and self.parsed_follow_up_date() is None:
            return {"followUpDate": self.FIELD_MESSAGES["followUpDate"]}
        return {}

    def to_payload(self, record_id: int | None = None) -> dict[str, Any]:
        payload = {
            "injuryID": self.injury_id,
            "treatmentDate": self.treatment_date.isoformat(),
            "treatmentType": self.treatment_type.value,
            "provider": self.provider,
            "facility": self.facility,
            "notes": self.notes,
            "result": self.result,
            "recommendations": self.recommendations,
            "followUpRequired": self.follow_up_required,
        }
        if self.follow_up_required:
            payload["followUpDate"] = self.parsed_follow_up_date().isoformat()
        if record_id is not None:
            payload["treatmentID"] = record_id
        return payload
