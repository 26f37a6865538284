"""
DTOs for injury add/edit forms.
"""

from datetime import date
from typing import Any, ClassVar

from pydantic import Field, field_validator

from injury_tracker.dtos.form_base import FormModel, blank_to_none
from injury_tracker.entities.enums import (
    BodyPart,
    InjurySeverity,
    InjuryStatus,
    InjuryType,
)


class InjuryForm(FormModel):
    """Validated injury form input."""

    athlete_id: int = Field(..., gt=0, alias="athleteID")
    injury_type: InjuryType = Field(..., alias="injuryType")
    body_part: BodyPart = Field(..., alias="bodyPart")
    date_occurred: date = Field(..., alias="dateOccurred")
    severity: InjurySeverity | None = Field(default=None, alias="severity")
    status: InjuryStatus = Field(..., alias="status")
    description: str = Field(default="", alias="description")
    treatment_notes: str = Field(default="", alias="treatmentNotes")
    expected_recovery_date: date | None = Field(
        default=None, alias="expectedRecoveryDate"
    )

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {
        "athleteID": "Please select an athlete.",
        "injuryType": "Please select an injury type.",
        "bodyPart": "Please select a body part.",
        "dateOccurred": "Date is required.",
        "severity": "Please select a valid severity.",
        "status": "Please select a status.",
        "expectedRecoveryDate": "Expected recovery date must be a valid date.",
    }
    DEFAULTS: ClassVar[dict[str, Any]] = {
        "athleteID": "",
        "injuryType": "",
        "bodyPart": "",
        "dateOccurred": "",
        "severity": "",
        "description": "",
        "status": "",
        "treatmentNotes": "",
        "expectedRecoveryDate": "",
    }
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("dateOccurred", "expectedRecoveryDate")

    @field_validator(
        "athlete_id",
        "injury_type",
        "body_part",
        "date_occurred",
        "severity",
        "status",
        "expected_recovery_date",
        mode="before",
    )
    @classmethod
    def _blank(cls, value):
        return blank_to_none(value)

    @field_validator("description", "treatment_notes", mode="before")
    @classmethod
    def _optional_text(cls, value):
        return "" if value is None else value

    def to_payload(self, record_id: int | None = None) -> dict[str, Any]:
        payload = {
            "athleteID": self.athlete_id,
            "injuryType": self.injury_type.value,
            "bodyPart": self.body_part.value,
            "dateOccurred": self.date_occurred.isoformat(),
            "severity": self.severity.value if self.severity else "",
            "description": self.description,
            "status": self.status.value,
            "treatmentNotes": self.treatment_notes,
            "expectedRecoveryDate": (
                self.expected_recovery_date.isoformat()
                if self.expected_recovery_date
                else None
            ),
        }
        if record_id is not None:
            payload["injuryID"] = record_id
        return payload
