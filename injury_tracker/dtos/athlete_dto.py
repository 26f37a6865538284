"""
DTOs for athlete add/edit forms.
"""

from datetime import date
from typing import Any, ClassVar

from pydantic import Field, field_validator

from injury_tracker.dtos.form_base import FormModel, blank_to_none
from injury_tracker.entities.enums import AthleteStatus


class AthleteForm(FormModel):
    """Validated athlete form input."""

    first_name: str = Field(..., min_length=1, alias="firstName")
    last_name: str = Field(..., min_length=1, alias="lastName")
    date_of_birth: date = Field(..., alias="dateOfBirth")
    sport: str = Field(default="", alias="sport")
    team_name: str = Field(default="", alias="teamName")
    position: str = Field(default="", alias="position")
    jersey_number: int = Field(
        default=0, ge=0, alias="jerseyNumber", description="Empty input submits 0"
    )
    status: AthleteStatus | None = Field(default=None, alias="status")

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {
        "firstName": "First name is required.",
        "lastName": "Last name is required.",
        "dateOfBirth": "Date of birth is required.",
        "jerseyNumber": "Jersey number must be a positive number.",
        "status": "Please select a valid status.",
    }
    DEFAULTS: ClassVar[dict[str, Any]] = {
        "firstName": "",
        "lastName": "",
        "dateOfBirth": "",
        "sport": "",
        "teamName": "",
        "position": "",
        "jerseyNumber": "",
        "status": "",
    }
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ("dateOfBirth",)

    @field_validator("first_name", "last_name", mode="before")
    @classmethod
    def _required_text(cls, value):
        if isinstance(value, str) and not value.strip():
            return ""
        return value

    @field_validator("date_of_birth", "status", mode="before")
    @classmethod
    def _blank(cls, value):
        return blank_to_none(value)

    @field_validator("sport", "team_name", "position", mode="before")
    @classmethod
    def _optional_text(cls, value):
        return "" if value is None else value

    @field_validator("jersey_number", mode="before")
    @classmethod
    def _jersey_default(cls, value):
        if value is None or (isinstance(value, str) and value.strip() == ""):
            return 0
        return value

    def to_payload(self, record_id: int | None = None) -> dict[str, Any]:
        payload = {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "dateOfBirth": self.date_of_birth.isoformat(),
            "sport": self.sport,
            "teamName": self.team_name,
            "position": self.position,
            "jerseyNumber": self.jersey_number,
            "status": self.status.value if self.status else "",
        }
        if record_id is not None:
            payload["athleteID"] = record_id
        return payload
