"""
Shared behaviour for the add/edit form DTOs.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, ValidationError

from injury_tracker.core.errors import FormValidationError


def blank_to_none(value: Any) -> Any:
    """Form widgets submit "" for untouched optional inputs."""
    if isinstance(value, str) and value.strip() == "":
        return None
    return value


def date_input_value(value: Any) -> str:
    """Truncate a stored date/datetime to the ``YYYY-MM-DD`` a date input expects."""
    if value is None or value == "":
        return ""
    if isinstance(value, (date, datetime)):
        return value.isoformat()[:10]
    return str(value)[:10]


def display_date(value: Any) -> str:
    """Date shown on read-only views; missing dates read "N/A"."""
    return date_input_value(value) or "N/A"


class FormModel(BaseModel):
    """
    Base for form DTOs.

    Subclasses declare camelCase aliases matching the UI field names, a
    ``FIELD_MESSAGES`` table of human-readable errors, and the defaults a
    blank form starts from.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=False)

    FIELD_MESSAGES: ClassVar[dict[str, str]] = {}
    DEFAULTS: ClassVar[dict[str, Any]] = {}
    DATE_FIELDS: ClassVar[tuple[str, ...]] = ()

    @classmethod
    def blank_values(cls) -> dict[str, Any]:
        return dict(cls.DEFAULTS)

    @classmethod
    def values_from_record(cls, record: dict) -> dict[str, Any]:
        """Form values for editing *record*; missing fields fall back to defaults."""
        values = cls.blank_values()
        for name in values:
            raw = record.get(name)
            if name in cls.DATE_FIELDS:
                values[name] = date_input_value(raw)
            elif raw is not None:
                values[name] = raw
        return values

    @classmethod
    def parse_form(cls, values: dict[str, Any]):
        """
        Validate raw form values.

        Raises:
            FormValidationError: with one message per offending field
        """
        try:
            form = cls.model_validate(values)
        except ValidationError as exc:
            raise FormValidationError(cls._field_errors(exc)) from exc
        extra = form.cross_field_errors()
        if extra:
            raise FormValidationError(extra)
        return form

    @classmethod
    def _field_errors(cls, exc: ValidationError) -> dict[str, str]:
        errors: dict[str, str] = {}
        for err in exc.errors():
            field = str(err["loc"][0]) if err["loc"] else "__form__"
            errors.setdefault(field, cls.FIELD_MESSAGES.get(field, err["msg"]))
        return errors

    def cross_field_errors(self) -> dict[str, str]:
        return {}

    def to_payload(self, record_id: int | None = None) -> dict[str, Any]:
        raise NotImplementedError
