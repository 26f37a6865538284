"""
Unit tests for the add/edit form lifecycle and the form DTOs.
"""
import pytest
from datetime import date

from injury_tracker.core.errors import FormValidationError
from injury_tracker.dtos.athlete_dto import AthleteForm
from injury_tracker.dtos.form_base import date_input_value, display_date
from injury_tracker.dtos.injury_dto import InjuryForm
from injury_tracker.dtos.treatment_dto import TreatmentForm
from injury_tracker.entities.registry import ATHLETE, INJURY, TREATMENT
from injury_tracker.repositories.registry_repo import repository_for
from injury_tracker.services import navigation
from injury_tracker.services.form_service import FormService, FormState


def _service(backend, descriptor, record_id=None, parent_id=None):
    parent = navigation.parent_descriptor(descriptor)
    return FormService(
        descriptor,
        repository_for(descriptor.kind, backend),
        parent_repo=repository_for(parent.kind, backend) if parent else None,
        record_id=record_id,
        parent_id=parent_id,
    )


VALID_ATHLETE = {
    "firstName": "Al",
    "lastName": "Zed",
    "dateOfBirth": "2001-01-01",
    "sport": "Tennis",
    "jerseyNumber": "",
    "status": "Active",
}

VALID_INJURY = {
    "injuryType": "Strain",
    "bodyPart": "Thigh",
    "dateOccurred": "2024-05-01",
    "status": "Active",
}


# ---------------------------------------------------------------------------
# DTOs
# ---------------------------------------------------------------------------


class TestAthleteForm:
    def test_blank_jersey_number_becomes_zero(self):
        form = AthleteForm.parse_form(VALID_ATHLETE)
        assert form.jersey_number == 0
        assert form.to_payload()["jerseyNumber"] == 0

    def test_required_fields_reported_by_ui_name(self):
        with pytest.raises(FormValidationError) as excinfo:
            AthleteForm.parse_form({**VALID_ATHLETE, "firstName": " ", "dateOfBirth": ""})
        assert excinfo.value.field_errors == {
            "firstName": "First name is required.",
            "dateOfBirth": "Date of birth is required.",
        }

    def test_negative_jersey_number_rejected(self):
        with pytest.raises(FormValidationError) as excinfo:
            AthleteForm.parse_form({**VALID_ATHLETE, "jerseyNumber": "-3"})
        assert "jerseyNumber" in excinfo.value.field_errors

    def test_edit_payload_carries_id(self):
        payload = AthleteForm.parse_form(VALID_ATHLETE).to_payload(5)
        assert payload["athleteID"] == 5
        assert payload["dateOfBirth"] == "2001-01-01"

    def test_status_optional(self):
        payload = AthleteForm.parse_form({**VALID_ATHLETE, "status": ""}).to_payload()
        assert payload["status"] == ""


class TestInjuryForm:
    def test_optional_recovery_date_sent_as_null(self):
        payload = InjuryForm.parse_form({**VALID_INJURY, "athleteID": "1"}).to_payload()
        assert payload["expectedRecoveryDate"] is None
        assert payload["severity"] == ""
        assert payload["athleteID"] == 1

    def test_unknown_option_rejected(self):
        with pytest.raises(FormValidationError) as excinfo:
            InjuryForm.parse_form({**VALID_INJURY, "athleteID": 1, "bodyPart": "Tail"})
        assert excinfo.value.field_errors == {"bodyPart": "Please select a body part."}

    def test_missing_athlete(self):
        with pytest.raises(FormValidationError) as excinfo:
            InjuryForm.parse_form({**VALID_INJURY, "athleteID": ""})
        assert excinfo.value.field_errors["athleteID"] == "Please select an athlete."


class TestTreatmentForm:
    BASE = {"injuryID": 10, "treatmentDate": "2024-03-05", "treatmentType": "Rest"}

    def test_stray_follow_up_date_is_dropped(self):
        form = TreatmentForm.parse_form(
            {**self.BASE, "followUpRequired": False, "followUpDate": "garbage"}
        )
        assert "followUpDate" not in form.to_payload()

    def test_follow_up_date_required_when_ticked(self):
        with pytest.raises(FormValidationError) as excinfo:
            TreatmentForm.parse_form({**self.BASE, "followUpRequired": True, "followUpDate": ""})
        assert list(excinfo.value.field_errors) == ["followUpDate"]

    def test_follow_up_date_sent_when_ticked(self):
        form = TreatmentForm.parse_form(
            {**self.BASE, "followUpRequired": "true", "followUpDate": "2024-03-12T00:00:00"}
        )
        assert form.to_payload(20)["followUpDate"] == "2024-03-12"
        assert form.to_payload(20)["treatmentID"] == 20

    def test_result_accepts_free_text(self):
        form = TreatmentForm.parse_form({**self.BASE, "result": "Feeling better"})
        assert form.to_payload()["result"] == "Feeling better"


class TestDateInputValue:
    def test_truncates_datetimes(self):
        assert date_input_value("2024-03-01T00:00:00") == "2024-03-01"
        assert date_input_value(date(2024, 3, 1)) == "2024-03-01"
        assert date_input_value(None) == ""

    def test_display_marks_missing_dates(self):
        assert display_date(None) == "N/A"
        assert display_date("2024-03-01T00:00:00") == "2024-03-01"


# ---------------------------------------------------------------------------
# Form service
# ---------------------------------------------------------------------------


class TestFormLoad:
    @pytest.mark.asyncio
    async def test_add_form_loads_parent_options(self, seeded_backend):
        svc = _service(seeded_backend, INJURY)
        await svc.load()
        assert svc.state == FormState.editing
        labels = [opt.label for opt in svc.parent_options]
        assert labels == ["Ann, Jo", "Bee, Bo"]

    @pytest.mark.asyncio
    async def test_context_prefills_and_locks_foreign_key(self, seeded_backend):
        svc = _service(seeded_backend, INJURY, parent_id=7)
        await svc.load()
        view = svc.to_view()
        assert view.values["athleteID"] == 7
        field = next(f for f in view.fields if f.name == "athleteID")
        assert field.disabled is True
        assert view.cancel_href == "/athletes/7"
        assert view.context == {"athleteId": 7}

    @pytest.mark.asyncio
    async def test_edit_form_loads_record_with_date_inputs(self, seeded_backend):
        svc = _service(seeded_backend, INJURY, record_id=10)
        await svc.load()
        assert svc.values["dateOccurred"] == "2024-03-01"
        assert svc.values["injuryType"] == "Sprain"
        assert svc.values["athleteID"] == 1

    @pytest.mark.asyncio
    async def test_treatment_form_resolves_injury_details(self, seeded_backend):
        svc = _service(seeded_backend, TREATMENT, parent_id=10)
        await svc.load()
        assert svc.parent_details["injuryID"] == 10
        assert svc.parent_options[0].label == "Sprain - Ankle (Jo Ann)"

    @pytest.mark.asyncio
    async def test_submission_load_skips_options(self, seeded_backend):
        svc = _service(seeded_backend, TREATMENT, record_id=20)
        await svc.load(with_options=False)
        assert svc.loaded is True
        assert svc.parent_options == []
        assert not seeded_backend.called("GET", "/injuries")
        assert not seeded_backend.called("GET", "/injuries/10")

    @pytest.mark.asyncio
    async def test_load_options_follows_chosen_injury(self, seeded_backend):
        svc = _service(seeded_backend, TREATMENT)
        await svc.load(with_options=False)
        await svc.submit({"injuryID": "11"})
        await svc.load_options()
        assert [opt.value for opt in svc.parent_options] == [10, 11]
        assert svc.parent_details["bodyPart"] == "Wrist"

    @pytest.mark.asyncio
    async def test_load_options_tolerates_failure(self, seeded_backend):
        seeded_backend.fail("GET", "/athletes")
        svc = _service(seeded_backend, INJURY)
        await svc.load(with_options=False)
        await svc.load_options()
        assert svc.parent_options == []
        assert svc.error is None

    @pytest.mark.asyncio
    async def test_load_failure(self, seeded_backend):
        seeded_backend.fail("GET", "/athletes")
        svc = _service(seeded_backend, INJURY)
        await svc.load()
        assert svc.state == FormState.failed
        assert svc.error.message == "Failed to load athletes. Please try again later."


class TestFormSubmit:
    @pytest.mark.asyncio
    async def test_failed_record_load_blocks_submit(self, seeded_backend):
        seeded_backend.fail("GET", "/athletes/2")
        svc = _service(seeded_backend, ATHLETE, record_id=2)
        await svc.load(with_options=False)
        assert svc.state == FormState.failed
        ok = await svc.submit(
            {"firstName": "Bo", "lastName": "Bee", "dateOfBirth": "1998-11-02"}
        )
        assert ok is False
        assert svc.state == FormState.failed
        assert svc.redirect_to is None
        assert not seeded_backend.called("PUT", "/athletes/2")
        assert seeded_backend.tables["athletes"][1]["sport"] == "Rugby"

    @pytest.mark.asyncio
    async def test_failed_option_load_blocks_submit(self, seeded_backend):
        seeded_backend.fail("GET", "/athletes")
        svc = _service(seeded_backend, INJURY)
        await svc.load()
        assert await svc.submit({**VALID_INJURY, "athleteID": 1}) is False
        assert not seeded_backend.called("POST", "/injuries")

    @pytest.mark.asyncio
    async def test_submit_after_failed_submission_retries(self, seeded_backend):
        seeded_backend.fail("POST", "/athletes")
        svc = _service(seeded_backend, ATHLETE)
        await svc.load()
        assert await svc.submit(VALID_ATHLETE) is False
        seeded_backend.failures.clear()
        assert await svc.submit({}) is True
        assert svc.state == FormState.navigate

    @pytest.mark.asyncio
    async def test_validation_failure_never_reaches_backend(self, seeded_backend):
        svc = _service(seeded_backend, ATHLETE)
        await svc.load()
        ok = await svc.submit({**VALID_ATHLETE, "lastName": ""})
        assert ok is False
        assert svc.state == FormState.editing
        assert svc.field_errors == {"lastName": "Last name is required."}
        assert not seeded_backend.called("POST", "/athletes")

    @pytest.mark.asyncio
    async def test_add_athlete_navigates_to_list(self, seeded_backend):
        svc = _service(seeded_backend, ATHLETE)
        await svc.load()
        assert await svc.submit(VALID_ATHLETE) is True
        assert svc.state == FormState.navigate
        assert svc.redirect_to == "/athletes"
        assert seeded_backend.tables["athletes"][-1]["jerseyNumber"] == 0

    @pytest.mark.asyncio
    async def test_add_injury_in_context_uses_context_athlete(self, seeded_backend):
        svc = _service(seeded_backend, INJURY, parent_id=2)
        await svc.load()
        assert await svc.submit({**VALID_INJURY, "athleteID": 1}) is True
        created = seeded_backend.tables["injuries"][-1]
        assert created["athleteID"] == 2
        assert svc.redirect_to == f"/injuries/{created['injuryID']}"

    @pytest.mark.asyncio
    async def test_edit_treatment_sends_put_and_opens_detail(self, seeded_backend):
        svc = _service(seeded_backend, TREATMENT, record_id=20)
        await svc.load()
        assert await svc.submit({"followUpRequired": False}) is True
        method, path, payload = seeded_backend.calls[-1]
        assert (method, path) == ("PUT", "/treatments/20")
        assert payload["treatmentID"] == 20
        assert "followUpDate" not in payload
        assert svc.redirect_to == "/treatments/20"

    @pytest.mark.asyncio
    async def test_backend_failure_keeps_values(self, seeded_backend):
        seeded_backend.fail("POST", "/athletes")
        svc = _service(seeded_backend, ATHLETE)
        await svc.load()
        assert await svc.submit(VALID_ATHLETE) is False
        assert svc.state == FormState.failed
        assert svc.values["firstName"] == "Al"
        assert svc.error.message == "Failed to add athlete. Please try again later."

    @pytest.mark.asyncio
    async def test_create_without_id_falls_back_to_list(self, seeded_backend, monkeypatch):
        svc = _service(seeded_backend, INJURY)
        await svc.load()
        monkeypatch.setattr(svc.repo, "create", lambda payload: None)
        assert await svc.submit({**VALID_INJURY, "athleteID": 1}) is True
        assert svc.redirect_to == "/injuries"
