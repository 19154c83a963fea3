"""
Unit Tests for registration schemas
"""
import pytest
from datetime import datetime
from pydantic import ValidationError

from velonix.models.registration import RegistrationStatus, split_events
from velonix.schemas.registration import (
    RegistrationCreate,
    RegistrationResponse,
    RegistrationStats,
    SubmissionResponse,
)


def _fields(**overrides):
    data = {
        "fullName": "Asha Raman",
        "collegeName": "Velammal Engineering College",
        "department": "CSE",
        "year": "3",
        "email": "asha@example.com",
        "phone": "9876543210",
        "selectedEvents": "Hackathon, Dance",
        "transactionId": "TXN123456",
    }
    data.update(overrides)
    return data


class TestRegistrationCreate:

    def test_valid_registration(self):
        data = RegistrationCreate.model_validate(_fields())

        assert data.full_name == "Asha Raman"
        assert data.selected_events == "Hackathon, Dance"
        assert data.event_names == ["Hackathon", "Dance"]

    def test_whitespace_stripped(self):
        data = RegistrationCreate.model_validate(_fields(fullName="  Asha Raman  "))
        assert data.full_name == "Asha Raman"

    def test_events_accepted_as_list(self):
        data = RegistrationCreate.model_validate(_fields(selectedEvents=["Dance", " Photography "]))
        assert data.selected_events == "Dance, Photography"

    def test_event_names_not_checked_against_catalog(self):
        data = RegistrationCreate.model_validate(_fields(selectedEvents="Hackathon"))
        assert data.event_names == ["Hackathon"]

    @pytest.mark.parametrize("value", ["", "  ", ",", [], [" "]])
    def test_no_events_rejected(self, value):
        with pytest.raises(ValidationError):
            RegistrationCreate.model_validate(_fields(selectedEvents=value))

    @pytest.mark.parametrize("field,value", [
        ("fullName", "Al"),
        ("collegeName", "VE"),
        ("department", "C"),
        ("year", ""),
        ("email", "not-an-email"),
        ("phone", "12345"),
        ("transactionId", "TX1"),
    ])
    def test_field_minimums(self, field, value):
        with pytest.raises(ValidationError) as exc_info:
            RegistrationCreate.model_validate(_fields(**{field: value}))

        assert exc_info.value.errors()[0]["loc"][0] == field


class TestResponses:

    def test_registration_response_uses_camel_case(self):
        response = RegistrationResponse(
            id="VEL-ABC123XYZ",
            full_name="Asha Raman",
            college_name="VEC",
            department="CSE",
            year="3",
            email="asha@example.com",
            phone="9876543210",
            selected_events="Dance",
            transaction_id="TXN123456",
            screenshot_path="/uploads/1-a.png",
            status=RegistrationStatus.APPROVED,
            timestamp=datetime(2026, 1, 15, 10, 30),
        )

        body = response.model_dump(by_alias=True)

        assert body["fullName"] == "Asha Raman"
        assert body["screenshotPath"] == "/uploads/1-a.png"
        assert body["status"] == "approved"

    def test_submission_response(self):
        body = SubmissionResponse(registration_id="VEL-X", qr_code_data="data:image/png;base64,AA==").model_dump(
            by_alias=True
        )
        assert body == {"success": True, "registrationId": "VEL-X", "qrCodeData": "data:image/png;base64,AA=="}

    def test_stats_alias(self):
        body = RegistrationStats(total=1, pending=1, event_counts={"Dance": 1}).model_dump(by_alias=True)
        assert body["eventCounts"] == {"Dance": 1}
        assert body["rejected"] == 0


class TestSplitEvents:

    @pytest.mark.parametrize("value,expected", [
        ("Hackathon, Dance", ["Hackathon", "Dance"]),
        ("Dance,,  ,Photography", ["Dance", "Photography"]),
        ("", []),
        (None, []),
    ])
    def test_split(self, value, expected):
        assert split_events(value) == expected
