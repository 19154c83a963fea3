from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Dict, List, Union
from datetime import datetime

from velonix.models.registration import split_events


# Messages shown next to each form field, keyed by the wire (camelCase) name
FIELD_MESSAGES: Dict[str, str] = {
    "fullName": "Full name is required",
    "collegeName": "College name is required",
    "department": "Department is required",
    "year": "Year is required",
    "email": "Invalid email address",
    "phone": "Invalid phone number",
    "selectedEvents": "Select at least one event",
    "transactionId": "Valid transaction ID is required",
}


class RegistrationCreate(BaseModel):
    """Applicant-supplied fields of a registration"""
    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    full_name: str = Field(..., min_length=3, max_length=255, alias="fullName")
    college_name: str = Field(..., min_length=3, max_length=255, alias="collegeName")
    department: str = Field(..., min_length=2, max_length=255)
    year: str = Field(..., min_length=1, max_length=16)
    email: EmailStr
    phone: str = Field(..., min_length=10, max_length=32)
    selected_events: str = Field(..., alias="selectedEvents")
    transaction_id: str = Field(..., min_length=6, max_length=128, alias="transactionId")

    @field_validator("selected_events", mode="before")
    @classmethod
    def normalize_events(cls, v: Union[str, List[str]]) -> str:
        """Accept a list or a comma-joined string; keep order, drop blanks"""
        if isinstance(v, (list, tuple)):
            names = [str(name).strip() for name in v if str(name).strip()]
        elif isinstance(v, str):
            names = split_events(v)
        else:
            raise ValueError("selectedEvents must be a string or a list")
        if not names:
            raise ValueError("at least one event must be selected")
        return ", ".join(names)

    @property
    def event_names(self) -> List[str]:
        return split_events(self.selected_events)


class RegistrationResponse(BaseModel):
    """Registration as returned to the admin dashboard"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str = Field(serialization_alias="fullName")
    college_name: str = Field(serialization_alias="collegeName")
    department: str
    year: str
    email: str
    phone: str
    selected_events: str = Field(serialization_alias="selectedEvents")
    transaction_id: str = Field(serialization_alias="transactionId")
    screenshot_path: str = Field(serialization_alias="screenshotPath")
    status: str
    timestamp: datetime

    @field_validator("status", mode="before")
    @classmethod
    def status_value(cls, v):
        return getattr(v, "value", v)


class SubmissionResponse(BaseModel):
    success: bool = True
    registration_id: str = Field(serialization_alias="registrationId")
    qr_code_data: str = Field(serialization_alias="qrCodeData")


class StatusUpdateRequest(BaseModel):
    id: str
    status: str


class StatusUpdateResponse(BaseModel):
    success: bool = True


class RegistrationStats(BaseModel):
    total: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    event_counts: Dict[str, int] = Field(default_factory=dict, serialization_alias="eventCounts")
