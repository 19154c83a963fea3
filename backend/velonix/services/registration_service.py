"""
Registration Service - accepts applicant submissions

Handles:
- Field validation (nothing is written for an invalid submission)
- Storing the payment screenshot
- Registration id generation and persistence
- QR ticket generation
- Queueing the applicant confirmation and the organiser alert
"""

import secrets
import string
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from velonix.core.exceptions import StorageError, SubmissionFailedError, ValidationError
from velonix.core.logging_config import logger
from velonix.models.registration import Registration, RegistrationStatus
from velonix.schemas.registration import FIELD_MESSAGES, RegistrationCreate
from velonix.services.email_service import EmailService
from velonix.services.notification_dispatcher import NotificationDispatcher
from velonix.services.ticket_service import generate_ticket_png, to_data_uri
from velonix.services.upload_storage import UploadedFile, UploadStorage

REGISTRATION_ID_PREFIX = "VEL-"
REGISTRATION_ID_LENGTH = 9
REGISTRATION_ID_ALPHABET = string.ascii_uppercase + string.digits
MAX_ID_ATTEMPTS = 5

# Pydantic error types that mean "missing or too short" for a form field
_REQUIRED_ERROR_TYPES = {"missing", "string_too_short", "string_type", "value_error"}


@dataclass
class SubmissionResult:
    registration_id: str
    qr_code_data: str
    registration: Registration


def generate_registration_id() -> str:
    """VEL- followed by 9 random uppercase letters/digits (36^9 combinations)"""
    suffix = "".join(secrets.choice(REGISTRATION_ID_ALPHABET) for _ in range(REGISTRATION_ID_LENGTH))
    return REGISTRATION_ID_PREFIX + suffix


def validate_registration(fields: Dict[str, Any]) -> RegistrationCreate:
    """
    Validate raw form fields.

    Raises:
        ValidationError with a message per offending field (camelCase keys)
    """
    try:
        return RegistrationCreate.model_validate(fields)
    except PydanticValidationError as e:
        field_errors: Dict[str, str] = {}
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "__root__"
            if field in field_errors:
                continue
            if field in FIELD_MESSAGES and (error["type"] in _REQUIRED_ERROR_TYPES or field == "email"):
                field_errors[field] = FIELD_MESSAGES[field]
            else:
                field_errors[field] = error["msg"]
        raise ValidationError("Invalid registration details", fields=field_errors)


class RegistrationService:
    """Creates registrations; one instance per request session"""

    def __init__(
        self,
        db: AsyncSession,
        storage: UploadStorage,
        dispatcher: NotificationDispatcher,
        email_service: EmailService,
    ):
        self.db = db
        self.storage = storage
        self.dispatcher = dispatcher
        self.email_service = email_service

    async def _new_registration_id(self) -> str:
        for _ in range(MAX_ID_ATTEMPTS):
            candidate = generate_registration_id()
            if await self.db.get(Registration, candidate) is None:
                return candidate
            logger.warning(f"[Registration] Id collision on {candidate}, regenerating")
        raise SubmissionFailedError("Could not allocate a unique registration id")

    async def submit(self, fields: Dict[str, Any], upload: Optional[UploadedFile] = None) -> SubmissionResult:
        """
        Validate, persist and acknowledge a registration.

        The screenshot is written before the row is inserted; if the insert
        then fails the file is left behind.

        Raises:
            ValidationError: bad fields or upload, nothing was written
            SubmissionFailedError: storage or database failure
        """
        data = validate_registration(fields)
        if upload is not None:
            self.storage.validate(upload)

        try:
            registration_id = await self._new_registration_id()
            screenshot_path = await self.storage.save(upload) if upload is not None else ""

            registration = Registration(
                id=registration_id,
                full_name=data.full_name,
                college_name=data.college_name,
                department=data.department,
                year=data.year,
                email=str(data.email),
                phone=data.phone,
                selected_events=data.selected_events,
                transaction_id=data.transaction_id,
                screenshot_path=screenshot_path,
                status=RegistrationStatus.PENDING,
            )
            self.db.add(registration)
            await self.db.commit()
            await self.db.refresh(registration)
        except StorageError as e:
            logger.log_error_with_context(e, context="registration upload")
            raise SubmissionFailedError()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.log_error_with_context(e, context="registration insert")
            raise SubmissionFailedError()

        ticket_png = generate_ticket_png(registration.id)
        logger.log_registration_event(
            "submitted",
            registration.id,
            events=data.event_names,
            has_screenshot=bool(registration.screenshot_path),
        )

        self._queue_notifications(registration, ticket_png)

        return SubmissionResult(
            registration_id=registration.id,
            qr_code_data=to_data_uri(ticket_png),
            registration=registration,
        )

    def _queue_notifications(self, registration: Registration, ticket_png: bytes) -> None:
        if not self.email_service.is_configured:
            logger.info(f"[Registration] SMTP not configured, no emails for {registration.id}")
            return

        # Capture plain values so the jobs don't touch the ORM object later
        reg_id = registration.id
        email = registration.email
        full_name = registration.full_name
        college = registration.college_name
        events = registration.selected_events
        txn = registration.transaction_id
        screenshot = registration.screenshot_path

        self.dispatcher.enqueue(
            f"confirmation:{reg_id}",
            lambda: self.email_service.send_registration_confirmation(
                to_email=email,
                full_name=full_name,
                registration_id=reg_id,
                college_name=college,
                selected_events=events,
                transaction_id=txn,
                ticket_png=ticket_png,
            ),
        )
        self.dispatcher.enqueue(
            f"admin-alert:{reg_id}",
            lambda: self.email_service.send_admin_alert(
                registration_id=reg_id,
                full_name=full_name,
                college_name=college,
                selected_events=events,
                transaction_id=txn,
                screenshot_path=screenshot,
            ),
        )
