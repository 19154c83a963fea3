from fastapi import APIRouter, Depends

from velonix.api.dependencies import get_dispatcher, get_email_service
from velonix.core.config import settings
from velonix.core.event_catalog import NON_TECHNICAL_EVENTS, TECHNICAL_EVENTS
from velonix.core.logging_config import logger
from velonix.schemas.public import ContactMessage, EventCatalogResponse, EventItem
from velonix.services.email_service import EmailService
from velonix.services.notification_dispatcher import NotificationDispatcher

router = APIRouter()


@router.get("/events", response_model=EventCatalogResponse)
async def list_events():
    """Event catalog and payment details for the registration form"""
    return EventCatalogResponse(
        technical=[EventItem(**event.to_dict()) for event in TECHNICAL_EVENTS],
        non_technical=[EventItem(**event.to_dict()) for event in NON_TECHNICAL_EVENTS],
        registration_fee=settings.REGISTRATION_FEE,
        upi_id=settings.PAYMENT_UPI_ID,
    )


@router.post("/contact")
async def contact(
    payload: ContactMessage,
    email_service: EmailService = Depends(get_email_service),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Forward a contact message; always reports success"""
    if email_service.is_configured:
        dispatcher.enqueue(
            "contact",
            lambda: email_service.send_contact_message(payload.name, payload.email, payload.message),
        )
    else:
        logger.info("[Contact] SMTP not configured, contact message not forwarded")
    return {"success": True}
