from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from typing import Optional

from velonix.api.dependencies import get_registration_service
from velonix.core.config import settings
from velonix.core.rate_limiter import limiter
from velonix.schemas.registration import SubmissionResponse
from velonix.services.registration_service import RegistrationService
from velonix.services.upload_storage import UploadedFile

router = APIRouter()


@router.post("/register", response_model=SubmissionResponse)
@limiter.limit(settings.REGISTER_RATE_LIMIT)
async def register(
    request: Request,
    fullName: str = Form(""),
    collegeName: str = Form(""),
    department: str = Form(""),
    year: str = Form(""),
    email: str = Form(""),
    phone: str = Form(""),
    selectedEvents: str = Form(""),
    transactionId: str = Form(""),
    screenshot: Optional[UploadFile] = File(None),
    service: RegistrationService = Depends(get_registration_service),
):
    """
    Submit a registration (multipart form).

    Field validation happens in the service so a direct caller gets the same
    per-field errors as the form. The screenshot is read up to the size cap
    only, whatever Content-Length claims.
    """
    upload = None
    if screenshot is not None and screenshot.filename:
        # One byte past the cap is enough for validate() to refuse it
        upload = UploadedFile(
            filename=screenshot.filename,
            content=await screenshot.read(service.storage.max_size + 1),
            content_type=screenshot.content_type,
        )

    result = await service.submit(
        {
            "fullName": fullName,
            "collegeName": collegeName,
            "department": department,
            "year": year,
            "email": email,
            "phone": phone,
            "selectedEvents": selectedEvents,
            "transactionId": transactionId,
        },
        upload,
    )

    return SubmissionResponse(
        success=True,
        registration_id=result.registration_id,
        qr_code_data=result.qr_code_data,
    )
