"""
Admin review endpoints - every route requires an admin bearer token.
"""
from datetime import datetime
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from typing import List

from velonix.api.dependencies import get_current_admin, get_review_service
from velonix.schemas.auth import AdminIdentity
from velonix.schemas.registration import (
    RegistrationResponse,
    RegistrationStats,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from velonix.services.review_service import ReviewService

router = APIRouter(prefix="/admin")


@router.get("/registrations", response_model=List[RegistrationResponse])
async def list_registrations(
    service: ReviewService = Depends(get_review_service),
    admin: AdminIdentity = Depends(get_current_admin),
):
    """All registrations, newest first"""
    return await service.list_registrations()


@router.get("/registrations/export")
async def export_registrations(
    service: ReviewService = Depends(get_review_service),
    admin: AdminIdentity = Depends(get_current_admin),
):
    """Download every registration as CSV"""
    content = await service.export_csv()
    filename = f"velonix_registrations_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}.csv"
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/registrations/{registration_id}", response_model=RegistrationResponse)
async def get_registration(
    registration_id: str,
    service: ReviewService = Depends(get_review_service),
    admin: AdminIdentity = Depends(get_current_admin),
):
    """Look up one registration, e.g. from a scanned ticket"""
    return await service.get_registration(registration_id)


@router.post("/update-status", response_model=StatusUpdateResponse)
async def update_status(
    payload: StatusUpdateRequest,
    service: ReviewService = Depends(get_review_service),
    admin: AdminIdentity = Depends(get_current_admin),
):
    await service.update_status(payload.id, payload.status, admin_username=admin.username)
    return StatusUpdateResponse(success=True)


@router.get("/stats", response_model=RegistrationStats)
async def get_stats(
    service: ReviewService = Depends(get_review_service),
    admin: AdminIdentity = Depends(get_current_admin),
):
    """Totals, per-status counts and per-event counts"""
    return await service.compute_stats()
