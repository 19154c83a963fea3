from fastapi import APIRouter

from velonix.api.endpoints import admin, admin_auth, public, registrations

api_router = APIRouter()

api_router.include_router(admin_auth.router, tags=["Admin Auth"])
api_router.include_router(registrations.router, tags=["Registrations"])
api_router.include_router(admin.router, tags=["Admin Review"])
api_router.include_router(public.router, tags=["Public"])
