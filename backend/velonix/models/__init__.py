# Re-export all models for convenient imports
from velonix.models.registration import Registration, RegistrationStatus
from velonix.models.admin import AdminUser

__all__ = [
    "Registration",
    "RegistrationStatus",
    "AdminUser",
]
