"""
Custom Exceptions for the VELONIX registration backend
======================================================

Raise these from services instead of HTTPException so the same code can be
driven from tests and scripts. The API layer maps them to responses in
`velonix.main` using `http_status` and `to_dict()`.

Usage:
    from velonix.core.exceptions import RegistrationNotFoundError

    if not registration:
        raise RegistrationNotFoundError(registration_id)
"""

from typing import Optional, Any, Dict


class VelonixError(Exception):
    """Base exception for all VELONIX errors"""

    http_status: int = 500

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details
        }


# ============================================
# Authentication & Authorization Errors
# ============================================

class AuthenticationError(VelonixError):
    """Admin authentication failed"""

    http_status = 401

    def __init__(self, message: str = "Authentication failed", code: str = "AUTH_FAILED"):
        super().__init__(message, code=code)


class InvalidCredentialsError(AuthenticationError):
    """Username or password did not match; never says which"""

    def __init__(self):
        super().__init__("Invalid credentials", code="INVALID_CREDENTIALS")


class UnauthorizedError(AuthenticationError):
    """Bearer token missing, malformed, expired or forged"""

    def __init__(self):
        super().__init__("Unauthorized", code="UNAUTHORIZED")


# ============================================
# Resource Errors (404-type)
# ============================================

class ResourceNotFoundError(VelonixError):
    """Base class for not found errors"""

    http_status = 404

    def __init__(self, resource_type: str, resource_id: str):
        super().__init__(
            f"{resource_type} with ID '{resource_id}' not found",
            code=f"{resource_type.upper()}_NOT_FOUND",
            details={"resource_type": resource_type, "resource_id": resource_id}
        )


class RegistrationNotFoundError(ResourceNotFoundError):
    """Registration not found"""

    def __init__(self, registration_id: str):
        super().__init__("Registration", registration_id)


# ============================================
# Validation Errors (400-type)
# ============================================

class ValidationError(VelonixError):
    """Input validation failed"""

    http_status = 400

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        fields: Optional[Dict[str, str]] = None
    ):
        details: Dict[str, Any] = {}
        if fields:
            details["fields"] = fields
        elif field:
            details["fields"] = {field: message}
        super().__init__(message, code="VALIDATION_ERROR", details=details)

    @property
    def fields(self) -> Dict[str, str]:
        return self.details.get("fields", {})


class InvalidStatusError(ValidationError):
    """Requested registration status is not part of the lifecycle"""

    def __init__(self, status: str, allowed: list):
        super().__init__(
            f"Invalid status '{status}'. Allowed: {', '.join(allowed)}",
            field="status"
        )
        self.code = "INVALID_STATUS"
        self.details["allowed_statuses"] = allowed


class InvalidFileTypeError(ValidationError):
    """File type not allowed"""

    def __init__(self, file_type: str, allowed_types: list):
        super().__init__(
            f"File type '{file_type}' not allowed. Allowed: {', '.join(allowed_types)}",
            field="screenshot"
        )
        self.code = "INVALID_FILE_TYPE"
        self.details.update({"file_type": file_type, "allowed_types": allowed_types})


class FileTooLargeError(ValidationError):
    """Uploaded file exceeds MAX_UPLOAD_SIZE"""

    def __init__(self, size: int, max_size: int):
        super().__init__(
            f"File too large: {size} bytes (max {max_size})",
            field="screenshot"
        )
        self.code = "FILE_TOO_LARGE"
        self.details.update({"size": size, "max_size": max_size})


# ============================================
# Storage / Submission Errors (500-type)
# ============================================

class StorageError(VelonixError):
    """Upload storage operation failed"""

    def __init__(self, message: str):
        super().__init__(message, code="STORAGE_ERROR")


class SubmissionFailedError(VelonixError):
    """Registration could not be persisted"""

    def __init__(self, message: str = "Registration failed"):
        super().__init__(message, code="SUBMISSION_FAILED")


# ============================================
# Helper function for API responses
# ============================================

def error_response(error: VelonixError) -> Dict[str, Any]:
    """
    Convert exception to API error response body.

    Server-side errors only ever expose a generic message; the full message
    is expected to be logged by the caller.
    """
    if error.http_status >= 500:
        generic = "Registration failed" if isinstance(error, SubmissionFailedError) else "Internal server error"
        return {"error": generic, "code": error.code}

    body: Dict[str, Any] = {"error": error.message, "code": error.code}
    if error.details:
        body["details"] = error.details
    return body
