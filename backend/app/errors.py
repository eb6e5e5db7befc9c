from __future__ import annotations

from typing import Dict, Optional


class AppError(Exception):
    status_code = 500
    message = "Server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, str]] = None) -> None:
        self.message = message or self.message
        self.errors = errors
        super().__init__(self.message)

    def to_payload(self) -> dict:
        if self.status_code >= 500:
            return {"success": False, "error": "Server error"}
        payload = {"success": False, "error": self.message}
        if self.errors:
            payload["errors"] = self.errors
        return payload


class InvalidRequestError(AppError):
    status_code = 400
    message = "Invalid request"


class PageValidationError(AppError):
    status_code = 400
    message = "Validation failed"

    def __init__(self, errors: Dict[str, str]) -> None:
        super().__init__(errors=errors)


class SlugTakenError(PageValidationError):
    def __init__(self) -> None:
        super().__init__({"slug": "Slug is already taken"})


class NotAuthenticatedError(AppError):
    status_code = 401
    message = "Unauthorized"


class NotAdminError(AppError):
    status_code = 403
    message = "Unauthorized: You do not have admin access"


class PermissionDeniedError(AppError):
    status_code = 403
    message = "Forbidden: missing permission"


class PageNotFoundError(AppError):
    status_code = 404
    message = "Landing page not found"


class InvalidTokenError(AppError):
    status_code = 403
    message = "Unauthorized: Invalid or expired token"


class IdentityProviderError(AppError):
    status_code = 500
    message = "Server error"
