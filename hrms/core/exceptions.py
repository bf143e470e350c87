"""Custom exception classes for the HRMS service."""

from fastapi import HTTPException, status


class HRMSError(Exception):
    """Base exception for the HRMS service."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str = "An error occurred"):
        self.message = message
        super().__init__(self.message)


class AuthenticationError(HRMSError):
    """Raised when authentication fails."""
    status_code = status.HTTP_401_UNAUTHORIZED


class AuthorizationError(HRMSError):
    """Raised when user lacks permission."""
    status_code = status.HTTP_403_FORBIDDEN


class ResourceNotFoundError(HRMSError):
    """Raised when a requested resource is not found."""
    status_code = status.HTTP_404_NOT_FOUND


class ResourceConflictError(HRMSError):
    """Raised when a resource already exists or is still in use."""
    status_code = status.HTTP_409_CONFLICT


class ProtectedResourceError(HRMSError):
    """Raised when a system resource is targeted by a forbidden mutation."""
    status_code = status.HTTP_403_FORBIDDEN


class ValidationError(HRMSError):
    """Raised when input validation fails."""
    pass


# HTTP exception shortcuts
def unauthorized(detail: str = "Not authenticated") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )
