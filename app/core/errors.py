# app/core/errors.py
# Error taxonomy shared by services and routers.
# They are HTTPException subclasses, so FastAPI turns them into responses directly.
from typing import Any, Optional

from fastapi import HTTPException, status


class ValidationError(HTTPException):
    """Missing or invalid input"""

    def __init__(self, detail: Any = "Invalid request"):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    def __init__(self, detail: Any = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class ForbiddenError(HTTPException):
    """The requester does not own the resource"""

    def __init__(self, detail: Any = "Access denied"):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UpstreamConfigurationError(HTTPException):
    """
    A dependent integration has not been configured for the tenant.
    The response carries guidance text the admin can act on.
    """

    def __init__(self, error: str, message: Optional[str] = None):
        detail = {"error": error}
        if message:
            detail["message"] = message
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class InternalError(HTTPException):
    def __init__(self, detail: Any = "Internal server error"):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)
