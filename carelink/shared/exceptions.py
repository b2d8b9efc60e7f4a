from typing import Dict, Optional
from fastapi import HTTPException, status


class CareLinkException(HTTPException):
    """Base for errors surfaced to API clients with a fixed status code."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    headers: Optional[Dict[str, str]] = None

    def __init__(self, detail: Optional[str] = None):
        super().__init__(
            status_code=type(self).status_code,
            detail=detail or self.default_detail,
            headers=type(self).headers,
        )


class CredentialsException(CareLinkException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"
    headers = {"WWW-Authenticate": "Bearer"}


class ForbiddenException(CareLinkException):
    """Authenticated, but the role or hospital does not permit the action."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You do not have access to this resource"


class NotFoundException(CareLinkException):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"


class BadRequestException(CareLinkException):
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = "Bad request"


class ConflictException(CareLinkException):
    """A write that lost against the current document state."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = "The record was changed by someone else"


class InvalidTransitionException(BadRequestException):
    """Status change that the entity's state machine does not allow."""

    def __init__(self, entity: str, current: str, target: str):
        super().__init__(f"Cannot move {entity} from '{current}' to '{target}'")
        self.current = current
        self.target = target
