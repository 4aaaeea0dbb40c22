from fastapi import HTTPException
from typing import Any, Optional
from app.schemas.result import ErrorCategory


class CustomException(HTTPException):
    """Base class for errors rendered into the Result envelope"""

    def __init__(
        self,
        message: str,
        status_code: int,
        category: ErrorCategory,
        headers: Optional[dict] = None
    ):
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.category = category


class ResourceNotFoundException(CustomException):
    """A user, association, application or event does not exist"""

    def __init__(self, resource_name: str, identifier: Optional[Any] = None, field: str = "ID"):
        if identifier is not None:
            message = f"{resource_name} with {field} '{identifier}' was not found."
        else:
            message = f"{resource_name} was not found."

        super().__init__(
            message=message,
            status_code=404,
            category=ErrorCategory.NOT_FOUND
        )


class AuthenticationException(CustomException):
    """No usable principal: missing, invalid or expired token, or a blocked account"""

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(
            message=message,
            status_code=401,
            category=ErrorCategory.AUTHENTICATION,
            headers={"WWW-Authenticate": "Bearer"}
        )


class AuthorizationException(CustomException):
    """Authenticated, but not allowed to act on this resource"""

    def __init__(self, message: str = "You do not have permission to perform this action."):
        super().__init__(
            message=message,
            status_code=403,
            category=ErrorCategory.AUTHORIZATION
        )


class MembershipConflictException(CustomException):
    """
    The request would break a membership rule: a second open application,
    a second association, or re-applying after being removed.
    """

    def __init__(self, message: str):
        super().__init__(
            message=message,
            status_code=409,
            category=ErrorCategory.RESOURCE_CONFLICT
        )


class InvalidTransitionException(CustomException):
    """An application cannot take the requested action from its current status"""

    def __init__(self, current_status: str, action: str):
        super().__init__(
            message=f"Cannot {action} an application that is {current_status}.",
            status_code=409,
            category=ErrorCategory.INVALID_TRANSITION
        )
        self.current_status = current_status
        self.action = action


class BadRequestException(CustomException):
    """The request is well-formed but cannot be honoured"""

    def __init__(self, message: str = "The request is invalid or malformed."):
        super().__init__(
            message=message,
            status_code=400,
            category=ErrorCategory.BAD_REQUEST
        )
