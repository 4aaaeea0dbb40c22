from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError, ResponseValidationError
from fastapi.responses import JSONResponse, RedirectResponse
from pydantic import ValidationError
from starlette.middleware.base import BaseHTTPMiddleware
import logging
from typing import Optional, Sequence, Any

from app.config import settings
from app.schemas.result import Error, Result, ErrorCategory
from app.schemas.auth import Principal
from app.core.exception import CustomException
from app.core.edge import DEFAULT_RULES, EdgeDecision, EdgeRule, evaluate_path
from app.utils.security import decode_access_token

logger = logging.getLogger(__name__)


def create_error_response(error: Error) -> JSONResponse:
    """Create standardized JSON error response"""
    return JSONResponse(
        status_code=error.status_code,
        content=Result.failure(error).model_dump(mode="json"),
    )


async def custom_exception_handler(request: Request, ex: CustomException) -> JSONResponse:
    """
    Render application exceptions raised inside route handlers.

    FastAPI resolves HTTPException subclasses before they reach any
    middleware, so this handler is registered on the app directly.
    """
    error = Error.from_exception(ex)
    response = create_error_response(error)
    if ex.headers:
        response.headers.update(ex.headers)
    return response


class ExceptionHandlingMiddleware(BaseHTTPMiddleware):
    """
    Centralized exception handling middleware for consistent API responses.
    Catches all exceptions and transforms them into standardized Result objects.
    """

    def __init__(self, app, log_internal_errors: bool = True):
        super().__init__(app)
        self.log_internal_errors = log_internal_errors
        self._register_handlers()

    def _register_handlers(self):
        """Register exception type to handler method mappings"""
        self.EXCEPTION_HANDLERS = {
            CustomException: self._handle_custom_exception,
            ValidationError: self._handle_validation_error,
            RequestValidationError: self._handle_validation_error,
            ResponseValidationError: self._handle_validation_error,
            HTTPException: self._handle_http_exception,
        }

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as ex:
            return await self._handle_exception(ex, request)

    async def _handle_exception(self, ex: Exception, request: Request) -> JSONResponse:
        """
        Route exception to the appropriate handler.

        All registered handlers are expected to be asynchronous (async def).
        """
        for exc_type, handler in self.EXCEPTION_HANDLERS.items():
            if isinstance(ex, exc_type):
                return await handler(ex, request)

        # Default to internal server error
        return await self._handle_unhandled_exception(ex, request)

    async def _handle_custom_exception(
        self, ex: CustomException, request: Request
    ) -> JSONResponse:
        """Handle custom application exceptions"""
        return await custom_exception_handler(request, ex)

    async def _handle_validation_error(
        self,
        ex: ValidationError | RequestValidationError | ResponseValidationError,
        request: Request,
    ) -> JSONResponse:
        """Handle Pydantic validation errors"""
        validation_message = self._format_validation_error(ex.errors())
        error = Error(
            message=validation_message,
            status_code=422,
            category=ErrorCategory.VALIDATION,
        )
        return create_error_response(error)

    async def _handle_http_exception(
        self, ex: HTTPException, request: Request
    ) -> JSONResponse:
        """Handle FastAPI HTTP exceptions"""
        category = self._infer_category_from_status(ex.status_code)

        error = Error(
            message=ex.detail if isinstance(ex.detail, str) else str(ex.detail),
            status_code=ex.status_code,
            category=category,
        )
        return create_error_response(error)

    async def _handle_unhandled_exception(
        self, ex: Exception, request: Request
    ) -> JSONResponse:
        """Handle unexpected exceptions"""
        if self.log_internal_errors:
            logger.error(
                f"Unhandled exception on {request.method} {request.url.path}",
                exc_info=ex,
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "client": request.client.host if request.client else None,
                },
            )

        # Don't expose internal error details in production
        error = Error(
            message="An unexpected error occurred. Please try again later.",
            status_code=500,
            category=ErrorCategory.INTERNAL,
        )
        return create_error_response(error)

    def _format_validation_error(self, errors: Sequence[Any]) -> str:
        """Format validation errors into human-readable message"""
        messages = []
        for error in errors:
            loc = " -> ".join(str(loc) for loc in error.get("loc", []))
            msg = error.get("msg", "Unknown error")
            error_type = error.get("type", "unknown")

            messages.append(f"Error in {loc}: {msg} (type: {error_type})")

        return "; ".join(messages) if messages else "Validation failed"

    def _infer_category_from_status(self, status_code: int) -> ErrorCategory:
        """Infer error category from HTTP status code"""
        status_category_map = {
            401: ErrorCategory.AUTHENTICATION,
            403: ErrorCategory.AUTHORIZATION,
            404: ErrorCategory.NOT_FOUND,
            409: ErrorCategory.RESOURCE_CONFLICT,
            422: ErrorCategory.VALIDATION,
        }
        if status_code in status_category_map:
            return status_category_map[status_code]
        elif 400 <= status_code < 500:
            return ErrorCategory.BAD_REQUEST
        elif status_code >= 500:
            return ErrorCategory.INTERNAL
        else:
            return ErrorCategory.CUSTOM


def principal_from_request(request: Request) -> Optional[Principal]:
    """
    Read the principal from the bearer token (header first, then cookie).

    Signature and expiry are verified; the database is not consulted.
    """
    token = None
    authorization = request.headers.get("Authorization")
    if authorization:
        scheme, _, credentials = authorization.partition(" ")
        if scheme.lower() == "bearer" and credentials:
            token = credentials
    if token is None:
        token = request.cookies.get(settings.ACCESS_TOKEN_COOKIE)
    if not token:
        return None
    return Principal.from_token_payload(decode_access_token(token))


class EdgeAuthMiddleware(BaseHTTPMiddleware):
    """
    Coarse path-prefix gate that runs before routing.

    Redirects to the sign-in page when a protected prefix is requested
    without a principal, and to the unauthorized page when the role is too
    low. Everything else passes through untouched.
    """

    def __init__(
        self,
        app,
        rules: Sequence[EdgeRule] = DEFAULT_RULES,
        sign_in_path: Optional[str] = None,
        unauthorized_path: Optional[str] = None,
    ):
        super().__init__(app)
        self.rules = tuple(rules)
        self.sign_in_path = sign_in_path or settings.SIGN_IN_PATH
        self.unauthorized_path = unauthorized_path or settings.UNAUTHORIZED_PATH

    async def dispatch(self, request: Request, call_next):
        path = request.url.path
        principal = principal_from_request(request)
        decision = evaluate_path(path, principal, self.rules)

        if decision == EdgeDecision.SIGN_IN:
            logger.info("Edge redirect to sign-in for %s", path)
            return RedirectResponse(url=self.sign_in_path, status_code=307)

        if decision == EdgeDecision.UNAUTHORIZED:
            logger.info(
                "Edge redirect to unauthorized for %s (user %s, role %s)",
                path, principal.user_id, principal.role.value
            )
            return RedirectResponse(url=self.unauthorized_path, status_code=307)

        return await call_next(request)
