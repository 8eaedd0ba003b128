"""Mapping of domain and adapter errors to HTTP responses."""

import logfire
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from meet.adapter.error import ProviderError
from meet.domain.error import (
    IdentityError,
    InvalidTransitionError,
    MeetingCreationError,
    NotAuthorizedError,
    NotFoundError,
    StoreUnavailableError,
    ValidationError,
)
from meet.domain.value import IdentityFailureReason
from meet.util.jwt import JWTError

IDENTITY_STATUS: dict[IdentityFailureReason, int] = {
    IdentityFailureReason.EMAIL_ALREADY_REGISTERED: status.HTTP_400_BAD_REQUEST,
    IdentityFailureReason.INVALID_CREDENTIAL_FORMAT: status.HTTP_400_BAD_REQUEST,
    IdentityFailureReason.WEAK_CREDENTIAL: status.HTTP_400_BAD_REQUEST,
    IdentityFailureReason.INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    IdentityFailureReason.TRANSIENT_NETWORK: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _error(status_code: int, error: str, detail: str, **extra) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "detail": detail, **extra},
    )


async def _validation(request: Request, exc: ValidationError) -> JSONResponse:
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "validation_error", str(exc))


async def _invalid_transition(
    request: Request, exc: InvalidTransitionError
) -> JSONResponse:
    return _error(
        status.HTTP_409_CONFLICT,
        "invalid_transition",
        str(exc),
        current_status=exc.current.value,
    )


async def _not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    return _error(status.HTTP_404_NOT_FOUND, "not_found", str(exc))


async def _not_authorized(request: Request, exc: NotAuthorizedError) -> JSONResponse:
    return _error(status.HTTP_403_FORBIDDEN, "not_authorized", str(exc))


async def _identity(request: Request, exc: IdentityError) -> JSONResponse:
    return _error(IDENTITY_STATUS[exc.reason], exc.reason.value, str(exc))


async def _meeting_creation(request: Request, exc: MeetingCreationError) -> JSONResponse:
    return _error(
        status.HTTP_503_SERVICE_UNAVAILABLE,
        "meeting_not_created",
        str(exc),
        invitation_id=str(exc.invitation_id),
    )


async def _store_unavailable(
    request: Request, exc: StoreUnavailableError
) -> JSONResponse:
    logfire.error("Store unavailable", path=request.url.path, error=str(exc))
    return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "store_unavailable", str(exc))


async def _provider(request: Request, exc: ProviderError) -> JSONResponse:
    logfire.error("Identity provider error", path=request.url.path, error=str(exc))
    return _error(status.HTTP_502_BAD_GATEWAY, "provider_error", str(exc))


async def _jwt(request: Request, exc: JWTError) -> JSONResponse:
    return _error(status.HTTP_401_UNAUTHORIZED, "not_authenticated", str(exc))


def register_error_handlers(app: FastAPI) -> None:
    """Install the exception handlers on the application.

    Starlette picks the handler registered for the closest class in the
    exception's MRO, so MeetingCreationError wins over StoreUnavailableError.
    """
    app.add_exception_handler(ValidationError, _validation)
    app.add_exception_handler(InvalidTransitionError, _invalid_transition)
    app.add_exception_handler(NotFoundError, _not_found)
    app.add_exception_handler(NotAuthorizedError, _not_authorized)
    app.add_exception_handler(IdentityError, _identity)
    app.add_exception_handler(MeetingCreationError, _meeting_creation)
    app.add_exception_handler(StoreUnavailableError, _store_unavailable)
    app.add_exception_handler(ProviderError, _provider)
    app.add_exception_handler(JWTError, _jwt)
