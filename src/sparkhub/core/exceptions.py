"""Workflow error taxonomy and exception handlers with request_id in responses."""

from typing import Any

from asgi_correlation_id import correlation_id
from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from src.sparkhub.core.logging import get_logger
from src.sparkhub.core.metrics import CONSISTENCY_ERRORS

logger = get_logger(__name__)


class WorkflowError(Exception):
    """Base class for errors returned to callers of the supervision workflow.

    Every subclass carries a machine-readable ``kind`` and an HTTP status so the
    API layer can render it without knowing the concrete type.
    """

    kind: str = "workflow_error"
    status_code: int = status.HTTP_400_BAD_REQUEST
    default_detail: str = "The operation could not be completed"

    def __init__(self, detail: str | None = None, **context: Any) -> None:
        self.detail = detail or self.default_detail
        self.context = context
        super().__init__(self.detail)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "detail": self.detail}


class FieldValidationError(WorkflowError):
    """Malformed input. The caller can fix it and retry."""

    kind = "validation_error"
    status_code = 422
    default_detail = "Some fields are invalid"

    def __init__(
        self,
        detail: str | None = None,
        errors: dict[str, str] | None = None,
        **context: Any,
    ) -> None:
        super().__init__(detail, **context)
        self.errors = errors or {}

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["errors"] = self.errors
        return data


class AlreadyExistsError(WorkflowError):
    kind = "already_exists"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "You already have an idea. Delete it before creating a new one."


class DuplicatePendingError(WorkflowError):
    kind = "duplicate_pending"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "You already have a pending request"


class InvalidStateError(WorkflowError):
    kind = "invalid_state"
    status_code = status.HTTP_409_CONFLICT
    default_detail = "This idea is not awaiting review"


class ForbiddenError(WorkflowError):
    kind = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = "You are not allowed to perform this action"


class NotFoundError(WorkflowError):
    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = "Not found"


class OwnerBusyError(WorkflowError):
    """Another operation for the same owner held the lock for too long. Retryable."""

    kind = "owner_busy"
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Another change to this idea is in progress, please retry"


class ConsistencyError(WorkflowError):
    """A two-record transition was only partially applied by the storage layer.

    Never retried by callers; surfaced to operators through the alert log and
    the consistency error counter.
    """

    kind = "consistency_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "The change could not be applied consistently"


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure exception handlers that include request_id in responses."""

    @app.exception_handler(StarletteHTTPException)
    async def starlette_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={
                "detail": exc.detail,
                "request_id": correlation_id.get(),
            },
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors: dict[str, str] = {}
        for error in exc.errors():
            loc = [str(part) for part in error.get("loc", ()) if part != "body"]
            errors.setdefault(".".join(loc) or "body", error.get("msg", "Invalid value"))
        body = FieldValidationError(errors=errors).to_dict()
        return JSONResponse(
            status_code=FieldValidationError.status_code,
            content={**body, "request_id": correlation_id.get()},
        )

    @app.exception_handler(WorkflowError)
    async def workflow_exception_handler(request: Request, exc: WorkflowError) -> JSONResponse:
        request_id = correlation_id.get()
        if isinstance(exc, ConsistencyError):
            CONSISTENCY_ERRORS.inc()
            logger.critical(
                "Supervision workflow consistency violation",
                alert=True,
                request_id=request_id,
                path=request.url.path,
                detail=exc.detail,
                **exc.context,
            )
        else:
            logger.info(
                "Workflow request rejected",
                kind=exc.kind,
                detail=exc.detail,
                path=request.url.path,
            )
        headers = {"Retry-After": "1"} if isinstance(exc, OwnerBusyError) else None
        return JSONResponse(
            status_code=exc.status_code,
            content={**exc.to_dict(), "request_id": request_id},
            headers=headers,
        )

    @app.exception_handler(Exception)
    async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        request_id = correlation_id.get()
        logger.exception(
            "Unhandled exception",
            exc_info=exc,
            request_id=request_id,
            path=request.url.path,
        )
        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error",
                "request_id": request_id,
            },
        )
