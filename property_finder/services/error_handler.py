"""
Error envelope for every failed request.

Whatever goes wrong, the client receives::

    {"error": {"code", "message", "timestamp", "request_id", "details"?}}

``code`` is the machine-readable part. Search requests add two codes of their
own: ``INVALID_FILTER`` (422) when page or pageSize is below 1, and
``STORAGE_UNAVAILABLE`` (503) when the property store cannot be read. Request
validation failures carry one ``details`` entry per offending field.
"""

from typing import Dict, Any, Optional, List, Sequence
from datetime import datetime, timezone
from fastapi import Request, HTTPException
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError, IntegrityError
from property_finder.utils.exceptions import APIException
import logging
import uuid

logger = logging.getLogger(__name__)


class ErrorHandlerService:
    """
    Turns exceptions into error envelopes.

    Each response gets a short request id that also appears in the log line,
    so a client report can be matched to the server log. 4xx responses are
    logged as warnings; 5xx responses as errors, with the traceback for
    database and unexpected failures.
    """

    @staticmethod
    def format_error_response(
        error_code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        request_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """
        Build the envelope body. ``details`` and ``request_id`` are omitted
        when empty.
        """
        error: Dict[str, Any] = {
            "code": error_code,
            "message": message,
            "timestamp": ErrorHandlerService._get_current_timestamp(),
        }
        if details:
            error["details"] = details
        if request_id:
            error["request_id"] = request_id
        return {"error": error}

    @staticmethod
    def _respond(
        status_code: int,
        error_code: str,
        message: str,
        request_id: str,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None
    ) -> JSONResponse:
        body = ErrorHandlerService.format_error_response(error_code, message, details, request_id)
        return JSONResponse(status_code=status_code, content=jsonable_encoder(body), headers=headers)

    @staticmethod
    def handle_api_exception(
        exception: APIException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Render one of the application's own exceptions.

        The status, code and headers come from the exception, for example
        ``WWW-Authenticate`` on 401s. ``ValidationError`` subclasses such as
        ``InvalidFilterError`` contribute their field errors as ``details``.

        Args:
            exception: Raised API exception
            request: Request being served, used for the log line

        Returns:
            Error envelope response
        """
        request_id = ErrorHandlerService._generate_request_id()
        log = logger.error if exception.status_code >= 500 else logger.warning
        log(
            f"API error [{request_id}] {exception.error_code} on "
            f"{request.url.path if request else '-'}: {exception.detail}"
        )

        return ErrorHandlerService._respond(
            exception.status_code,
            exception.error_code or "API_ERROR",
            exception.detail,
            request_id,
            details=getattr(exception, "field_errors", None),
            headers=exception.headers,
        )

    @staticmethod
    def handle_validation_error(
        errors: Sequence[Dict[str, Any]],
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Render request or model validation errors as ``VALIDATION_ERROR`` (422).

        Each detail names the field by its location joined with ``" -> "``,
        e.g. ``query -> minPrice``, together with the message, error type and
        rejected input.
        """
        request_id = ErrorHandlerService._generate_request_id()

        details = [
            {
                "field": " -> ".join(str(loc) for loc in error["loc"]),
                "message": error["msg"],
                "type": error["type"],
                "input": error.get("input"),
            }
            for error in errors
        ]

        logger.warning(
            f"Validation error [{request_id}] on {request.url.path if request else '-'}: "
            f"{len(details)} field errors"
        )

        return ErrorHandlerService._respond(422, "VALIDATION_ERROR", "Request validation failed", request_id, details)

    @staticmethod
    def handle_database_error(
        exception: SQLAlchemyError,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """
        Render a database error that escaped the repositories.

        Constraint violations become ``INTEGRITY_ERROR`` (409); anything else
        becomes ``DATABASE_ERROR`` (500). Search reads never get here, since
        the property store raises ``StorageUnavailableError`` instead.
        """
        request_id = ErrorHandlerService._generate_request_id()

        if isinstance(exception, IntegrityError):
            status_code, error_code, message = 409, "INTEGRITY_ERROR", "Data integrity constraint violation"
        else:
            status_code, error_code, message = 500, "DATABASE_ERROR", "Database operation failed"

        logger.error(
            f"Database error [{request_id}] {error_code} on {request.url.path if request else '-'}: {exception}",
            exc_info=exception
        )

        return ErrorHandlerService._respond(status_code, error_code, message, request_id)

    @staticmethod
    def handle_http_exception(
        exception: HTTPException,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Render framework HTTP errors, such as unknown routes, as ``HTTP_<status>``."""
        request_id = ErrorHandlerService._generate_request_id()

        logger.warning(
            f"HTTP error [{request_id}] {exception.status_code} on "
            f"{request.url.path if request else '-'}: {exception.detail}"
        )

        return ErrorHandlerService._respond(
            exception.status_code,
            f"HTTP_{exception.status_code}",
            str(exception.detail),
            request_id,
            headers=getattr(exception, "headers", None),
        )

    @staticmethod
    def handle_unexpected_error(
        exception: Exception,
        request: Optional[Request] = None
    ) -> JSONResponse:
        """Render any other exception as ``INTERNAL_SERVER_ERROR`` (500) without leaking its text."""
        request_id = ErrorHandlerService._generate_request_id()

        logger.error(
            f"Unexpected error [{request_id}] {type(exception).__name__} on "
            f"{request.url.path if request else '-'}: {exception}",
            exc_info=exception
        )

        return ErrorHandlerService._respond(
            500,
            "INTERNAL_SERVER_ERROR",
            "An unexpected error occurred. Please try again later.",
            request_id,
        )

    @staticmethod
    def _generate_request_id() -> str:
        return uuid.uuid4().hex[:8]

    @staticmethod
    def _get_current_timestamp() -> str:
        """Current UTC time in ISO 8601 with a ``Z`` suffix."""
        return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
