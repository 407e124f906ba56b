"""Map store responses onto document access exceptions.

ONLY status and error-body translation. Callers branch on exception types,
never on status codes or message text.

Following maximum separation architecture - one file = one purpose.
"""

import logging
from typing import Optional

from pydantic import ValidationError as PydanticValidationError

from .....config.constants import ErrorCodes
from .....core.exceptions import TransportError
from ...core.exceptions import (
    FieldIssue,
    MissingVersionToken,
    NotFound,
    PermissionDenied,
    PreconditionFailed,
    ValidationFailed,
)
from ...core.protocols import TransportResponse
from ...core.value_objects import ResourceKey
from ..models import ApiErrorPayload

logger = logging.getLogger(__name__)


def parse_error_body(response: TransportResponse) -> ApiErrorPayload:
    """Parse ``{error: {code, details}, message}``; unknown shapes fall back to defaults."""
    body = response.body
    if isinstance(body, dict):
        try:
            return ApiErrorPayload.model_validate(body)
        except PydanticValidationError:
            logger.debug(f"Unrecognized error body for status {response.status_code}: {body!r}")
    if isinstance(body, str) and body:
        return ApiErrorPayload(message=body)
    return ApiErrorPayload()


def raise_for_response(response: TransportResponse, resource_key: Optional[ResourceKey] = None) -> None:
    """Raise the matching exception for a failed response.

    Raises:
        PreconditionFailed: 412
        MissingVersionToken: 428, the store demanded a version that was not sent
        ValidationFailed: 400 and 422, with field issues when the body has them
        PermissionDenied: 403
        NotFound: 404
        TransportError: Any other failure status
    """
    if response.ok:
        return

    status = response.status_code
    payload = parse_error_body(response)
    details = {"status_code": status, "server_code": payload.error.code}

    if status == 412:
        raise PreconditionFailed(resource_key=resource_key, details=details)
    if status == 428 and resource_key is not None:
        raise MissingVersionToken(resource_key)
    if status in (400, 422):
        issues = [FieldIssue(item.field, item.issue) for item in payload.error.details]
        raise ValidationFailed(payload.message, issues=issues, details=details)
    if status == 403:
        raise PermissionDenied(payload.message, details=details)
    if status == 404:
        raise NotFound(payload.message, resource_key=resource_key, details=details)

    logger.error(f"Document service returned {status} for {resource_key}: {payload.message}")
    raise TransportError(payload.message, status_code=status, error_code=ErrorCodes.TRANSPORT_ERROR, details=details)


def validation_failed_from_pydantic(exc: PydanticValidationError, message: Optional[str] = None) -> ValidationFailed:
    """Convert local model validation errors into ``ValidationFailed``."""
    issues = []
    for error in exc.errors():
        field = ".".join(str(part) for part in error.get("loc", ())) or "general"
        issues.append(FieldIssue(field, error.get("msg", "Invalid value")))
    return ValidationFailed(message or "Invalid input", issues=issues)


def malformed_response(exc: PydanticValidationError, what: str) -> TransportError:
    """A 2xx response whose body does not match the expected schema."""
    logger.error(f"Malformed {what} response: {exc.error_count()} error(s)")
    return TransportError(
        f"Malformed {what} response from document service",
        error_code=ErrorCodes.TRANSPORT_ERROR,
        details={"errors": exc.error_count()},
    )
