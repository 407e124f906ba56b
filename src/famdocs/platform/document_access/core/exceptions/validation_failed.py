"""Validation failed exceptions.

ONLY input validation - per-field issues mapped onto the originating input
field, and the fail-fast missing-version case.

Following maximum separation architecture - one file = one purpose.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence

from .....config.constants import ErrorCodes
from .....core.exceptions import ValidationError
from ..value_objects import ResourceKey


@dataclass(frozen=True)
class FieldIssue:
    """A single validation issue for one input field."""

    field: str
    issue: str


class ValidationFailed(ValidationError):
    """Raised when input fails validation.

    Carries ``issues`` as ``FieldIssue`` pairs so forms can map each issue
    onto its field; callers without a form show ``message``.
    """

    def __init__(
        self,
        message: str,
        issues: Optional[Sequence[FieldIssue]] = None,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.issues: List[FieldIssue] = list(issues or [])
        enhanced_details = details or {}
        if self.issues:
            enhanced_details["issues"] = [
                {"field": issue.field, "issue": issue.issue} for issue in self.issues
            ]
        super().__init__(
            message=message,
            error_code=error_code or ErrorCodes.VALIDATION_FAILED,
            details=enhanced_details
        )

    @classmethod
    def for_field(cls, field: str, issue: str, message: Optional[str] = None) -> 'ValidationFailed':
        return cls(message or issue, issues=[FieldIssue(field, issue)])

    def issues_by_field(self) -> Dict[str, List[str]]:
        """Group issue texts by field name."""
        grouped: Dict[str, List[str]] = {}
        for issue in self.issues:
            grouped.setdefault(issue.field, []).append(issue.issue)
        return grouped


class MissingVersionToken(ValidationFailed):
    """Raised before any I/O when a mutation has no observed version.

    This is a programming error in the caller: the resource was never read
    or its token was discarded after a rejected write.
    """

    def __init__(self, resource_key: ResourceKey):
        super().__init__(
            f"A version token is required to modify {resource_key}. Reload it and try again.",
            issues=[FieldIssue("version", "Version token is required")],
            error_code=ErrorCodes.VERSION_REQUIRED,
            details={"resource": str(resource_key)}
        )
        self.resource_key = resource_key
