# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Domain models — pure data structures, NO FastAPI dependency.
"""

from enum import Enum


class MemberErrorKind(str, Enum):
    """Every way a member operation can be refused."""

    MISSING_FIELDS = "missing_fields"
    MISSING_NAME = "missing_name"
    MISSING_PARAMETERS = "missing_parameters"
    DISALLOWED_SCRIPT = "disallowed_script"
    INVALID_EMAIL_SHAPE = "invalid_email_shape"
    NOT_FOUND = "not_found"
    TOO_SOON = "too_soon"
    STORE_FAILURE = "store_failure"


class MemberWorkflowError(Exception):
    """Raised by MemberService; carries a classified kind and a human message."""

    def __init__(self, kind: MemberErrorKind, detail: str) -> None:
        super().__init__(detail)
        self.kind = kind
        self.detail = detail

    def __repr__(self) -> str:
        return f"MemberWorkflowError({self.kind.value!r}, {self.detail!r})"
