# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Service: member registration, lookup, update and removal.

Every operation looks a member up by exact name, capped to one result, and
acts on whatever the store returns first. Lookup and the follow-up write are
two separate store calls; nothing here locks or retries, so a concurrent
delete between them surfaces as a store failure on update.
"""

from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional

from member_directory.core.logging import get_logger
from member_directory.metrics import MEMBER_OPERATIONS, STORE_FAILURES
from member_directory.models.domain import MemberErrorKind, MemberWorkflowError
from member_directory.repositories.base import MemberDocument, MemberStore, StoreError
from member_directory.services.validators import (
    MIN_MEMBERSHIP_AGE_MS,
    coerce_timestamp,
    has_age_elapsed,
    has_disallowed_script,
    is_valid_email_shape,
)

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class MemberService:
    """Business logic for the member lifecycle."""

    def __init__(
        self,
        store: MemberStore,
        clock: Callable[[], datetime] = _utcnow,
        min_age_ms: int = MIN_MEMBERSHIP_AGE_MS,
    ) -> None:
        self._store = store
        self._clock = clock
        self._min_age_ms = min_age_ms

    @property
    def store(self) -> MemberStore:
        return self._store

    # ── Helpers ──

    def _refuse(self, operation: str, kind: MemberErrorKind, detail: str) -> MemberWorkflowError:
        MEMBER_OPERATIONS.labels(operation=operation, outcome=kind.value).inc()
        return MemberWorkflowError(kind, detail)

    def _store_failure(self, operation: str, exc: Exception) -> MemberWorkflowError:
        STORE_FAILURES.labels(operation=operation).inc()
        logger.error("%s failed in store: %s", operation, exc)
        return self._refuse(operation, MemberErrorKind.STORE_FAILURE, str(exc))

    def _lookup(self, operation: str, name: str) -> MemberDocument:
        try:
            matches = self._store.query_equal("name", name, limit=1)
        except StoreError as exc:
            raise self._store_failure(operation, exc) from exc
        if not matches:
            raise self._refuse(
                operation, MemberErrorKind.NOT_FOUND, f"No member named '{name}'"
            )
        return matches[0]

    # ── Register ──

    def register(self, name: Optional[str], email: Optional[str]) -> dict[str, Any]:
        if not name or not email:
            raise self._refuse(
                "register", MemberErrorKind.MISSING_FIELDS, "Both name and email are required"
            )
        if has_disallowed_script(name):
            raise self._refuse(
                "register", MemberErrorKind.DISALLOWED_SCRIPT,
                "Name must not contain Korean characters",
            )
        if not is_valid_email_shape(email):
            raise self._refuse(
                "register", MemberErrorKind.INVALID_EMAIL_SHAPE,
                "Email must contain '@'",
            )

        try:
            member_id = self._store.insert({
                "name": name,
                "email": email,
                "created_at": self._clock(),
            })
        except StoreError as exc:
            raise self._store_failure("register", exc) from exc

        MEMBER_OPERATIONS.labels(operation="register", outcome="ok").inc()
        logger.info("Member registered id=%s name=%s", member_id, name)
        return {"id": member_id, "message": "Member registered"}

    # ── Find ──

    def find_by_name(self, name: Optional[str]) -> dict[str, Any]:
        if not name:
            raise self._refuse(
                "find", MemberErrorKind.MISSING_NAME, "A member name is required"
            )
        member = self._lookup("find", name)
        MEMBER_OPERATIONS.labels(operation="find", outcome="ok").inc()
        return {"id": member.id, **member.fields}

    # ── Update ──

    def update_by_name(self, name: Optional[str], updates: Optional[Mapping[str, Any]]) -> dict[str, Any]:
        """
        Merge ``updates`` into the first member named ``name``.
        Only ``email`` is checked; any other field, ``name`` and
        ``created_at`` included, is written as given.
        """
        if not name or not updates or not isinstance(updates, Mapping):
            raise self._refuse(
                "update", MemberErrorKind.MISSING_PARAMETERS,
                "A member name and the fields to update are required",
            )
        if "email" in updates and not is_valid_email_shape(updates["email"]):
            raise self._refuse(
                "update", MemberErrorKind.INVALID_EMAIL_SHAPE,
                "Email must contain '@'",
            )

        member = self._lookup("update", name)
        try:
            self._store.update_by_id(member.id, dict(updates))
        except StoreError as exc:
            raise self._store_failure("update", exc) from exc

        MEMBER_OPERATIONS.labels(operation="update", outcome="ok").inc()
        logger.info("Member updated id=%s fields=%s", member.id, sorted(updates))
        return {"message": "Member updated"}

    # ── Remove ──

    def remove_by_name(self, name: Optional[str]) -> dict[str, Any]:
        if not name:
            raise self._refuse(
                "remove", MemberErrorKind.MISSING_NAME, "A member name is required"
            )
        member = self._lookup("remove", name)

        try:
            created_at = coerce_timestamp(member.fields.get("created_at"))
        except ValueError as exc:
            raise self._store_failure("remove", exc) from exc

        if not has_age_elapsed(created_at, self._min_age_ms, self._clock()):
            logger.warning("Removal refused for id=%s: registered less than %d ms ago",
                           member.id, self._min_age_ms)
            raise self._refuse(
                "remove", MemberErrorKind.TOO_SOON,
                f"A member can only be removed {self._min_age_ms // 1000} seconds after registering",
            )

        try:
            self._store.delete_by_id(member.id)
        except StoreError as exc:
            raise self._store_failure("remove", exc) from exc

        MEMBER_OPERATIONS.labels(operation="remove", outcome="ok").inc()
        logger.info("Member removed id=%s name=%s", member.id, name)
        return {"message": "Member removed"}
