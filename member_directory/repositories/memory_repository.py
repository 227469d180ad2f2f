# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository: in-memory member documents.
Used when no DATABASE_URL is configured, and as the store in tests.

Each call holds the store lock for its own duration only; a lookup followed
by a write from the service is still two separate calls.
"""

import copy
import threading
import uuid
from typing import Any

from member_directory.repositories.base import MemberDocument, StoreError


class InMemoryMemberStore:
    """Dict-backed document collection; iteration order is insertion order."""

    def __init__(self) -> None:
        self._store: dict[str, dict[str, Any]] = {}
        self._lock = threading.RLock()

    # ── Read ──

    def query_equal(self, field_name: str, value: Any, limit: int) -> list[MemberDocument]:
        matches: list[MemberDocument] = []
        with self._lock:
            for member_id, fields in list(self._store.items()):
                if len(matches) >= limit:
                    break
                if field_name in fields and fields[field_name] == value:
                    matches.append(MemberDocument(id=member_id, fields=copy.deepcopy(fields)))
        return matches

    def get(self, member_id: str) -> MemberDocument | None:
        with self._lock:
            fields = self._store.get(member_id)
            if fields is None:
                return None
            return MemberDocument(id=member_id, fields=copy.deepcopy(fields))

    def count(self) -> int:
        with self._lock:
            return len(self._store)

    # ── Write ──

    def insert(self, fields: dict[str, Any]) -> str:
        member_id = str(uuid.uuid4())
        document = copy.deepcopy(fields)
        with self._lock:
            self._store[member_id] = document
        return member_id

    def update_by_id(self, member_id: str, partial: dict[str, Any]) -> None:
        patch = copy.deepcopy(partial)
        with self._lock:
            current = self._store.get(member_id)
            if current is None:
                raise StoreError(f"No document to update: {member_id}")
            current.update(patch)

    def delete_by_id(self, member_id: str) -> None:
        with self._lock:
            self._store.pop(member_id, None)

    # ── Bulk / internal ──

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def verify_connection(self) -> int:
        return self.count()
