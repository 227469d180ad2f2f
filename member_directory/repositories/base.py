# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Repository contract: the document-store capability MemberService consumes.
"""

from dataclasses import dataclass, field
from typing import Any, Protocol


class StoreError(Exception):
    """Any failure raised by a member store; the message is surfaced as-is."""


@dataclass
class MemberDocument:
    id: str
    fields: dict[str, Any] = field(default_factory=dict)


class MemberStore(Protocol):
    def insert(self, fields: dict[str, Any]) -> str:
        """Store a new document and return its generated id."""
        ...

    def query_equal(self, field_name: str, value: Any, limit: int) -> list[MemberDocument]:
        """Documents whose ``field_name`` equals ``value``; order is store-defined."""
        ...

    def update_by_id(self, member_id: str, partial: dict[str, Any]) -> None:
        """Merge ``partial`` into an existing document. Missing id -> StoreError."""
        ...

    def delete_by_id(self, member_id: str) -> None:
        """Remove a document. Deleting an unknown id is a no-op."""
        ...

    def count(self) -> int:
        ...

    def verify_connection(self) -> int:
        """Round-trip to the backend; returns the document count."""
        ...
