# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""Repository package."""
from member_directory.repositories.base import MemberDocument, MemberStore, StoreError
from member_directory.repositories.member_repository import SqlMemberStore
from member_directory.repositories.memory_repository import InMemoryMemberStore

__all__ = ["MemberDocument", "MemberStore", "StoreError", "SqlMemberStore", "InMemoryMemberStore"]
