# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""FastAPI dependency injection wiring."""
from member_directory.core.config import settings
from member_directory.core.database import build_engine
from member_directory.repositories.base import MemberStore
from member_directory.repositories.member_repository import SqlMemberStore
from member_directory.repositories.memory_repository import InMemoryMemberStore
from member_directory.services.member_service import MemberService


def build_store() -> MemberStore:
    if settings.DATABASE_URL:
        return SqlMemberStore(build_engine(settings.DATABASE_URL), settings.MEMBERS_TABLE)
    return InMemoryMemberStore()


_store = build_store()
_service = MemberService(_store)


def get_member_store() -> MemberStore:
    return _store


def get_member_service() -> MemberService:
    return _service
