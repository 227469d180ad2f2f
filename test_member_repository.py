# type: ignore
"""
Tests for the member stores
===========================
SqlMemberStore against SQLite in-memory, and the in-memory store's
document semantics.

Run:  pytest test_member_repository.py -v
"""
import threading
from datetime import datetime, timedelta, timezone

import pytest

from member_directory.core.database import build_engine
from member_directory.models.domain import MemberErrorKind, MemberWorkflowError
from member_directory.repositories.base import StoreError
from member_directory.repositories.member_repository import SqlMemberStore
from member_directory.repositories.memory_repository import InMemoryMemberStore
from member_directory.services.member_service import MemberService

T0 = datetime(2026, 2, 10, 12, 0, 0, tzinfo=timezone.utc)


def _fields(**overrides):
    base = {"name": "Jimin", "email": "jimin@example.com", "created_at": T0}
    base.update(overrides)
    return base


@pytest.fixture
def sql_store():
    store = SqlMemberStore(build_engine("sqlite://"))
    store.create_schema()
    yield store
    store.dispose()


# ══════════════════════════════════════════════════════════════════════════
# SQL STORE
# ══════════════════════════════════════════════════════════════════════════
class TestSqlMemberStore:
    def test_insert_then_query(self, sql_store):
        member_id = sql_store.insert(_fields())
        docs = sql_store.query_equal("name", "Jimin", limit=1)
        assert len(docs) == 1
        assert docs[0].id == member_id
        assert docs[0].fields == _fields()

    def test_created_at_comes_back_timezone_aware(self, sql_store):
        sql_store.insert(_fields())
        created_at = sql_store.query_equal("name", "Jimin", limit=1)[0].fields["created_at"]
        assert created_at.tzinfo is not None
        assert created_at == T0

    def test_generated_ids_are_distinct(self, sql_store):
        first = sql_store.insert(_fields())
        second = sql_store.insert(_fields())
        assert first != second
        assert sql_store.count() == 2

    def test_limit_caps_results(self, sql_store):
        for _ in range(3):
            sql_store.insert(_fields())
        assert len(sql_store.query_equal("name", "Jimin", limit=1)) == 1
        assert len(sql_store.query_equal("name", "Jimin", limit=10)) == 3

    def test_query_no_match(self, sql_store):
        sql_store.insert(_fields())
        assert sql_store.query_equal("name", "Nobody", limit=1) == []

    def test_query_by_email(self, sql_store):
        sql_store.insert(_fields())
        assert len(sql_store.query_equal("email", "jimin@example.com", limit=1)) == 1

    def test_query_on_unknown_field_raises(self, sql_store):
        with pytest.raises(StoreError):
            sql_store.query_equal("nickname", "JM", limit=1)

    def test_update_merges_columns_and_extra_fields(self, sql_store):
        member_id = sql_store.insert(_fields())
        sql_store.update_by_id(member_id, {"email": "new@x.com", "nickname": "JM"})
        sql_store.update_by_id(member_id, {"team": "blue"})
        fields = sql_store.query_equal("name", "Jimin", limit=1)[0].fields
        assert fields["email"] == "new@x.com"
        assert fields["nickname"] == "JM"
        assert fields["team"] == "blue"
        assert fields["created_at"] == T0

    def test_update_created_at_from_iso_string(self, sql_store):
        member_id = sql_store.insert(_fields())
        sql_store.update_by_id(member_id, {"created_at": "2020-01-01T00:00:00Z"})
        fields = sql_store.query_equal("name", "Jimin", limit=1)[0].fields
        assert fields["created_at"] == datetime(2020, 1, 1, tzinfo=timezone.utc)

    def test_update_created_at_garbage_raises(self, sql_store):
        member_id = sql_store.insert(_fields())
        with pytest.raises(StoreError):
            sql_store.update_by_id(member_id, {"created_at": "yesterday"})

    def test_update_missing_id_raises(self, sql_store):
        with pytest.raises(StoreError, match="No document to update"):
            sql_store.update_by_id("does-not-exist", {"email": "a@b.com"})

    def test_delete(self, sql_store):
        member_id = sql_store.insert(_fields())
        sql_store.delete_by_id(member_id)
        assert sql_store.count() == 0

    def test_delete_missing_id_is_noop(self, sql_store):
        sql_store.insert(_fields())
        sql_store.delete_by_id("does-not-exist")
        assert sql_store.count() == 1

    def test_database_errors_become_store_errors(self):
        store = SqlMemberStore(build_engine("sqlite://"))  # schema never created
        with pytest.raises(StoreError, match="no such table"):
            store.query_equal("name", "Jimin", limit=1)
        with pytest.raises(StoreError):
            store.insert(_fields())
        with pytest.raises(StoreError):
            store.verify_connection()

    @pytest.mark.parametrize("created_at", [
        "2026-02-10T20:00:00+09:00",
        datetime(2026, 2, 10, 20, 0, 0, tzinfo=timezone(timedelta(hours=9))),
    ])
    def test_offset_created_at_stored_as_utc(self, sql_store, created_at):
        member_id = sql_store.insert(_fields())
        sql_store.update_by_id(member_id, {"created_at": created_at})
        fields = sql_store.query_equal("name", "Jimin", limit=1)[0].fields
        assert fields["created_at"] == datetime(2026, 2, 10, 11, 0, 0, tzinfo=timezone.utc)
        assert fields["created_at"].utcoffset() == timedelta(0)

    def test_insert_with_offset_created_at(self, sql_store):
        sql_store.insert(_fields(created_at=datetime(2026, 2, 10, 7, 0, 0, tzinfo=timezone(timedelta(hours=-5)))))
        fields = sql_store.query_equal("name", "Jimin", limit=1)[0].fields
        assert fields["created_at"] == T0

    @pytest.mark.parametrize("millis", [int(T0.timestamp() * 1000), T0.timestamp() * 1000])
    def test_update_created_at_from_epoch_millis(self, sql_store, millis):
        member_id = sql_store.insert(_fields(created_at=T0 + timedelta(days=1)))
        sql_store.update_by_id(member_id, {"created_at": millis})
        assert sql_store.query_equal("name", "Jimin", limit=1)[0].fields["created_at"] == T0

    def test_update_created_at_out_of_range_millis_raises(self, sql_store):
        member_id = sql_store.insert(_fields())
        with pytest.raises(StoreError, match="Invalid created_at"):
            sql_store.update_by_id(member_id, {"created_at": 10**20})

    def test_custom_table_name(self):
        store = SqlMemberStore(build_engine("sqlite://"), table_name="directory_members")
        store.create_schema()
        store.insert(_fields())
        assert store.verify_connection() == 1


# ══════════════════════════════════════════════════════════════════════════
# WORKFLOW OVER THE SQL STORE
# ══════════════════════════════════════════════════════════════════════════
class TestServiceOnSqlStore:
    def test_full_lifecycle(self, sql_store, clock):
        service = MemberService(sql_store, clock=clock)
        created = service.register("Jimin", "jimin@example.com")

        with pytest.raises(MemberWorkflowError) as exc:
            service.remove_by_name("Jimin")
        assert exc.value.kind == MemberErrorKind.TOO_SOON

        service.update_by_name("Jimin", {"email": "new@x.com"})
        member = service.find_by_name("Jimin")
        assert member["id"] == created["id"]
        assert member["email"] == "new@x.com"
        assert member["created_at"] == clock.now

        clock.advance(61)
        service.remove_by_name("Jimin")
        with pytest.raises(MemberWorkflowError) as exc:
            service.find_by_name("Jimin")
        assert exc.value.kind == MemberErrorKind.NOT_FOUND

    def test_offset_created_at_keeps_the_gate_honest(self, sql_store, clock):
        service = MemberService(sql_store, clock=clock)
        service.register("Jimin", "jimin@example.com")
        # 20:00+09:00 is 11:00Z, an hour before the clock's 12:00Z
        service.update_by_name("Jimin", {"created_at": "2026-02-10T20:00:00+09:00"})
        service.remove_by_name("Jimin")
        assert sql_store.count() == 0

    def test_missing_table_is_store_failure(self, clock):
        service = MemberService(SqlMemberStore(build_engine("sqlite://")), clock=clock)
        with pytest.raises(MemberWorkflowError) as exc:
            service.register("Jimin", "jimin@example.com")
        assert exc.value.kind == MemberErrorKind.STORE_FAILURE
        assert "no such table" in exc.value.detail


# ══════════════════════════════════════════════════════════════════════════
# IN-MEMORY STORE
# ══════════════════════════════════════════════════════════════════════════
class TestInMemoryMemberStore:
    def test_results_are_copies(self):
        store = InMemoryMemberStore()
        member_id = store.insert(_fields())
        store.query_equal("name", "Jimin", 1)[0].fields["email"] = "tampered@x.com"
        assert store.get(member_id).fields["email"] == "jimin@example.com"

    def test_insertion_order_decides_first_match(self):
        store = InMemoryMemberStore()
        first = store.insert(_fields(email="first@x.com"))
        store.insert(_fields(email="second@x.com"))
        assert store.query_equal("name", "Jimin", 1)[0].id == first

    def test_query_on_extra_field(self):
        store = InMemoryMemberStore()
        member_id = store.insert(_fields(nickname="JM"))
        assert store.query_equal("nickname", "JM", 1)[0].id == member_id

    def test_update_missing_id_raises(self):
        with pytest.raises(StoreError):
            InMemoryMemberStore().update_by_id("nope", {"email": "a@b.com"})

    def test_delete_missing_id_is_noop(self):
        store = InMemoryMemberStore()
        store.delete_by_id("nope")
        assert store.count() == 0

    def test_clear(self):
        store = InMemoryMemberStore()
        store.insert(_fields())
        store.insert(_fields(created_at=T0 + timedelta(seconds=1)))
        store.clear()
        assert store.verify_connection() == 0


# ══════════════════════════════════════════════════════════════════════════
# CONCURRENT ACCESS
# ══════════════════════════════════════════════════════════════════════════
def _run_threads(*targets):
    errors: list = []

    def wrap(fn):
        def run():
            try:
                fn()
            except Exception as exc:
                errors.append(repr(exc))
        return run

    threads = [threading.Thread(target=wrap(fn)) for fn in targets]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=30)
    return errors


class TestInMemoryConcurrency:
    def test_queries_while_inserting_and_deleting(self):
        store = InMemoryMemberStore()
        seeded = [store.insert(_fields(name=f"member-{i}")) for i in range(2000)]

        def writer():
            for i in range(500):
                store.insert(_fields(name=f"new-{i}"))
                store.delete_by_id(seeded[i])

        def reader():
            for _ in range(200):
                assert store.query_equal("name", "nobody", 1) == []

        def patcher():
            for member_id in seeded[1000:1500]:
                store.update_by_id(member_id, {"email": "patched@x.com", "tags": ["a", "b"]})

        errors = _run_threads(writer, patcher, reader, reader, reader, reader)
        assert errors == []
        assert store.count() == 2000

    def test_parallel_register_and_find(self, clock):
        service = MemberService(InMemoryMemberStore(), clock=clock)

        def registrar(prefix):
            def run():
                for i in range(200):
                    service.register(f"{prefix}-{i}", f"{prefix}-{i}@example.com")
            return run

        def finder():
            for i in range(200):
                try:
                    service.find_by_name(f"a-{i}")
                except MemberWorkflowError as exc:
                    assert exc.kind == MemberErrorKind.NOT_FOUND

        errors = _run_threads(registrar("a"), registrar("b"), finder, finder)
        assert errors == []
        assert service.store.count() == 400
        assert service.find_by_name("b-199")["email"] == "b-199@example.com"
