# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Data-access layer for members on a SQL database.

Each member is one row. The fields the service knows about live in their
own columns; anything else written through a merge-patch is kept in the
``attributes`` JSON column so the table behaves like a document collection.
"""
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Tuple

from sqlalchemy import JSON, Column, DateTime, MetaData, String, Table, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from member_directory.core.logging import get_logger
from member_directory.repositories.base import MemberDocument, StoreError
from member_directory.services.validators import coerce_timestamp

logger = get_logger(__name__)

COLUMN_FIELDS = ("name", "email", "created_at")


def _column_value(field_name: str, value: Any) -> Any:
    # Stored as UTC; SQLite keeps the wall-clock part and drops any offset
    if field_name == "created_at" and value is not None:
        try:
            return coerce_timestamp(value).astimezone(timezone.utc)
        except ValueError as exc:
            raise StoreError(f"Invalid created_at value: {value!r}") from exc
    return value


def _split(fields: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, Any]]:
    columns: Dict[str, Any] = {}
    attributes: Dict[str, Any] = {}
    for key, value in fields.items():
        if key in COLUMN_FIELDS:
            columns[key] = _column_value(key, value)
        else:
            attributes[key] = value
    return columns, attributes


class SqlMemberStore:
    def __init__(self, engine: Engine, table_name: str = "members"):
        self._engine = engine
        self._metadata = MetaData()
        self._table = Table(
            table_name,
            self._metadata,
            Column("id", String(36), primary_key=True),
            Column("name", String(255), index=True),
            Column("email", String(320)),
            Column("created_at", DateTime(timezone=True)),
            Column("attributes", JSON, nullable=False, default=dict),
        )

    def create_schema(self) -> None:
        try:
            self._metadata.create_all(self._engine)
        except SQLAlchemyError as exc:
            logger.error("Failed to create %s table: %s", self._table.name, exc)
            raise StoreError(str(exc)) from exc

    def _to_document(self, row) -> MemberDocument:
        created_at = row["created_at"]
        # SQLite hands back naive datetimes
        if isinstance(created_at, datetime) and created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        fields: Dict[str, Any] = {
            "name": row["name"],
            "email": row["email"],
            "created_at": created_at,
        }
        fields.update(row["attributes"] or {})
        return MemberDocument(id=str(row["id"]), fields=fields)

    # ── Read ──

    def query_equal(self, field_name: str, value: Any, limit: int) -> List[MemberDocument]:
        if field_name == "id":
            column = self._table.c.id
        elif field_name in COLUMN_FIELDS:
            column = self._table.c[field_name]
        else:
            raise StoreError(f"Cannot query on field '{field_name}'")
        try:
            with self._engine.connect() as conn:
                rows = conn.execute(
                    select(self._table).where(column == value).limit(limit)
                ).mappings().all()
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return [self._to_document(r) for r in rows]

    def count(self) -> int:
        try:
            with self._engine.connect() as conn:
                return conn.execute(select(func.count()).select_from(self._table)).scalar() or 0
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def verify_connection(self) -> int:
        return self.count()

    # ── Write ──

    def insert(self, fields: Dict[str, Any]) -> str:
        member_id = str(uuid.uuid4())
        columns, attributes = _split(fields)
        try:
            with self._engine.begin() as conn:
                conn.execute(
                    self._table.insert().values(id=member_id, attributes=attributes, **columns)
                )
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc
        return member_id

    def update_by_id(self, member_id: str, partial: Dict[str, Any]) -> None:
        columns, attributes = _split(partial)
        try:
            with self._engine.begin() as conn:
                current = conn.execute(
                    select(self._table.c.attributes).where(self._table.c.id == member_id)
                ).first()
                if current is None:
                    raise StoreError(f"No document to update: {member_id}")
                values: Dict[str, Any] = dict(columns)
                if attributes:
                    values["attributes"] = {**(current[0] or {}), **attributes}
                if values:
                    conn.execute(
                        self._table.update().where(self._table.c.id == member_id).values(**values)
                    )
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def delete_by_id(self, member_id: str) -> None:
        try:
            with self._engine.begin() as conn:
                conn.execute(self._table.delete().where(self._table.c.id == member_id))
        except SQLAlchemyError as exc:
            raise StoreError(str(exc)) from exc

    def dispose(self) -> None:
        self._engine.dispose()
