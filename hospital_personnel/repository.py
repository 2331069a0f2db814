"""Queries and updates on job groups, titles and staff members."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from typing import Any

from hospital_personnel.dto import PolyclinicPersonnelGroup, StaffListFilter
from hospital_personnel.models import JobGroup, Staff, Title

_HEAD_TITLE = "Başhekim"

_STAFF_FIELDS = (
    "first_name",
    "last_name",
    "tc",
    "phone",
    "working_days",
    "hospital_id",
    "job_group_id",
    "title_id",
    "hospital_polyclinic_id",
)


class NotFoundError(LookupError):
    """Raised when a requested record does not exist."""


def _lower(value: Any) -> str | None:
    return None if value is None else str(value).lower()


def _iso(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PersonnelRepository:
    """Data access for the personnel tables over an open SQLite connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        conn.create_function("fold_case", 1, _lower, deterministic=True)

    def _rows(self, sql: str, params: tuple = ()) -> list[dict[str, Any]]:
        cursor = self._conn.execute(sql, params)
        columns = [column[0] for column in cursor.description]
        return [dict(zip(columns, row)) for row in cursor]

    def _scalar(self, sql: str, params: tuple = ()) -> Any:
        (value,) = self._conn.execute(sql, params).fetchone()
        return value

    def _first(self, table: str, record_id: int) -> dict[str, Any]:
        rows = self._rows(
            f"SELECT * FROM {table} WHERE id = ? AND deleted_at IS NULL "
            "ORDER BY id LIMIT 1",
            (record_id,),
        )
        if not rows:
            raise NotFoundError("record not found")
        return rows[0]

    def get_all_job_groups(self) -> list[JobGroup]:
        rows = self._rows("SELECT * FROM job_groups WHERE deleted_at IS NULL ORDER BY id")
        return [JobGroup.from_row(row) for row in rows]

    def get_titles_by_job_group(self, job_group_id: int) -> list[Title]:
        rows = self._rows(
            "SELECT * FROM titles WHERE job_group_id = ? AND deleted_at IS NULL ORDER BY id",
            (job_group_id,),
        )
        return [Title.from_row(row) for row in rows]

    def tc_or_phone_exists(self, tc: str, phone: str) -> bool:
        count = self._scalar(
            "SELECT COUNT(*) FROM staffs WHERE (tc = ? OR phone = ?) AND deleted_at IS NULL",
            (tc, phone),
        )
        return count > 0

    def get_job_group(self, job_group_id: int) -> JobGroup:
        return JobGroup.from_row(self._first("job_groups", job_group_id))

    def get_title(self, title_id: int) -> Title:
        return Title.from_row(self._first("titles", title_id))

    def count_hospital_heads(self, hospital_id: int) -> int:
        """Count staff of *hospital_id* holding the head physician title, deleted rows included."""
        return self._scalar(
            "SELECT COUNT(*) FROM staffs JOIN titles ON staffs.title_id = titles.id "
            "WHERE titles.name = ? AND staffs.hospital_id = ?",
            (_HEAD_TITLE, hospital_id),
        )

    def create_staff(self, staff: Staff) -> Staff:
        """Insert *staff*, filling in its id and timestamps."""
        now = _now()
        staff.created_at = staff.created_at or now
        staff.updated_at = staff.updated_at or now
        columns = ["created_at", "updated_at", "deleted_at", *_STAFF_FIELDS]
        values = [
            _iso(staff.created_at),
            _iso(staff.updated_at),
            _iso(staff.deleted_at),
            *(getattr(staff, name) for name in _STAFF_FIELDS),
        ]
        if staff.id:
            columns.insert(0, "id")
            values.insert(0, staff.id)
        placeholders = ", ".join("?" for _ in columns)
        with self._conn:
            cursor = self._conn.execute(
                f"INSERT INTO staffs ({', '.join(columns)}) VALUES ({placeholders})",
                values,
            )
        staff.id = cursor.lastrowid
        return staff

    def get_staff(self, staff_id: int) -> Staff:
        return Staff.from_row(self._first("staffs", staff_id))

    def tc_or_phone_exists_for(self, staff_id: int, tc: str, phone: str) -> bool:
        """Whether the staff member *staff_id* itself has the given TC or phone."""
        count = self._scalar(
            "SELECT COUNT(*) FROM staffs WHERE id = ? AND (tc = ? OR phone = ?) "
            "AND deleted_at IS NULL",
            (staff_id, tc, phone),
        )
        return count > 0

    def update_staff(self, staff: Staff) -> Staff:
        """Write every field of *staff*; a record without an id is inserted."""
        if not staff.id:
            return self.create_staff(staff)
        staff.updated_at = _now()
        assignments = ", ".join(
            f"{name} = ?" for name in ("created_at", "updated_at", "deleted_at", *_STAFF_FIELDS)
        )
        values = [
            _iso(staff.created_at),
            _iso(staff.updated_at),
            _iso(staff.deleted_at),
            *(getattr(staff, name) for name in _STAFF_FIELDS),
            staff.id,
        ]
        with self._conn:
            cursor = self._conn.execute(
                f"UPDATE staffs SET {assignments} WHERE id = ?", values
            )
        if cursor.rowcount == 0:
            return self.create_staff(staff)
        return staff

    def delete_staff(self, staff: Staff) -> None:
        """Mark *staff* as deleted; it then no longer shows up in lookups."""
        if not staff.id:
            raise ValueError("cannot delete a staff member without an id")
        deleted_at = _now()
        with self._conn:
            self._conn.execute(
                "UPDATE staffs SET deleted_at = ? WHERE id = ? AND deleted_at IS NULL",
                (_iso(deleted_at), staff.id),
            )
        staff.deleted_at = deleted_at

    @staticmethod
    def _filter_clause(hospital_id: int, filter: StaffListFilter) -> tuple[str, list[Any]]:
        conditions = ["hospital_id = ?", "deleted_at IS NULL"]
        params: list[Any] = [hospital_id]
        for column, text in (
            ("first_name", filter.first_name),
            ("last_name", filter.last_name),
            ("tc", filter.tc),
        ):
            if text:
                conditions.append(f"fold_case({column}) LIKE ?")
                params.append(f"%{text.lower()}%")
        for column, value in (
            ("job_group_id", filter.job_group_id),
            ("title_id", filter.title_id),
        ):
            if value is not None:
                conditions.append(f"{column} = ?")
                params.append(value)
        return " AND ".join(conditions), params

    def list_staff(
        self, hospital_id: int, filter: StaffListFilter, page: int, size: int
    ) -> list[Staff]:
        """Return one page of the hospital's staff matching *filter*."""
        where, params = self._filter_clause(hospital_id, filter)
        offset = (page - 1) * size
        limit = size if size >= 0 else -1
        rows = self._rows(
            f"SELECT * FROM staffs WHERE {where} ORDER BY id LIMIT ? OFFSET ?",
            (*params, limit, max(offset, 0)),
        )
        return [Staff.from_row(row) for row in rows]

    def count_staff(self, hospital_id: int, filter: StaffListFilter) -> int:
        where, params = self._filter_clause(hospital_id, filter)
        return self._scalar(f"SELECT COUNT(*) FROM staffs WHERE {where}", tuple(params))

    def count_personnel(self, hospital_polyclinic_id: int) -> int:
        return self._scalar(
            "SELECT COUNT(*) FROM staffs WHERE hospital_polyclinic_id = ? "
            "AND deleted_at IS NULL",
            (hospital_polyclinic_id,),
        )

    def group_counts(self, hospital_polyclinic_id: int) -> list[PolyclinicPersonnelGroup]:
        """Count staff per job group in a hospital polyclinic."""
        rows = self._rows(
            "SELECT job_groups.name AS group_name, COUNT(*) AS count FROM staffs "
            "JOIN job_groups ON staffs.job_group_id = job_groups.id "
            "WHERE staffs.hospital_polyclinic_id = ? "
            "GROUP BY job_groups.name ORDER BY job_groups.name",
            (hospital_polyclinic_id,),
        )
        return [
            PolyclinicPersonnelGroup(group_name=row["group_name"], count=row["count"])
            for row in rows
        ]