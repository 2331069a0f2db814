"""Stored records: job groups, titles and staff members."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


def _as_mapping(row: Any) -> Mapping[str, Any]:
    if isinstance(row, Mapping):
        return row
    if hasattr(row, "keys"):
        return {key: row[key] for key in row.keys()}
    raise TypeError("row must be a mapping or a database row with keys()")


def _timestamp(value: Any) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    return datetime.fromisoformat(str(value))


def _common(data: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "id": data.get("id") or 0,
        "created_at": _timestamp(data.get("created_at")),
        "updated_at": _timestamp(data.get("updated_at")),
        "deleted_at": _timestamp(data.get("deleted_at")),
    }


@dataclass
class Title:
    name: str = ""
    job_group_id: int = 0
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    staff: list[Staff] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Any) -> Title:
        data = _as_mapping(row)
        return cls(
            name=data.get("name") or "",
            job_group_id=data.get("job_group_id") or 0,
            **_common(data),
        )


@dataclass
class JobGroup:
    name: str = ""
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None
    titles: list[Title] = field(default_factory=list)
    staff: list[Staff] = field(default_factory=list)

    @classmethod
    def from_row(cls, row: Any) -> JobGroup:
        data = _as_mapping(row)
        return cls(name=data.get("name") or "", **_common(data))


@dataclass
class Staff:
    first_name: str = ""
    last_name: str = ""
    tc: str = ""
    phone: str = ""
    working_days: str = ""
    hospital_id: int = 0
    job_group_id: int = 0
    title_id: int = 0
    hospital_polyclinic_id: int | None = None
    id: int = 0
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @classmethod
    def from_row(cls, row: Any) -> Staff:
        data = _as_mapping(row)
        return cls(
            first_name=data.get("first_name") or "",
            last_name=data.get("last_name") or "",
            tc=data.get("tc") or "",
            phone=data.get("phone") or "",
            working_days=data.get("working_days") or "",
            hospital_id=data.get("hospital_id") or 0,
            job_group_id=data.get("job_group_id") or 0,
            title_id=data.get("title_id") or 0,
            hospital_polyclinic_id=data.get("hospital_polyclinic_id"),
            **_common(data),
        )