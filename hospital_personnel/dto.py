"""Request and response objects exchanged with API clients and sibling services."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


def _require_object(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValueError("expected a JSON object")
    return data


def _string(data: Mapping[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValueError(f"field {key!r} must be a string")
    return value


def _uint(data: Mapping[str, Any], key: str) -> int:
    value = data.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"field {key!r} must be a non-negative integer")
    return value


def _optional_uint(data: Mapping[str, Any], key: str) -> int | None:
    if data.get(key) is None:
        return None
    return _uint(data, key)


def _staff_fields(data: Any) -> dict[str, Any]:
    """Decode the fields shared by staff add and update bodies; unknown keys are ignored."""
    data = _require_object(data)
    return {
        "first_name": _string(data, "first_name"),
        "last_name": _string(data, "last_name"),
        "tc": _string(data, "tc"),
        "phone": _string(data, "phone"),
        "job_group_id": _uint(data, "job_group_id"),
        "title_id": _uint(data, "title_id"),
        "hospital_polyclinic_id": _optional_uint(data, "hospital_polyclinic_id"),
        "working_days": _string(data, "working_days"),
    }


@dataclass
class CreateHospitalRequest:
    name: str = ""
    tax_number: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city_id: int = 0
    district_id: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "tax_number": self.tax_number,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city_id": self.city_id,
            "district_id": self.district_id,
        }


@dataclass
class HospitalResponse:
    id: int = 0
    name: str = ""
    tax_number: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city_id: int = 0
    city_name: str = ""
    district_id: int = 0
    district_name: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "tax_number": self.tax_number,
            "email": self.email,
            "phone": self.phone,
            "address": self.address,
            "city_id": self.city_id,
            "city_name": self.city_name,
            "district_id": self.district_id,
            "district_name": self.district_name,
        }


@dataclass
class PolyclinicPersonnelGroup:
    """Number of staff of one job group working in a hospital polyclinic."""

    group_name: str
    count: int

    def to_dict(self) -> dict[str, Any]:
        return {"groupName": self.group_name, "count": self.count}


@dataclass
class HospitalPolyclinic:
    """A polyclinic as attached to a particular hospital."""

    id: int = 0
    hospital_id: int = 0
    polyclinic_id: int = 0
    polyclinic_name: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> HospitalPolyclinic:
        data = _require_object(data)
        return cls(
            id=_uint(data, "id"),
            hospital_id=_uint(data, "hospital_id"),
            polyclinic_id=_uint(data, "polyclinic_id"),
            polyclinic_name=_string(data, "polyclinic_name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "hospital_id": self.hospital_id,
            "polyclinic_id": self.polyclinic_id,
            "polyclinic_name": self.polyclinic_name,
        }


@dataclass
class JobGroupLookup:
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Any) -> JobGroupLookup:
        data = _require_object(data)
        return cls(id=_uint(data, "id"), name=_string(data, "name"))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass
class TitleLookup:
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Any) -> TitleLookup:
        data = _require_object(data)
        return cls(id=_uint(data, "id"), name=_string(data, "name"))

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name}


@dataclass
class _StaffRequest:
    first_name: str = ""
    last_name: str = ""
    tc: str = ""
    phone: str = ""
    job_group_id: int = 0
    title_id: int = 0
    hospital_polyclinic_id: int | None = None
    working_days: str = ""


@dataclass
class AddStaffRequest(_StaffRequest):
    """Body of a request that adds a staff member."""

    @classmethod
    def from_dict(cls, data: Any) -> AddStaffRequest:
        """Build the request from a decoded JSON body; unknown keys are ignored."""
        return cls(**_staff_fields(data))


@dataclass
class UpdateStaffRequest(_StaffRequest):
    """Body of a request that replaces a staff member's details."""

    @classmethod
    def from_dict(cls, data: Any) -> UpdateStaffRequest:
        """Build the request from a decoded JSON body; unknown keys are ignored."""
        return cls(**_staff_fields(data))


@dataclass
class StaffResponse:
    id: int = 0
    first_name: str = ""
    last_name: str = ""
    tc: str = ""
    phone: str = ""
    job_group_id: int = 0
    job_group_name: str = ""
    title_id: int = 0
    title_name: str = ""
    hospital_polyclinic_id: int | None = None
    polyclinic_name: str | None = None
    working_days: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "tc": self.tc,
            "phone": self.phone,
            "job_group_id": self.job_group_id,
            "job_group_name": self.job_group_name,
            "title_id": self.title_id,
            "title_name": self.title_name,
            "hospital_polyclinic_id": self.hospital_polyclinic_id,
            "polyclinic_name": self.polyclinic_name,
            "working_days": self.working_days,
        }


@dataclass
class StaffListFilter:
    """Optional criteria for listing staff; empty strings and None match everything."""

    first_name: str = ""
    last_name: str = ""
    tc: str = ""
    job_group_id: int | None = None
    title_id: int | None = None


@dataclass
class StaffListResponse:
    staff: list[StaffResponse] = field(default_factory=list)
    total: int = 0
    page: int = 0
    size: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "staff": [member.to_dict() for member in self.staff],
            "total": self.total,
            "page": self.page,
            "size": self.size,
        }