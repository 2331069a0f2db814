"""Business rules for job groups, titles and staff members."""

from __future__ import annotations

import json
import threading
from collections.abc import Callable
from typing import Any, Protocol, TypeVar

from hospital_personnel.dto import (
    AddStaffRequest,
    HospitalPolyclinic,
    JobGroupLookup,
    PolyclinicPersonnelGroup,
    StaffListFilter,
    StaffListResponse,
    StaffResponse,
    TitleLookup,
    UpdateStaffRequest,
)
from hospital_personnel.models import JobGroup, Staff, Title
from hospital_personnel.repository import PersonnelRepository

_HEAD_TITLE = "Başhekim"
_JOB_GROUPS_KEY = "job_groups"
_TITLES_KEY_PREFIX = "titles_by_jobgroup_"

T = TypeVar("T")


class PersonnelError(Exception):
    """Raised when a personnel operation breaks a business rule."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class Cache(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class PolyclinicLookup(Protocol):
    def get_hospital_polyclinic(self, hospital_polyclinic_id: int) -> HospitalPolyclinic: ...


class MemoryCache:
    """A thread-safe in-process key/value cache without expiry."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._data[key] = value


def _rune(value: int) -> str:
    """The character a 32-bit code point stands for; invalid ones become U+FFFD."""
    code = value & 0xFFFFFFFF
    if code >= 0x80000000:
        code -= 0x100000000
    if 0 <= code <= 0x10FFFF and not 0xD800 <= code <= 0xDFFF:
        return chr(code)
    return "\ufffd"


def _staff_response(
    staff: Staff, job_group: JobGroup, title: Title, polyclinic_name: str | None
) -> StaffResponse:
    return StaffResponse(
        id=staff.id,
        first_name=staff.first_name,
        last_name=staff.last_name,
        tc=staff.tc,
        phone=staff.phone,
        job_group_id=job_group.id,
        job_group_name=job_group.name,
        title_id=title.id,
        title_name=title.name,
        hospital_polyclinic_id=staff.hospital_polyclinic_id,
        polyclinic_name=polyclinic_name,
        working_days=staff.working_days,
    )


class PersonnelService:
    """Validates and carries out personnel operations for a hospital."""

    def __init__(
        self,
        repository: PersonnelRepository,
        polyclinic_client: PolyclinicLookup,
        cache: Cache | None = None,
    ) -> None:
        self.repository = repository
        self.polyclinic_client = polyclinic_client
        self.cache: Cache = cache if cache is not None else MemoryCache()

    def _cached(self, key: str, parse: Callable[[Any], T]) -> list[T] | None:
        try:
            cached = self.cache.get(key)
        except Exception:
            return None
        if not cached:
            return None
        try:
            data = json.loads(cached)
            if data is None:
                return []
            if not isinstance(data, list):
                return None
            return [parse(item) for item in data]
        except ValueError:
            return None

    def _store(self, key: str, items: list[Any]) -> None:
        payload = json.dumps([item.to_dict() for item in items], ensure_ascii=False)
        try:
            self.cache.set(key, payload)
        except Exception:
            pass

    def list_job_groups(self) -> list[JobGroupLookup]:
        cached = self._cached(_JOB_GROUPS_KEY, JobGroupLookup.from_dict)
        if cached is not None:
            return cached
        result = [
            JobGroupLookup(id=group.id, name=group.name)
            for group in self.repository.get_all_job_groups()
        ]
        self._store(_JOB_GROUPS_KEY, result)
        return result

    def list_titles(self, job_group_id: int) -> list[TitleLookup]:
        key = _TITLES_KEY_PREFIX + _rune(job_group_id)
        cached = self._cached(key, TitleLookup.from_dict)
        if cached is not None:
            return cached
        result = [
            TitleLookup(id=title.id, name=title.name)
            for title in self.repository.get_titles_by_job_group(job_group_id)
        ]
        self._store(key, result)
        return result

    def _job_group_and_title(self, job_group_id: int, title_id: int) -> tuple[JobGroup, Title]:
        try:
            job_group = self.repository.get_job_group(job_group_id)
        except Exception as exc:
            raise PersonnelError("job group not found") from exc
        try:
            title = self.repository.get_title(title_id)
        except Exception as exc:
            raise PersonnelError("title not found") from exc
        if title.job_group_id != job_group.id:
            raise PersonnelError("title does not belong to the selected job group")
        return job_group, title

    def _check_single_head(self, title: Title, hospital_id: int) -> None:
        if title.name == _HEAD_TITLE and self.repository.count_hospital_heads(hospital_id) > 0:
            raise PersonnelError("there can be only one Başhekim in a hospital")

    def _polyclinic_name(self, hospital_polyclinic_id: int | None, hospital_id: int) -> str | None:
        if hospital_polyclinic_id is None:
            return None
        try:
            polyclinic = self.polyclinic_client.get_hospital_polyclinic(hospital_polyclinic_id)
        except Exception as exc:
            raise PersonnelError("hospital polyclinic not found") from exc
        if polyclinic.hospital_id != hospital_id:
            raise PersonnelError("polyclinic does not belong to your hospital")
        return polyclinic.polyclinic_name

    def add_staff(self, request: AddStaffRequest, hospital_id: int) -> StaffResponse:
        if self.repository.tc_or_phone_exists(request.tc, request.phone):
            raise PersonnelError("staff with given TC or phone already exists")
        job_group, title = self._job_group_and_title(request.job_group_id, request.title_id)
        self._check_single_head(title, hospital_id)
        polyclinic_name = self._polyclinic_name(request.hospital_polyclinic_id, hospital_id)

        staff = Staff(
            first_name=request.first_name,
            last_name=request.last_name,
            tc=request.tc,
            phone=request.phone,
            job_group_id=request.job_group_id,
            title_id=request.title_id,
            hospital_id=hospital_id,
            hospital_polyclinic_id=request.hospital_polyclinic_id,
            working_days=request.working_days,
        )
        self.repository.create_staff(staff)
        return _staff_response(staff, job_group, title, polyclinic_name)

    def update_staff(
        self, staff_id: int, request: UpdateStaffRequest, hospital_id: int
    ) -> StaffResponse:
        try:
            staff = self.repository.get_staff(staff_id)
        except Exception as exc:
            raise PersonnelError("staff not found") from exc
        if staff.hospital_id != hospital_id:
            raise PersonnelError("forbidden: cannot update staff from another hospital")
        if self.repository.tc_or_phone_exists_for(staff_id, request.tc, request.phone):
            raise PersonnelError("another staff with given TC or phone already exists")
        job_group, title = self._job_group_and_title(request.job_group_id, request.title_id)
        self._check_single_head(title, hospital_id)
        polyclinic_name = self._polyclinic_name(request.hospital_polyclinic_id, hospital_id)

        staff.first_name = request.first_name
        staff.last_name = request.last_name
        staff.tc = request.tc
        staff.phone = request.phone
        staff.job_group_id = request.job_group_id
        staff.title_id = request.title_id
        staff.hospital_polyclinic_id = request.hospital_polyclinic_id
        staff.working_days = request.working_days
        self.repository.update_staff(staff)
        return _staff_response(staff, job_group, title, polyclinic_name)

    def delete_staff(self, staff_id: int, hospital_id: int) -> None:
        try:
            staff = self.repository.get_staff(staff_id)
        except Exception as exc:
            raise PersonnelError("staff not found") from exc
        if staff.hospital_id != hospital_id:
            raise PersonnelError("forbidden: cannot delete staff from another hospital")
        self.repository.delete_staff(staff)

    def list_staff(
        self, hospital_id: int, filter: StaffListFilter, page: int, size: int
    ) -> StaffListResponse:
        members = self.repository.list_staff(hospital_id, filter, page, size)
        total = self.repository.count_staff(hospital_id, filter)

        result = []
        for member in members:
            try:
                job_group = self.repository.get_job_group(member.job_group_id)
            except Exception as exc:
                raise PersonnelError("job group not found for staff") from exc
            try:
                title = self.repository.get_title(member.title_id)
            except Exception as exc:
                raise PersonnelError("title not found for staff") from exc
            polyclinic_name = None
            if member.hospital_polyclinic_id is not None:
                polyclinic = self.polyclinic_client.get_hospital_polyclinic(
                    member.hospital_polyclinic_id
                )
                polyclinic_name = polyclinic.polyclinic_name
            result.append(_staff_response(member, job_group, title, polyclinic_name))

        return StaffListResponse(staff=result, total=total, page=page, size=size)

    def count_personnel(self, hospital_polyclinic_id: int) -> int:
        return self.repository.count_personnel(hospital_polyclinic_id)

    def group_counts(self, hospital_polyclinic_id: int) -> list[PolyclinicPersonnelGroup]:
        return self.repository.group_counts(hospital_polyclinic_id)