"""HTTP-level handling of personnel requests: parsing input and shaping responses."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from hospital_personnel.config import Config
from hospital_personnel.dto import AddStaffRequest, StaffListFilter, UpdateStaffRequest
from hospital_personnel.service import PersonnelService

_UINT64_MAX = 2**64 - 1
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_DIGITS = re.compile(r"[0-9]+")
_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")


@dataclass
class UserInfo:
    """The authenticated caller, as established by the authentication layer."""

    hospital_id: int


@dataclass
class Response:
    """Status code and body of a handled request; a str body is plain text, else JSON."""

    status_code: int
    body: Any


def _query(query: Mapping[str, str] | None, key: str, default: str) -> str:
    value = (query or {}).get(key)
    return value if value else default


def _parse_uint(text: Any) -> int | None:
    """Decimal unsigned 64-bit integer, or None when *text* is not one."""
    if isinstance(text, bool):
        return None
    if isinstance(text, int):
        return text if 0 <= text <= _UINT64_MAX else None
    if not isinstance(text, str) or not _DIGITS.fullmatch(text):
        return None
    value = int(text)
    return value if value <= _UINT64_MAX else None


def _atoi(text: str) -> int:
    """Signed decimal integer; malformed text gives 0, overflow is clamped."""
    if not _SIGNED_DIGITS.fullmatch(text):
        return 0
    return max(_INT64_MIN, min(_INT64_MAX, int(text)))


def _error(status_code: int, message: str) -> Response:
    return Response(status_code, {"error": message})


def _parse_body(body: Any) -> Mapping[str, Any]:
    if isinstance(body, (bytes, bytearray, str)):
        body = json.loads(body)
    if body is None:
        return {}
    if not isinstance(body, Mapping):
        raise ValueError("expected a JSON object")
    return body


class PersonnelHandler:
    """Turns requests into service calls and service results into responses."""

    def __init__(self, service: PersonnelService, config: Config | None = None) -> None:
        self.service = service
        self.config = config

    def list_job_groups(self) -> Response:
        try:
            groups = self.service.list_job_groups()
        except Exception as exc:
            return _error(500, str(exc))
        return Response(200, [group.to_dict() for group in groups])

    def list_titles(self, query: Mapping[str, str] | None) -> Response:
        job_group_id = _parse_uint(_query(query, "job_group_id", "0"))
        if not job_group_id:
            return _error(400, "Invalid job_group_id")
        try:
            titles = self.service.list_titles(job_group_id)
        except Exception as exc:
            return _error(500, str(exc))
        return Response(200, [title.to_dict() for title in titles])

    def add_staff(self, body: Any, user: UserInfo | None) -> Response:
        try:
            request = AddStaffRequest.from_dict(_parse_body(body))
        except ValueError:
            return _error(400, "Cannot parse JSON")
        if user is None:
            return _error(401, "Unauthorized")
        try:
            created = self.service.add_staff(request, user.hospital_id)
        except Exception as exc:
            return _error(400, str(exc))
        return Response(201, created.to_dict())

    def update_staff(self, staff_id: Any, body: Any, user: UserInfo | None) -> Response:
        parsed_id = _parse_uint(staff_id)
        if parsed_id is None:
            return _error(400, "Invalid staff id")
        try:
            request = UpdateStaffRequest.from_dict(_parse_body(body))
        except ValueError:
            return _error(400, "Cannot parse JSON")
        if user is None:
            return _error(401, "Unauthorized")
        try:
            updated = self.service.update_staff(parsed_id, request, user.hospital_id)
        except Exception as exc:
            return _error(400, str(exc))
        return Response(200, updated.to_dict())

    def delete_staff(self, staff_id: Any, user: UserInfo | None) -> Response:
        parsed_id = _parse_uint(staff_id)
        if parsed_id is None:
            return _error(400, "Invalid staff id")
        if user is None:
            return _error(401, "Unauthorized")
        try:
            self.service.delete_staff(parsed_id, user.hospital_id)
        except Exception as exc:
            return _error(400, str(exc))
        return Response(200, {"message": "Staff deleted"})

    def list_staff(self, query: Mapping[str, str] | None, user: UserInfo | None) -> Response:
        page = _atoi(_query(query, "page", "1"))
        size = _atoi(_query(query, "size", "10"))

        def positive_id(key: str) -> int | None:
            value = _parse_uint(_query(query, key, ""))
            return value if value else None

        staff_filter = StaffListFilter(
            first_name=_query(query, "first_name", ""),
            last_name=_query(query, "last_name", ""),
            tc=_query(query, "tc", ""),
            job_group_id=positive_id("job_group_id"),
            title_id=positive_id("title_id"),
        )
        if user is None:
            return _error(401, "Unauthorized")
        try:
            result = self.service.list_staff(user.hospital_id, staff_filter, page, size)
        except Exception as exc:
            return _error(500, str(exc))
        return Response(200, result.to_dict())

    def staff_count(self, hospital_polyclinic_id: Any) -> Response:
        parsed_id = _parse_uint(hospital_polyclinic_id)
        if parsed_id is None:
            return Response(400, "Invalid ID")
        try:
            count = self.service.count_personnel(parsed_id)
        except Exception:
            return Response(500, "Error fetching count")
        return Response(200, {"count": count})

    def group_counts(self, hospital_polyclinic_id: Any) -> Response:
        parsed_id = _parse_uint(hospital_polyclinic_id)
        if parsed_id is None:
            return Response(400, "Invalid ID")
        try:
            groups = self.service.group_counts(parsed_id)
        except Exception:
            return Response(500, "Error fetching group counts")
        return Response(200, [group.to_dict() for group in groups])