"""HTTP client for the polyclinic service."""

from __future__ import annotations

import http.client
import json
import urllib.error
import urllib.request

from hospital_personnel.dto import HospitalPolyclinic

_DEFAULT_TIMEOUT = 5.0


class PolyclinicClientError(Exception):
    """Raised when a hospital polyclinic cannot be fetched or decoded."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PolyclinicClient:
    """Fetches hospital polyclinic records from the polyclinic service."""

    def __init__(self, base_url: str, timeout: float = _DEFAULT_TIMEOUT) -> None:
        self.base_url = base_url
        self.timeout = timeout

    def get_hospital_polyclinic(self, hospital_polyclinic_id: int) -> HospitalPolyclinic:
        """Return the hospital polyclinic with the given id."""
        url = f"{self.base_url}/api/polyclinic/hospital-polyclinics/{hospital_polyclinic_id}"
        request = urllib.request.Request(url, method="GET")
        body = b""
        try:
            with urllib.request.urlopen(request, timeout=self.timeout) as response:
                status = response.status
                if status == 200:
                    body = response.read()
        except urllib.error.HTTPError as exc:
            status = exc.code
            exc.close()
        except (urllib.error.URLError, http.client.HTTPException, OSError) as exc:
            raise PolyclinicClientError(str(exc)) from exc

        if status != 200:
            raise PolyclinicClientError(f"invalid status: {status}", status_code=status)

        try:
            return HospitalPolyclinic.from_dict(json.loads(body))
        except (ValueError, UnicodeDecodeError) as exc:
            raise PolyclinicClientError(str(exc), status_code=status) from exc