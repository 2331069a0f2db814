import json

import pytest

from hospital_personnel.dto import (
    AddStaffRequest,
    CreateHospitalRequest,
    HospitalPolyclinic,
    HospitalResponse,
    JobGroupLookup,
    PolyclinicPersonnelGroup,
    StaffListFilter,
    StaffListResponse,
    StaffResponse,
    TitleLookup,
    UpdateStaffRequest,
)


def test_polyclinic_group_uses_camel_case_key():
    group = PolyclinicPersonnelGroup(group_name="Doktor", count=3)
    assert group.to_dict() == {"groupName": "Doktor", "count": 3}


def test_create_hospital_request_keys():
    request = CreateHospitalRequest(name="Central", city_id=6, district_id=2)
    data = request.to_dict()
    assert set(data) == {
        "name", "tax_number", "email", "phone", "address", "city_id", "district_id",
    }
    assert data["name"] == "Central"
    assert data["district_id"] == 2


def test_hospital_response_keys():
    data = HospitalResponse(id=1, city_name="Ankara").to_dict()
    assert data["city_name"] == "Ankara"
    assert data["district_name"] == ""
    assert len(data) == 10


def test_hospital_polyclinic_round_trip():
    source = {"id": 4, "hospital_id": 2, "polyclinic_id": 9, "polyclinic_name": "Kardiyoloji"}
    assert HospitalPolyclinic.from_dict(source).to_dict() == source


def test_hospital_polyclinic_from_json_text():
    text = '{"id": 1, "hospital_id": 5, "polyclinic_name": "Göz", "extra": true}'
    hp = HospitalPolyclinic.from_dict(json.loads(text))
    assert hp.hospital_id == 5
    assert hp.polyclinic_id == 0
    assert hp.polyclinic_name == "Göz"


@pytest.mark.parametrize("cls", [JobGroupLookup, TitleLookup])
def test_lookup_round_trip(cls):
    source = {"id": 7, "name": "Hemşire"}
    assert cls.from_dict(source).to_dict() == source


@pytest.mark.parametrize("cls", [AddStaffRequest, UpdateStaffRequest])
def test_staff_request_defaults(cls):
    request = cls.from_dict({"first_name": "Ayşe"})
    assert request.first_name == "Ayşe"
    assert request.last_name == ""
    assert request.job_group_id == 0
    assert request.hospital_polyclinic_id is None


@pytest.mark.parametrize("cls", [AddStaffRequest, UpdateStaffRequest])
def test_staff_request_all_fields(cls):
    request = cls.from_dict(
        {
            "first_name": "Ali",
            "last_name": "Veli",
            "tc": "tc-sample",
            "phone": "phone-sample",
            "job_group_id": 1,
            "title_id": 2,
            "hospital_polyclinic_id": 3,
            "working_days": "1,2,3,4,5",
        }
    )
    assert request.hospital_polyclinic_id == 3
    assert request.working_days == "1,2,3,4,5"
    assert request.title_id == 2


def test_staff_request_null_polyclinic():
    request = AddStaffRequest.from_dict({"hospital_polyclinic_id": None})
    assert request.hospital_polyclinic_id is None


@pytest.mark.parametrize(
    "body",
    [
        {"first_name": 5},
        {"job_group_id": "1"},
        {"job_group_id": -1},
        {"title_id": 1.5},
        {"job_group_id": True},
        {"hospital_polyclinic_id": "x"},
    ],
)
def test_staff_request_rejects_bad_types(body):
    with pytest.raises(ValueError):
        AddStaffRequest.from_dict(body)


def test_staff_request_rejects_non_object():
    with pytest.raises(ValueError):
        UpdateStaffRequest.from_dict([1, 2])


def test_staff_response_nullable_fields():
    data = StaffResponse(id=1, first_name="Ali").to_dict()
    assert data["hospital_polyclinic_id"] is None
    assert data["polyclinic_name"] is None
    assert data["first_name"] == "Ali"


def test_staff_list_response_nests_members():
    members = [StaffResponse(id=1), StaffResponse(id=2)]
    data = StaffListResponse(staff=members, total=2, page=1, size=10).to_dict()
    assert [m["id"] for m in data["staff"]] == [1, 2]
    assert data["total"] == 2
    assert data["size"] == 10


def test_staff_list_filter_defaults_match_everything():
    f = StaffListFilter()
    assert (f.first_name, f.last_name, f.tc) == ("", "", "")
    assert f.job_group_id is None and f.title_id is None