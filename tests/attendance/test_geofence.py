import math

import pytest

from src.hr_admin.hr_admin.attendance.geofence import (
    OfficeLocation,
    check_employee_proximity,
    check_proximity,
    haversine_distance,
    round_meters,
    validate_coordinates,
)
from src.hr_admin.hr_admin.core.constants import EARTH_RADIUS_M
from src.hr_admin.hr_admin.core.enums import WorkLocation
from src.hr_admin.hr_admin.core.exceptions import ValidationError

OFFICE = OfficeLocation(lat=11.603722, lng=76.209250, allowed_radius_m=100)


def test_same_point_is_zero_and_within_range():
    result = check_proximity(OFFICE.lat, OFFICE.lng, OFFICE)

    assert result.distance_m == 0
    assert result.within_range


@pytest.mark.parametrize(
    "lat1, lng1, lat2, lng2",
    [
        (11.6, 76.2, 11.7, 76.3),
        (0.0, 179.9, 0.0, -179.9),
        (90.0, 0.0, -90.0, 0.0),
        (89.9, 10.0, 89.9, -170.0),
        (-33.9, 151.2, 51.5, -0.1),
    ],
)
def test_distance_is_symmetric(lat1, lng1, lat2, lng2):
    a = haversine_distance(lat1, lng1, lat2, lng2)
    b = haversine_distance(lat2, lng2, lat1, lng1)

    assert a == pytest.approx(b)


def test_hundredth_of_a_degree_north_is_about_1112m():
    result = check_proximity(OFFICE.lat + 0.01, OFFICE.lng, OFFICE)

    assert 1100 <= result.distance_m <= 1125
    assert not result.within_range


def test_boundary_is_inclusive():
    lat, lng = OFFICE.lat + 0.0005, OFFICE.lng
    exact = haversine_distance(lat, lng, OFFICE.lat, OFFICE.lng)

    on_edge = OfficeLocation(lat=OFFICE.lat, lng=OFFICE.lng, allowed_radius_m=exact)
    just_inside = OfficeLocation(lat=OFFICE.lat, lng=OFFICE.lng, allowed_radius_m=exact - 0.01)

    assert check_proximity(lat, lng, on_edge).within_range
    assert not check_proximity(lat, lng, just_inside).within_range


@pytest.mark.parametrize("location", [WorkLocation.WFH, WorkLocation.FIELD])
def test_remote_employee_passes_anywhere(location):
    result = check_employee_proximity(location, 0.0, 0.0, OFFICE)

    assert result.within_range
    assert result.distance_m == 0


def test_disabled_enforcement_passes_in_office_employee():
    office = OfficeLocation(lat=OFFICE.lat, lng=OFFICE.lng, allowed_radius_m=100, enforce=False)

    assert check_employee_proximity(WorkLocation.IN_OFFICE, 0.0, 0.0, office).within_range


def test_out_of_range_coordinates_are_rejected():
    with pytest.raises(ValidationError):
        validate_coordinates(91.0, 0.0)
    with pytest.raises(ValidationError):
        validate_coordinates(0.0, -181.0)


def test_short_hop_across_the_antimeridian():
    # 0.2 degrees of longitude on the equator, not 359.8
    assert haversine_distance(0.0, 179.9, 0.0, -179.9) == pytest.approx(22239, abs=5)


def test_pole_to_pole_is_half_the_circumference():
    assert haversine_distance(90.0, 0.0, -90.0, 0.0) == pytest.approx(math.pi * EARTH_RADIUS_M)


@pytest.mark.parametrize("meters, expected", [(0.4, 0), (0.5, 1), (2.5, 3), (3.5, 4), (99.49, 99)])
def test_round_meters_rounds_halves_up(meters, expected):
    assert round_meters(meters) == expected
