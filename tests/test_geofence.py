import pytest

from app.services.geofence import (
    GeoFence,
    GeoPoint,
    check_radius,
    distance_meters,
    format_distance,
    haversine_distance,
)

BANGKOK = GeoPoint(13.7563, 100.5018)
CHIANG_MAI = GeoPoint(18.7883, 98.9853)


def test_same_point_is_inside():
    result = check_radius(BANGKOK, GeoFence(13.7563, 100.5018, 100))
    assert result.distance_meters == 0
    assert result.in_radius is True

def test_distance_is_symmetric():
    assert haversine_distance(BANGKOK, CHIANG_MAI) == pytest.approx(haversine_distance(CHIANG_MAI, BANGKOK))
    assert distance_meters(BANGKOK, CHIANG_MAI) == distance_meters(CHIANG_MAI, BANGKOK)

def test_known_distance():
    # Bangkok to Chiang Mai is roughly 580 km great-circle
    assert 575_000 < distance_meters(BANGKOK, CHIANG_MAI) < 590_000

def test_boundary_is_inclusive():
    nearby = GeoPoint(13.7572, 100.5018)
    d = distance_meters(BANGKOK, nearby)
    assert d > 0
    assert check_radius(nearby, GeoFence(BANGKOK.lat, BANGKOK.lng, d)).in_radius is True
    assert check_radius(nearby, GeoFence(BANGKOK.lat, BANGKOK.lng, d - 1)).in_radius is False

def test_one_thousandth_of_a_degree_latitude():
    # ~111 m per 0.001 degree of latitude
    assert distance_meters(BANGKOK, GeoPoint(13.7573, 100.5018)) == 111

@pytest.mark.parametrize("meters, text", [(0, "0 m"), (850, "850 m"), (999, "999 m"), (1000, "1.0 km"), (1234, "1.2 km"), (580600, "580.6 km")])
def test_format_distance(meters, text):
    assert format_distance(meters) == text
