import math

import pytest

from app.services.geo import bounding_box, haversine_km


def test_same_point_is_zero():
    assert haversine_km(17.385, 78.4867, 17.385, 78.4867) == pytest.approx(0.0, abs=1e-6)


def test_known_distance():
    # Charminar to Secunderabad station, roughly 8 km
    distance = haversine_km(17.3616, 78.4747, 17.4337, 78.5016)
    assert 7.5 < distance < 9.0


def test_bounding_box_encloses_radius():
    min_lat, max_lat, min_lon, max_lon = bounding_box(17.385, 78.4867, 5)
    assert min_lat < 17.385 < max_lat
    assert min_lon < 78.4867 < max_lon
    assert haversine_km(17.385, 78.4867, max_lat, 78.4867) == pytest.approx(5, rel=1e-3)


def _destination(lat, lon, distance_km, bearing_deg):
    angular = distance_km / 6371.0
    lat_r, lon_r, bearing = math.radians(lat), math.radians(lon), math.radians(bearing_deg)
    lat2 = math.asin(math.sin(lat_r) * math.cos(angular)
                     + math.cos(lat_r) * math.sin(angular) * math.cos(bearing))
    lon2 = lon_r + math.atan2(math.sin(bearing) * math.sin(angular) * math.cos(lat_r),
                              math.cos(angular) - math.sin(lat_r) * math.sin(lat2))
    return math.degrees(lat2), math.degrees(lon2)


@pytest.mark.parametrize("lat", [17.385, 60.0, -72.5])
def test_bounding_box_contains_every_point_on_the_circle(lat):
    radius = 400
    min_lat, max_lat, min_lon, max_lon = bounding_box(lat, 10.0, radius)
    for bearing in range(0, 360, 5):
        point_lat, point_lon = _destination(lat, 10.0, radius * 0.999999, bearing)
        assert min_lat <= point_lat <= max_lat
        assert min_lon <= point_lon <= max_lon


def test_bounding_box_spans_all_longitudes_across_antimeridian():
    _, _, min_lon, max_lon = bounding_box(0.0, 179.99, 50)
    assert (min_lon, max_lon) == (-180.0, 180.0)


def test_bounding_box_spans_all_longitudes_near_pole():
    min_lat, max_lat, min_lon, max_lon = bounding_box(89.9, 0.0, 50)
    assert max_lat == 90.0
    assert (min_lon, max_lon) == (-180.0, 180.0)
