import math

EARTH_RADIUS_KM = 6371.0


def haversine_km(lat1, lon1, lat2, lon2) -> float:
    """Great-circle distance using the spherical law of cosines."""
    lat1_r = math.radians(float(lat1))
    lat2_r = math.radians(float(lat2))
    delta_lon = math.radians(float(lon2) - float(lon1))
    cosine = (
        math.cos(lat1_r) * math.cos(lat2_r) * math.cos(delta_lon)
        + math.sin(lat1_r) * math.sin(lat2_r)
    )
    # rounding can push identical points just past 1
    cosine = max(-1.0, min(1.0, cosine))
    return EARTH_RADIUS_KM * math.acos(cosine)


def bounding_box(lat, lon, radius_km):
    """(min_lat, max_lat, min_lon, max_lon) enclosing the radius.

    Longitude spans the full range near the poles and when the box would
    cross the antimeridian, since a single BETWEEN cannot wrap.
    """
    lat = float(lat)
    lon = float(lon)
    angular = radius_km / EARTH_RADIUS_KM
    lat_delta = math.degrees(angular)
    min_lat, max_lat = lat - lat_delta, lat + lat_delta
    if angular >= math.pi / 2 or min_lat <= -90.0 or max_lat >= 90.0:
        return max(min_lat, -90.0), min(max_lat, 90.0), -180.0, 180.0
    ratio = math.sin(angular) / math.cos(math.radians(lat))
    if ratio >= 1.0:
        return min_lat, max_lat, -180.0, 180.0
    lon_delta = math.degrees(math.asin(ratio))
    if lon - lon_delta < -180.0 or lon + lon_delta > 180.0:
        return min_lat, max_lat, -180.0, 180.0
    return min_lat, max_lat, lon - lon_delta, lon + lon_delta
