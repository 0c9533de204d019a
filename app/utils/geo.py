import math

EARTH_RADIUS_METERS = 6371000.0


def valid_coordinates(latitude, longitude) -> bool:
    return -90 <= latitude <= 90 and -180 <= longitude <= 180


def haversine_meters(lat1, lon1, lat2, lon2) -> float:
    """Great-circle distance between two points in meters."""
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def bounding_box(latitude, longitude, radius_meters):
    """
    Returns (min_lat, max_lat, min_lon, max_lon) enclosing the circle, used to
    narrow candidate rows in SQL before the exact distance check.

    Degrees come from the same sphere as ``haversine_meters`` so every point
    within ``radius_meters`` lies inside the box.
    """
    d_lat = math.degrees(radius_meters / EARTH_RADIUS_METERS)
    max_lat = latitude + d_lat
    min_lat = latitude - d_lat
    if max_lat >= 90 or min_lat <= -90:
        # The circle reaches a pole, so it spans every longitude
        return max(-90.0, min_lat), min(90.0, max_lat), -180.0, 180.0

    # Widest longitude span of the circle, reached away from the centre's parallel
    d_lon = math.degrees(math.asin(
        min(1.0, math.sin(radius_meters / EARTH_RADIUS_METERS) / math.cos(math.radians(latitude)))
    ))
    return min_lat, max_lat, longitude - d_lon, longitude + d_lon
