import math

EARTH_RADIUS_MILES = 3959.0


def calculate_distance_miles(lat1, lon1, lat2, lon2) -> float | None:
    """Great-circle distance in miles, registered as a SQL function on every connection.

    Returns None when any coordinate is missing so SQL comparisons evaluate to NULL.
    """
    if lat1 is None or lon1 is None or lat2 is None or lon2 is None:
        return None
    lat1, lon1, lat2, lon2 = (float(v) for v in (lat1, lon1, lat2, lon2))
    dlat = math.radians(lat2 - lat1)
    dlon = math.radians(lon2 - lon1)
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c
