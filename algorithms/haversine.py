"""
Haversine Algorithm - Calculate distance between two geographical points
Used to rank donors nearest to the place requesting blood
"""

import math

# Radius of earth in kilometers
EARTH_RADIUS_KM = 6371


def haversine_distance(lat1, lon1, lat2, lon2):
    """
    Calculate straight-line distance between two points.
    Note: This is "as the crow flies" distance, not road distance.

    Args:
        lat1, lon1: Latitude and longitude of point 1 (request)
        lat2, lon2: Latitude and longitude of point 2 (donor)

    Returns:
        Distance in kilometers
    """
    # Convert decimal degrees to radians
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    dlat = lat2 - lat1
    dlon = lon2 - lon1

    a = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    c = 2 * math.asin(math.sqrt(min(a, 1.0)))

    return c * EARTH_RADIUS_KM


def location_distance(origin, destination):
    """
    Distance between two Location values, or None when either side
    has no coordinates.
    """
    if not origin.has_coordinates or not destination.has_coordinates:
        return None
    lat1, lon1 = origin.coordinates
    lat2, lon2 = destination.coordinates
    return haversine_distance(lat1, lon1, lat2, lon2)
