# algorithms/scoring.py
import numpy as np

from algorithms.haversine import location_distance
from algorithms.records import MatchResult, Urgency

MAX_RATING = 50

# Distance (km) at which proximity drops to half
PROXIMITY_HALF_KM = 10.0

# Weights per urgency, each row sums to 1:
# exact group match, verified, rating, proximity
URGENCY_WEIGHTS = {
    Urgency.LOW:      np.array([0.35, 0.25, 0.25, 0.15]),
    Urgency.MEDIUM:   np.array([0.35, 0.20, 0.20, 0.25]),
    Urgency.HIGH:     np.array([0.35, 0.15, 0.15, 0.35]),
    Urgency.CRITICAL: np.array([0.30, 0.10, 0.10, 0.50]),
}


def proximity_score(distance_km):
    """
    Map a distance to 0-1, closer is higher.
    Unknown distance is the lowest tier (0).
    """
    if distance_km is None:
        return 0.0
    return 1.0 / (1.0 + distance_km / PROXIMITY_HALF_KM)


def rating_score(rating):
    return min(max(rating or 0, 0), MAX_RATING) / MAX_RATING


def build_criteria_matrix(donors, distances, required_group):
    """
    One row per donor:
    1. Exact blood group match (1/0)
    2. Verified (1/0)
    3. Rating (0-1)
    4. Proximity (0-1)
    """
    rows = []
    for donor, distance in zip(donors, distances):
        rows.append([
            1.0 if donor.blood_group is required_group else 0.0,
            1.0 if donor.is_verified else 0.0,
            rating_score(donor.rating),
            proximity_score(distance),
        ])
    return np.array(rows, dtype=float).reshape(len(rows), 4)


def ranking_key(result):
    donor = result.donor
    return (
        -result.score,
        result.distance_km is None,
        result.distance_km if result.distance_km is not None else 0.0,
        -(donor.rating or 0),
        donor.id,
    )


def rank_candidates(donors, request):
    """
    Score and sort donors that already passed the compatibility and
    eligibility filters.

    Args:
        donors: iterable of DonorRecord
        request: RequestDescriptor

    Returns:
        New list of MatchResult, best candidate first
    """
    donor_list = list(donors)
    if not donor_list:
        return []

    distances = [location_distance(request.location, donor.location) for donor in donor_list]
    matrix = build_criteria_matrix(donor_list, distances, request.required_group)
    scores = matrix @ URGENCY_WEIGHTS[request.urgency]

    results = [
        MatchResult(
            donor=donor,
            compatible=True,
            eligible=True,
            distance_km=distance,
            score=float(score),
            exact_match=bool(row[0]),
        )
        for donor, distance, score, row in zip(donor_list, distances, scores, matrix)
    ]
    results.sort(key=ranking_key)
    return results
