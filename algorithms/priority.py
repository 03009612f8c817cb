# algorithms/priority.py
from django.utils import timezone

from algorithms.records import BloodGroup, Urgency


def run_priority_algorithm(emergency_requests, now=None):
    """
    Priority Algorithm: Ranks emergency requests by urgency, time waiting, units needed, and blood rarity
    Returns a list of dicts with request data and priority info
    """
    # Accept either a queryset or a plain list; normalize to list
    requests_list = list(emergency_requests) if emergency_requests is not None else []
    if not requests_list:
        return []

    if now is None:
        now = timezone.now()

    ranked_list = []

    for request in requests_list:
        urgency_score = calculate_urgency_score(request.urgency)
        time_score = calculate_time_score(request.created_at, now)
        units_score = calculate_units_score(request.units_required)
        blood_rarity_score = calculate_blood_rarity_score(request.blood_group)

        # Weighted priority score (0-100)
        priority_score = (
            urgency_score * 0.40 +
            time_score * 0.30 +
            units_score * 0.20 +
            blood_rarity_score * 0.10
        )

        if priority_score >= 80:
            priority_level = 'critical'
        elif priority_score >= 60:
            priority_level = 'high'
        elif priority_score >= 40:
            priority_level = 'medium'
        else:
            priority_level = 'low'

        ranked_list.append({
            'request': request,
            'priority_score': round(priority_score, 1),
            'priority_level': priority_level,
            'urgency_score': urgency_score,
            'time_score': time_score,
            'units_score': units_score,
            'blood_rarity_score': blood_rarity_score,
        })

    # Highest first; older requests win ties
    ranked_list.sort(key=lambda x: (-x['priority_score'], x['request'].created_at))

    return ranked_list


URGENCY_SCORES = {
    Urgency.CRITICAL: 100,
    Urgency.HIGH: 75,
    Urgency.MEDIUM: 50,
    Urgency.LOW: 25,
}


def calculate_urgency_score(urgency):
    """
    Convert urgency level to a score (0-100)
    """
    return URGENCY_SCORES[Urgency.parse(urgency)]


# (minimum value, score) pairs, highest threshold first
WAITING_HOURS_SCORES = ((24, 100), (12, 80), (6, 60), (3, 40), (1, 20))
UNITS_SCORES = ((5, 100), (4, 80), (3, 60), (2, 40))


def threshold_score(value, table, floor):
    for minimum, score in table:
        if value >= minimum:
            return score
    return floor


def calculate_time_score(created_at, now):
    """
    Score how long the request has been waiting (0-100).
    Under an hour scores 0, a day or more scores 100.
    """
    if timezone.is_naive(created_at):
        created_at = timezone.make_aware(created_at)
    if timezone.is_naive(now):
        now = timezone.make_aware(now)

    hours_waiting = (now - created_at).total_seconds() / 3600
    return threshold_score(hours_waiting, WAITING_HOURS_SCORES, 0)


def calculate_units_score(units_required):
    """Single-unit requests score 20, five or more score 100"""
    return threshold_score(units_required, UNITS_SCORES, 20)


BLOOD_RARITY_SCORES = {
    BloodGroup.AB_NEG: 100,  # Rarest
    BloodGroup.B_NEG: 90,
    BloodGroup.AB_POS: 80,
    BloodGroup.A_NEG: 70,
    BloodGroup.O_NEG: 60,   # Universal donor, always in demand
    BloodGroup.B_POS: 50,
    BloodGroup.A_POS: 40,
    BloodGroup.O_POS: 30,   # Most common
}


def calculate_blood_rarity_score(blood_group):
    """
    Calculate score based on blood group rarity (0-100)
    Rarer blood groups get higher scores
    """
    return BLOOD_RARITY_SCORES[BloodGroup.parse(blood_group)]
