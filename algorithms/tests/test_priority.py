from datetime import datetime, timedelta, timezone as dt_timezone
from types import SimpleNamespace

from django.test import SimpleTestCase

from algorithms.priority import (
    calculate_blood_rarity_score,
    calculate_time_score,
    calculate_units_score,
    calculate_urgency_score,
    run_priority_algorithm,
)

NOW = datetime(2026, 10, 18, 12, 0, tzinfo=dt_timezone.utc)


def emergency(urgency, hours_ago, units, group):
    return SimpleNamespace(
        urgency=urgency,
        created_at=NOW - timedelta(hours=hours_ago),
        units_required=units,
        blood_group=group,
    )


class PriorityAlgorithmTests(SimpleTestCase):
    def test_empty(self):
        self.assertEqual(run_priority_algorithm([], now=NOW), [])
        self.assertEqual(run_priority_algorithm(None, now=NOW), [])

    def test_levels_and_order(self):
        urgent = emergency('critical', 30, 5, 'AB-')
        routine = emergency('low', 0, 1, 'O+')
        ranked = run_priority_algorithm([routine, urgent], now=NOW)

        self.assertIs(ranked[0]['request'], urgent)
        self.assertEqual(ranked[0]['priority_score'], 100.0)
        self.assertEqual(ranked[0]['priority_level'], 'critical')
        # 25*0.4 + 0 + 20*0.2 + 30*0.1
        self.assertEqual(ranked[1]['priority_score'], 17.0)
        self.assertEqual(ranked[1]['priority_level'], 'low')

    def test_older_request_wins_a_tie(self):
        newer = emergency('high', 2, 2, 'A+')
        older = emergency('high', 2.5, 2, 'A+')
        ranked = run_priority_algorithm([newer, older], now=NOW)
        self.assertIs(ranked[0]['request'], older)

    def test_urgency_scores(self):
        self.assertEqual(calculate_urgency_score('critical'), 100)
        self.assertEqual(calculate_urgency_score('low'), 25)

    def test_time_score_accepts_naive_datetimes(self):
        created = datetime(2026, 10, 18, 5, 0)
        self.assertEqual(calculate_time_score(created, datetime(2026, 10, 18, 12, 0)), 60)

    def test_rarest_group(self):
        self.assertEqual(calculate_blood_rarity_score('ab-'), 100)

    def test_waiting_time_thresholds(self):
        for hours, expected in ((0.5, 0), (1, 20), (2.9, 20), (3, 40), (6, 60), (12, 80), (23.9, 80), (24, 100), (72, 100)):
            self.assertEqual(calculate_time_score(NOW - timedelta(hours=hours), NOW), expected, hours)

    def test_units_thresholds(self):
        for units, expected in ((1, 20), (2, 40), (3, 60), (4, 80), (5, 100), (12, 100)):
            self.assertEqual(calculate_units_score(units), expected, units)
