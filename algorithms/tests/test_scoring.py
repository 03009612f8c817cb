from django.test import SimpleTestCase

from algorithms.haversine import haversine_distance, location_distance
from algorithms.records import DonorRecord, Location, RequestDescriptor
from algorithms.scoring import URGENCY_WEIGHTS, proximity_score, rank_candidates

DHAKA = (23.8103, 90.4125)
ABOUT_1_KM_NORTH = (23.8193, 90.4125)
ABOUT_50_KM_NORTH = (24.2603, 90.4125)


def donor(id, group='A+', verified=False, rating=0, coordinates=None):
    return DonorRecord(
        id=id,
        blood_group=group,
        is_verified=verified,
        rating=rating,
        location=Location(district='Dhaka', coordinates=coordinates),
    )


def request(group='A+', urgency='medium', coordinates=DHAKA):
    return RequestDescriptor(
        required_group=group,
        units_required=1,
        urgency=urgency,
        location=Location(district='Dhaka', coordinates=coordinates),
    )


class HaversineTests(SimpleTestCase):
    def test_same_point_is_zero(self):
        self.assertEqual(haversine_distance(*DHAKA, *DHAKA), 0)

    def test_one_degree_of_latitude(self):
        self.assertAlmostEqual(haversine_distance(0, 0, 1, 0), 111.19, places=1)

    def test_missing_coordinates_give_none(self):
        self.assertIsNone(location_distance(Location('Dhaka', DHAKA), Location('Dhaka')))


class ScoringTests(SimpleTestCase):
    def test_weights_sum_to_one(self):
        for urgency, weights in URGENCY_WEIGHTS.items():
            self.assertAlmostEqual(float(weights.sum()), 1.0, msg=str(urgency))

    def test_proximity_decreases_with_distance(self):
        self.assertEqual(proximity_score(0), 1.0)
        self.assertGreater(proximity_score(1), proximity_score(20))
        self.assertEqual(proximity_score(None), 0.0)

    def test_exact_match_beats_universal_donor_of_equal_standing(self):
        universal = donor(1, group='O-', verified=True, rating=40)
        exact = donor(2, group='A+', verified=True, rating=40)
        for urgency in ('low', 'medium', 'high', 'critical'):
            ranked = rank_candidates([universal, exact], request(urgency=urgency))
            self.assertEqual([r.donor.id for r in ranked], [2, 1], msg=urgency)
            self.assertTrue(ranked[0].exact_match)
            self.assertFalse(ranked[1].exact_match)

    def test_critical_urgency_favours_proximity(self):
        near = donor(1, verified=False, rating=10, coordinates=ABOUT_1_KM_NORTH)
        far = donor(2, verified=True, rating=50, coordinates=ABOUT_50_KM_NORTH)

        critical = rank_candidates([near, far], request(urgency='critical'))
        self.assertEqual(critical[0].donor.id, 1)

        low = rank_candidates([near, far], request(urgency='low'))
        self.assertEqual(low[0].donor.id, 2)

    def test_distance_is_annotated(self):
        ranked = rank_candidates([donor(1, coordinates=ABOUT_1_KM_NORTH), donor(2)], request())
        by_id = {r.donor.id: r for r in ranked}
        self.assertAlmostEqual(by_id[1].distance_km, 1.0, places=1)
        self.assertIsNone(by_id[2].distance_km)

    def test_unknown_distance_ranks_after_known(self):
        ranked = rank_candidates([donor(1), donor(2, coordinates=ABOUT_50_KM_NORTH)], request())
        self.assertEqual([r.donor.id for r in ranked], [2, 1])

    def test_request_without_coordinates_keeps_everyone(self):
        ranked = rank_candidates(
            [donor(1, coordinates=DHAKA), donor(2)],
            request(coordinates=None),
        )
        self.assertEqual(len(ranked), 2)
        self.assertTrue(all(r.distance_km is None for r in ranked))

    def test_ties_break_on_rating_then_id(self):
        pool = [donor(9, rating=30), donor(3, rating=30), donor(5, rating=30)]
        first = [r.donor.id for r in rank_candidates(pool, request())]
        second = [r.donor.id for r in rank_candidates(list(reversed(pool)), request())]
        self.assertEqual(first, [3, 5, 9])
        self.assertEqual(first, second)

    def test_empty_input(self):
        self.assertEqual(rank_candidates([], request()), [])

    def test_input_is_not_reordered(self):
        pool = [donor(1, rating=0), donor(2, rating=50)]
        rank_candidates(pool, request())
        self.assertEqual([d.id for d in pool], [1, 2])

    def test_match_percent(self):
        ranked = rank_candidates([donor(1, verified=True, rating=50, coordinates=DHAKA)], request())
        self.assertEqual(ranked[0].match_percent, 100)
