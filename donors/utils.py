from django.utils import timezone

from algorithms.records import DonorRecord, Location

DONOR_CODE_PREFIX = 'PULSECARE'


def generate_donor_code(user_id, year=None):
    """PULSECARE-<year>-<user id padded to 4 digits>"""
    if year is None:
        year = timezone.localdate().year
    return f"{DONOR_CODE_PREFIX}-{year}-{user_id:04d}"


def format_rating(rating):
    """Stored ratings are tenths of a star: 45 -> '4.5'"""
    return f"{(rating or 0) / 10:.1f}"


def profile_location(district, latitude, longitude):
    coordinates = None
    if latitude is not None and longitude is not None:
        coordinates = (latitude, longitude)
    return Location(district=district or '', coordinates=coordinates)


def to_donor_record(profile):
    """Map a DonorProfile row onto the read-only record the matching engine consumes"""
    return DonorRecord(
        id=profile.pk,
        blood_group=profile.blood_group,
        is_available=profile.is_available,
        last_donation_date=profile.last_donation_date,
        is_verified=profile.is_verified,
        rating=profile.rating,
        location=profile_location(profile.district, profile.latitude, profile.longitude),
    )
