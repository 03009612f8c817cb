import logging
from datetime import date, datetime, timedelta

from algorithms.records import DonorRecord, EligibilityStatus

# Constants
DONATION_COOLDOWN_DAYS = 120

REASON_UNAVAILABLE = 'unavailable'
REASON_COOLDOWN = 'cooldown'

# Logger
logger = logging.getLogger(__name__)


def days_since_last_donation(last_donation_date, reference_date) -> int:
    """
    Whole calendar days between the last donation and reference_date.
    A donation dated in the future counts as 0 days.
    """
    return max((reference_date - last_donation_date).days, 0)


def check_eligibility(donor: DonorRecord, reference_date: date = None) -> EligibilityStatus:
    """
    Check whether a donor may donate on reference_date, ignoring blood group.

    Rules (first failing rule wins):
    - Donor has opted in (is_available)
    - Donor has never donated, or
    - Donor's last donation is at least 120 days before reference_date

    Args:
        donor (DonorRecord): Donor to check
        reference_date (date): Day to evaluate; today when omitted

    Returns:
        EligibilityStatus: truthy when eligible, with reason and
        days_until_eligible filled in otherwise
    """
    if reference_date is None:
        reference_date = date.today()
    elif isinstance(reference_date, datetime):
        reference_date = reference_date.date()

    if not donor.is_available:
        return EligibilityStatus(eligible=False, reason=REASON_UNAVAILABLE)

    if donor.last_donation_date is None:
        return EligibilityStatus(eligible=True)

    days_since = days_since_last_donation(donor.last_donation_date, reference_date)
    if days_since >= DONATION_COOLDOWN_DAYS:
        return EligibilityStatus(eligible=True)

    if donor.last_donation_date > reference_date:
        logger.warning(f"Donor {donor.id} has a future last donation date {donor.last_donation_date}")

    days_until = DONATION_COOLDOWN_DAYS - days_since
    return EligibilityStatus(
        eligible=False,
        reason=REASON_COOLDOWN,
        days_until_eligible=days_until,
        next_eligible_date=reference_date + timedelta(days=days_until),
    )


def is_donor_eligible(donor: DonorRecord, reference_date: date = None) -> bool:
    return check_eligibility(donor, reference_date).eligible
