import logging
from datetime import date, datetime

from algorithms.blood_compatibility import is_compatible
from algorithms.eligibility import is_donor_eligible
from algorithms.exceptions import InvalidRequest
from algorithms.records import RequestDescriptor
from algorithms.scoring import rank_candidates

logger = logging.getLogger(__name__)


def validate_request(request, limit=None):
    if not isinstance(request, RequestDescriptor):
        raise InvalidRequest(f"Expected a RequestDescriptor, got {type(request).__name__}")
    units = request.units_required
    if isinstance(units, bool) or not isinstance(units, int) or units < 1:
        raise InvalidRequest(f"units_required must be a whole number of at least 1, got {units!r}")
    if limit is not None and (isinstance(limit, bool) or not isinstance(limit, int) or limit < 0):
        raise InvalidRequest(f"limit must be a non-negative whole number, got {limit!r}")


def match_donors(request, donors, limit=None, reference_date=None):
    """
    Match and rank donors for a blood request.
    Steps:
    1. Keep donors whose blood group can serve the request
    2. Keep donors eligible on reference_date
    3. Score and sort (best first)
    4. Cap to limit

    Raises InvalidRequest / InvalidBloodGroup before looking at any donor.
    """
    validate_request(request, limit)
    if reference_date is None:
        reference_date = date.today()
    elif isinstance(reference_date, datetime):
        reference_date = reference_date.date()

    donor_list = list(donors)
    compatible = [d for d in donor_list if is_compatible(d.blood_group, request.required_group)]
    eligible = [d for d in compatible if is_donor_eligible(d, reference_date)]

    ranked = rank_candidates(eligible, request)
    if limit is not None:
        ranked = ranked[:limit]

    logger.info(
        f"{len(ranked)} donors matched for {request.required_group} "
        f"({request.urgency}): {len(donor_list)} in pool, "
        f"{len(compatible)} compatible, {len(eligible)} eligible"
    )
    return ranked
