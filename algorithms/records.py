"""
Plain value types passed in and out of the matching engine.
Callers map their own storage (Django models, API payloads) into these.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any, Optional, Tuple

from algorithms.exceptions import InvalidBloodGroup, InvalidRequest


class BloodGroup(str, Enum):
    O_NEG = 'O-'
    O_POS = 'O+'
    A_NEG = 'A-'
    A_POS = 'A+'
    B_NEG = 'B-'
    B_POS = 'B+'
    AB_NEG = 'AB-'
    AB_POS = 'AB+'

    @classmethod
    def parse(cls, value) -> 'BloodGroup':
        """
        Turn 'A+', ' ab- ' or an existing BloodGroup into a BloodGroup.
        Raises InvalidBloodGroup for anything else.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise InvalidBloodGroup(value)
        try:
            return cls(value.strip().upper())
        except ValueError:
            raise InvalidBloodGroup(value) from None

    def __str__(self):
        return self.value


class Urgency(str, Enum):
    LOW = 'low'
    MEDIUM = 'medium'
    HIGH = 'high'
    CRITICAL = 'critical'

    @classmethod
    def parse(cls, value) -> 'Urgency':
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise InvalidRequest(f"Unknown urgency: {value!r}") from None

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class Location:
    district: str = ''
    coordinates: Optional[Tuple[float, float]] = None

    @property
    def has_coordinates(self) -> bool:
        return self.coordinates is not None


@dataclass(frozen=True)
class DonorRecord:
    id: Any
    blood_group: BloodGroup
    is_available: bool = True
    last_donation_date: Optional[date] = None
    is_verified: bool = False
    rating: int = 0  # tenths of a star, 0-50
    location: Location = field(default_factory=Location)

    def __post_init__(self):
        object.__setattr__(self, 'blood_group', BloodGroup.parse(self.blood_group))
        # Cooldown is counted in calendar days, so drop any time of day
        if isinstance(self.last_donation_date, datetime):
            object.__setattr__(self, 'last_donation_date', self.last_donation_date.date())


@dataclass(frozen=True)
class RequestDescriptor:
    required_group: BloodGroup
    units_required: int = 1
    urgency: Urgency = Urgency.MEDIUM
    location: Location = field(default_factory=Location)

    def __post_init__(self):
        if self.required_group is None or self.required_group == '':
            raise InvalidRequest("Request is missing the required blood group")
        object.__setattr__(self, 'required_group', BloodGroup.parse(self.required_group))
        object.__setattr__(self, 'urgency', Urgency.parse(self.urgency))


@dataclass(frozen=True)
class EligibilityStatus:
    eligible: bool
    reason: Optional[str] = None  # 'unavailable' or 'cooldown'
    days_until_eligible: Optional[int] = None
    next_eligible_date: Optional[date] = None

    def __bool__(self):
        return self.eligible


@dataclass(frozen=True)
class MatchResult:
    donor: DonorRecord
    compatible: bool
    eligible: bool
    distance_km: Optional[float]
    score: float
    exact_match: bool = False

    @property
    def match_percent(self) -> int:
        """Score as the whole percentage shown on emergency alerts"""
        return int(round(self.score * 100))
