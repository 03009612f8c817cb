"""
Errors raised by the matching engine.
The API layer turns any MatchingError into a 400 response.
"""


class MatchingError(ValueError):
    """Base class for every error the matching engine raises"""
    code = 'matching_error'


class InvalidBloodGroup(MatchingError):
    code = 'invalid_blood_group'

    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown blood group: {value!r}")


class InvalidRequest(MatchingError):
    code = 'invalid_request'
