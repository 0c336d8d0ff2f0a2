"""
Domain errors raised by the geocoder, stores and workflows.
Routers translate them into HTTP responses.
"""


class PotholeTrackerError(Exception):
    """Base class for every error the service raises on purpose."""


class InvalidInput(PotholeTrackerError):
    pass


class GeocodeUnavailable(PotholeTrackerError):
    """Provider failed, returned a non-OK status, or is not configured."""


class DuplicateVote(PotholeTrackerError):
    def __init__(self, vote_type):
        self.vote_type = vote_type
        super().__init__(f"You have already {vote_type}d this pothole")


class Forbidden(PotholeTrackerError):
    """Conditional write touched zero rows: record is missing or owned by someone else."""


class NotFound(PotholeTrackerError):
    pass


class GeocoderNotConfigured(GeocodeUnavailable):
    """Provider credential is missing."""
