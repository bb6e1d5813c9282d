"""Errors raised by the service layer and turned into ``{"error": ...}`` responses."""


class LeagueBackendError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.details = {}


class ValidationError(LeagueBackendError):
    """Malformed input, rejected before any database access."""
    status_code = 400


class NotFoundError(LeagueBackendError):
    status_code = 404


class ReadFailure(LeagueBackendError):
    """A read failed. Nothing was mutated, so the call is safe to retry."""
    status_code = 500


class WriteFailure(LeagueBackendError):
    """A write failed. The caller decides whether to retry."""
    status_code = 500


class StandingsRecalculationError(LeagueBackendError):
    """The result was saved but the league table could not be rebuilt and is stale."""
    status_code = 500

    def __init__(self, message: str, league_code: str):
        super().__init__(message)
        self.league_code = league_code
        self.details = {"result_saved": True, "league_code": league_code}
