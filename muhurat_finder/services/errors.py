"""Error taxonomy shared by the ephemeris, panchang and muhurat services."""


class MuhuratError(Exception):
    """Base class for every error raised by the muhurat engine."""


class InvalidAngle(MuhuratError, ValueError):
    """A longitude handed to a calendrical function is not a sane finite number."""


class InvalidInstant(MuhuratError, ValueError):
    """A datetime or Julian Day cannot be placed on the engine's time axis."""


class InvertedDayWindow(MuhuratError):
    """Sunrise is not strictly before sunset for the requested date/location."""


class EphemerisUnavailable(MuhuratError):
    """The ephemeris provider could not be reached or returned an error."""


class PartialSnapshotFailure(EphemerisUnavailable):
    """Some bodies of a snapshot were returned and others were not."""


class UnknownEventCategory(MuhuratError, KeyError):
    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Unknown event category: {self.key!r}"


class RankingCancelled(MuhuratError):
    """The caller cancelled a horizon scan between two candidate days."""
