# simdash/utils/errors.py


class SimdashError(RuntimeError):
    """Base class for errors raised inside simdash."""


class ConfigError(SimdashError):
    """
    Raised for invalid config values (negative intervals, empty commands, ...).
    Should NOT print traceback.
    """


class SnapshotFetchError(SimdashError):
    """
    A required snapshot part could not be fetched or decoded.

    The whole refresh batch is discarded when this is raised;
    the benchmark part never raises it.
    """

    def __init__(self, part: str, reason: str):
        super().__init__(f"{part}: {reason}")
        self.part = part
        self.reason = reason
