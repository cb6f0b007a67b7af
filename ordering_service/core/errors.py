"""Domain exceptions shared by services and the HTTP layer."""


class ConfigurationInvalidError(Exception):
    """Raised when a branch's ordering configuration breaks its invariants."""

    def __init__(self, message: str, *, branch_id: int | None = None) -> None:
        super().__init__(message)
        self.branch_id = branch_id


class BranchNotFoundError(Exception):
    """Raised when a branch id does not resolve to an active branch."""


class OrderVolumeUnavailableError(Exception):
    """Raised when the order volume source cannot answer in time."""


class AvailabilityCheckCancelledError(Exception):
    """Raised when a check is cancelled before the volume query completed."""
