"""Exception hierarchy for desk control."""


class DeskError(Exception):
    """Base exception for desk controller errors."""

    pass


# === CONNECTION ===


class DeskConnectionError(DeskError):
    """Raised when the desk cannot be reached."""

    pass


class ScanFailedError(DeskConnectionError):
    """Raised when the BLE scan itself fails."""

    pass


class DeskNotFoundError(DeskConnectionError):
    """Raised when no advertising desk matches the name prefix."""

    pass


class ConnectFailedError(DeskConnectionError):
    """Raised when connecting to a discovered desk fails."""

    pass


class ConnectionLostError(DeskConnectionError):
    """Raised when the link drops while a move is using it."""

    pass


# === COMMUNICATION ===


class DeskCommunicationError(DeskError):
    """Raised when BLE communication fails during operation."""

    pass


class ServiceDiscoveryError(DeskCommunicationError):
    """Raised when the desk's services cannot be enumerated."""

    pass


class EndpointNotFoundError(DeskCommunicationError):
    """Raised when a required characteristic is missing from the desk."""

    def __init__(self, which: str):
        super().__init__(f"{which} characteristic not found")
        self.which = which


class ShortPayloadError(DeskCommunicationError):
    """Raised when a telemetry read returns fewer bytes than needed."""

    def __init__(self, got: int, needed: int):
        super().__init__(f"invalid payload length: {got} (need {needed})")
        self.got = got
        self.needed = needed


class TelemetryReadError(DeskCommunicationError):
    """Raised when reading the height characteristic fails."""

    pass


# === MOTION ===


class DeskMotionError(DeskError):
    """Raised when a move cannot be started or completed."""

    pass


class OutOfRangeError(DeskMotionError):
    """Raised when a target height lies outside the desk's travel."""

    def __init__(self, target_mm: float, min_mm: float, max_mm: float):
        super().__init__(
            f"Target height {target_mm / 10:.1f} cm out of range "
            f"({min_mm / 10:.0f} - {max_mm / 10:.0f} cm)"
        )
        self.target_mm = target_mm


class MoveTimeoutError(DeskMotionError):
    """Raised when the desk does not settle at the target before the deadline."""

    pass


class AlreadyMovingError(DeskMotionError):
    """Raised when a move is requested while another one is in flight."""

    pass
