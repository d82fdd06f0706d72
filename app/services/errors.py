"""Exception types raised by the timing analysis and report services."""


class TimingEstimationError(Exception):
    """Base class for failures while estimating cast timing."""


class InsufficientDataError(TimingEstimationError):
    """Raised when the filtered cast samples cannot support an estimate."""


class EventOrderError(TimingEstimationError):
    """Raised when an event stream is not ordered by timestamp."""

    def __init__(self, previous_ms: int, timestamp_ms: int):
        super().__init__(
            f"Event at {timestamp_ms}ms arrived after an event at {previous_ms}ms"
        )
        self.previous_ms = previous_ms
        self.timestamp_ms = timestamp_ms


class ReportError(Exception):
    """Base class for report fetch failures."""


class ReportNotFoundError(ReportError):
    """The requested report does not exist or is private."""

    def __init__(self, code: str):
        super().__init__(f"Report {code} does not exist or is private")
        self.code = code


class UnknownApiError(ReportError):
    """The log API failed for a reason we do not recognise."""
