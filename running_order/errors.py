class ScheduleError(Exception):
    """Base class for errors raised while building a running order."""

    pass


class NoPerformancesError(ScheduleError):
    """Raised when there are no performances to schedule."""

    pass


class InvalidSettingError(ScheduleError):
    """Raised when max-in-row, variation count or an environment value is invalid."""

    pass


class MissingColumnError(ScheduleError):
    """Raised when the input table has no performers column."""

    pass


class SheetsUnavailableError(ScheduleError):
    """Raised when a Google Sheets operation is requested without a connected spreadsheet."""
