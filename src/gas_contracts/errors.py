"""
Errors surfaced to callers of the report builders and CLIs.
"""


class GasReportError(Exception):
    """Base class for every error raised by gas_contracts."""


class InvalidDateWindowError(GasReportError, ValueError):
    """A month/range specifier could not be parsed or is inverted."""


class NoActiveContractError(GasReportError, LookupError):
    """No active contract covers the requested organization and window."""

    def __init__(self, organization_id=None, start=None, end=None):
        self.organization_id = organization_id
        self.start = start
        self.end = end
        if organization_id is None:
            message = "No active contract supplied for the requested window"
        else:
            message = (
                f"No active contract for organization {organization_id} "
                f"between {start} and {end}"
            )
        super().__init__(message)


class AmbiguousContractError(GasReportError):
    """More than one active contract matched; the caller must pick one."""


class RecordLoadError(GasReportError):
    """A record file is missing or lacks required columns."""
