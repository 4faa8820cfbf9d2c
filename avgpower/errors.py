"""
Exceptions and failure records raised or returned by the extraction.
"""

from __future__ import annotations

from dataclasses import dataclass


class AveragePowerError(Exception):
    """Base class for feature extraction errors."""


class ConfigError(AveragePowerError, ValueError):
    """Invalid extraction options."""


class FilterError(AveragePowerError):
    """Band-pass filtering could not be applied to the recording."""


class InterpolationError(AveragePowerError):
    """The recording could not be mapped onto the target headset."""


class UnknownEventTypeWarning(UserWarning):
    """An event type is neither numeric nor a string."""


@dataclass(frozen=True)
class ExtractionFailure:
    """Error record attached to a failed extraction."""

    message: str
    status: str = "unprocessed"
    exception: BaseException | None = None

    def raise_error(self) -> None:
        if self.exception is not None:
            raise AveragePowerError(self.message) from self.exception
        raise AveragePowerError(self.message)
