"""Windowed average band-power features for continuous EEG recordings."""

from .config import AveragePowerConfig, BandDefinition, DEFAULT_CONFIG
from .errors import (
    AveragePowerError,
    ConfigError,
    ExtractionFailure,
    FilterError,
    InterpolationError,
    UnknownEventTypeWarning,
)
from .recording import ChannelInfo, Event, Recording, load_recording
from .channels import Headset, align_to_headset, drop_external_channels, get_common_channels
from .filtering import BandPassFilter, FirBandPassFilter, MneBandPassFilter
from .interpolation import Interpolator, SphericalSplineInterpolator
from .features import ExclusionMask, FeatureSet
from .extraction import ExtractionResult, extract_average_power

__all__ = [
    "AveragePowerConfig",
    "BandDefinition",
    "DEFAULT_CONFIG",
    "AveragePowerError",
    "ConfigError",
    "ExtractionFailure",
    "FilterError",
    "InterpolationError",
    "UnknownEventTypeWarning",
    "ChannelInfo",
    "Event",
    "Recording",
    "load_recording",
    "Headset",
    "align_to_headset",
    "drop_external_channels",
    "get_common_channels",
    "BandPassFilter",
    "FirBandPassFilter",
    "MneBandPassFilter",
    "Interpolator",
    "SphericalSplineInterpolator",
    "ExclusionMask",
    "FeatureSet",
    "ExtractionResult",
    "extract_average_power",
]
