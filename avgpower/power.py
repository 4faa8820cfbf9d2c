"""
Sub-band power averaged over fixed-length sub-windows.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from .config import BandDefinition
from .filtering import BandPassFilter
from .recording import Recording

logger = logging.getLogger(__name__)


def seconds_to_frames(seconds: float, sfreq: float) -> int:
    """Convert a duration to samples, rounding halves away from zero."""
    value = seconds * sfreq
    return int(np.sign(value) * np.floor(abs(value) + 0.5))


def sub_window_starts(n_times: int, sub_frames: int, step_frames: int) -> np.ndarray:
    """First sample of every sub-window that fits entirely in ``n_times``."""
    if sub_frames <= 0 or step_frames <= 0:
        raise ValueError(
            f"Sub-window ({sub_frames}) and step ({step_frames}) must span "
            "at least one sample."
        )
    if n_times < sub_frames:
        return np.zeros(0, dtype=int)
    return np.arange(0, n_times - sub_frames + 1, step_frames)


def zscore_power(data: np.ndarray) -> np.ndarray:
    """
    Z-normalize each channel across time and square it.

    Unit variance per channel removes amplitude-scale differences between
    channels and subjects.
    """

    mean = data.mean(axis=1, keepdims=True)
    std = data.std(axis=1, ddof=1, keepdims=True)
    with np.errstate(divide="ignore", invalid="ignore"):
        normalized = (data - mean) / std
    return normalized**2


def average_sub_windows(
    power: np.ndarray, starts: np.ndarray, sub_frames: int
) -> np.ndarray:
    """Mean power per channel for each sub-window: (n_channels, len(starts))."""
    if len(starts) == 0:
        return np.zeros((power.shape[0], 0))
    cumulative = np.cumsum(
        np.concatenate([np.zeros((power.shape[0], 1)), power], axis=1), axis=1
    )
    return (cumulative[:, starts + sub_frames] - cumulative[:, starts]) / sub_frames


def extract_band_power(
    recording: Recording,
    subbands: Sequence[BandDefinition],
    filter_order: int,
    sub_window_length: float,
    step: float,
    band_filter: BandPassFilter,
) -> np.ndarray:
    """
    Compute average power per channel, sub-band and sub-window.

    Returns:
        features: shape (n_channels * n_bands, n_sub_windows), bands stacked
        in the order of ``subbands``.
    """

    sub_frames = seconds_to_frames(sub_window_length, recording.sfreq)
    step_frames = seconds_to_frames(step, recording.sfreq)
    starts = sub_window_starts(recording.n_times, sub_frames, step_frames)

    per_band = []
    for band in subbands:
        logger.debug(
            "Filtering band %s (%g-%g Hz, order %d)",
            band.name,
            band.fmin,
            band.fmax,
            filter_order,
        )
        filtered = band_filter.apply(
            recording.data, recording.sfreq, band, filter_order
        )
        per_band.append(average_sub_windows(zscore_power(filtered), starts, sub_frames))

    return np.concatenate(per_band, axis=0)
