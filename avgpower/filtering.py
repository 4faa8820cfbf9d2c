"""
Band-pass filters applied to each sub-band before power extraction.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod

import numpy as np
from mne.filter import filter_data
from scipy import signal

from .config import BandDefinition
from .errors import FilterError

logger = logging.getLogger(__name__)

# Transition width of a Hamming windowed sinc, in units of sfreq / order.
HAMMING_TRANSITION = 3.3


class BandPassFilter(ABC):
    """Filters (n_channels, n_times) data to one frequency band."""

    @abstractmethod
    def apply(
        self, data: np.ndarray, sfreq: float, band: BandDefinition, order: int
    ) -> np.ndarray:
        """Return the filtered copy of ``data``."""


class FirBandPassFilter(BandPassFilter):
    """
    Zero-phase Hamming windowed-sinc FIR filter.

    ``band`` gives the passband edges; cutoff frequencies sit half a
    transition band outside of them. A band starting at 0 Hz is a low-pass,
    a band reaching Nyquist is a high-pass.
    """

    def apply(
        self, data: np.ndarray, sfreq: float, band: BandDefinition, order: int
    ) -> np.ndarray:
        data = np.atleast_2d(data)
        nyquist = sfreq / 2.0
        highpass, lowpass = _band_edges(band, nyquist)
        if not highpass and not lowpass:
            logger.debug("Band %s covers the whole spectrum; not filtering", band.name)
            return data.copy()

        order = int(np.ceil(order / 2.0) * 2)
        _check_length(order, data.shape[-1])
        half_transition = HAMMING_TRANSITION * sfreq / order / 2.0

        if highpass and lowpass:
            cutoff = [band.fmin - half_transition, band.fmax + half_transition]
            pass_zero = False
        elif highpass:
            cutoff = band.fmin - half_transition
            pass_zero = False
        else:
            cutoff = band.fmax + half_transition
            pass_zero = True

        try:
            taps = signal.firwin(
                order + 1, cutoff, window="hamming", pass_zero=pass_zero, fs=sfreq
            )
        except ValueError as exc:
            raise FilterError(
                f"Cannot design a {order}-order filter for band {band.name} "
                f"at {sfreq:g} Hz: {exc}"
            ) from exc

        half = order // 2
        padded = np.pad(data, ((0, 0), (half, half)), mode="edge")
        return signal.oaconvolve(padded, taps[np.newaxis, :], mode="valid", axes=-1)


class MneBandPassFilter(BandPassFilter):
    """FIR band-pass filter delegated to :func:`mne.filter.filter_data`.

    The transition bands get the width a Hamming window of the requested
    order gives, narrowed where a band edge is closer to 0 Hz or Nyquist;
    MNE then derives the filter length from the narrowest transition.
    """

    def __init__(self, fir_window: str = "hamming", fir_design: str = "firwin"):
        self.fir_window = fir_window
        self.fir_design = fir_design

    def apply(
        self, data: np.ndarray, sfreq: float, band: BandDefinition, order: int
    ) -> np.ndarray:
        data = np.atleast_2d(data)
        highpass, lowpass = _band_edges(band, sfreq / 2.0)
        if not highpass and not lowpass:
            return data.copy()

        order = int(np.ceil(order / 2.0) * 2)
        _check_length(order, data.shape[-1])
        # Transition width follows the order; MNE sizes the filter from it.
        # Widths are clipped so stop bands stay within 0 Hz and Nyquist.
        width = HAMMING_TRANSITION * sfreq / order
        l_trans = min(width, band.fmin) if highpass else "auto"
        h_trans = min(width, sfreq / 2.0 - band.fmax) if lowpass else "auto"
        try:
            return filter_data(
                data,
                sfreq=sfreq,
                l_freq=band.fmin if highpass else None,
                h_freq=band.fmax if lowpass else None,
                filter_length="auto",
                l_trans_bandwidth=l_trans,
                h_trans_bandwidth=h_trans,
                method="fir",
                phase="zero",
                fir_window=self.fir_window,
                fir_design=self.fir_design,
                verbose=False,
            )
        except ValueError as exc:
            raise FilterError(
                f"MNE could not filter band {band.name} at {sfreq:g} Hz: {exc}"
            ) from exc


def _band_edges(band: BandDefinition, nyquist: float):
    if band.fmin < 0 or band.fmax <= band.fmin:
        raise FilterError(
            f"Malformed band edges for {band.name}: ({band.fmin}, {band.fmax})."
        )
    if band.fmin >= nyquist:
        raise FilterError(
            f"Band {band.name} starts at {band.fmin:g} Hz, "
            f"at or above the Nyquist frequency ({nyquist:g} Hz)."
        )
    return band.fmin > 0, band.fmax < nyquist


def _check_length(order: int, n_times: int) -> None:
    if order + 1 > n_times:
        raise FilterError(
            f"Filter length ({order + 1} samples) exceeds the signal length "
            f"({n_times} samples)."
        )
