"""
Interpolation of recordings onto another headset layout.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np
from mne.channels.interpolation import _make_interpolation_matrix

from .errors import InterpolationError
from .recording import Recording


class Interpolator(ABC):
    """Maps a recording onto the channels of a target headset."""

    @abstractmethod
    def interpolate(self, recording: Recording, headset) -> Recording:
        """Return ``recording`` resampled onto ``headset``'s channels."""


class SphericalSplineInterpolator(Interpolator):
    """Spherical-spline interpolation (Perrin et al., 1989) through MNE.

    Positions are taken relative to ``origin`` (head coordinates, metres)
    and projected onto the unit sphere.
    """

    def __init__(
        self, origin: Sequence[float] = (0.0, 0.0, 0.04), alpha: float = 1e-5
    ):
        self.origin = np.asarray(origin, dtype=float)
        self.alpha = alpha

    def interpolate(self, recording: Recording, headset) -> Recording:
        missing = [ch.name for ch in recording.channels if ch.is_external]
        if missing:
            raise InterpolationError(
                "Channels without positions cannot be interpolated: "
                + ", ".join(missing)
            )
        if any(ch.is_external for ch in headset.channels):
            raise InterpolationError(
                f"Headset {headset.name} has channels without positions."
            )
        if recording.n_channels < 2:
            raise InterpolationError("At least two source channels are required.")

        pos_from = np.array([ch.position for ch in recording.channels]) - self.origin
        pos_to = headset.positions - self.origin
        if np.any(np.linalg.norm(pos_from, axis=1) == 0) or np.any(
            np.linalg.norm(pos_to, axis=1) == 0
        ):
            raise InterpolationError("Channel positions coincide with the origin.")

        try:
            matrix = _make_interpolation_matrix(pos_from, pos_to, alpha=self.alpha)
        except (ValueError, np.linalg.LinAlgError) as exc:
            raise InterpolationError(
                f"Cannot interpolate onto headset {headset.name}: {exc}"
            ) from exc

        return recording.with_channels(matrix @ recording.data, headset.channels)
