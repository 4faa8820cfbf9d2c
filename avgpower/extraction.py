"""
Average band-power feature extraction for one recording.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields
from typing import Any, Optional

import numpy as np

from .channels import align_to_headset, drop_external_channels, resolve_headset
from .config import AveragePowerConfig
from .errors import ExtractionFailure
from .exclusion import build_exclusion_mask
from .features import FeatureSet, feature_names
from .filtering import BandPassFilter, FirBandPassFilter
from .interpolation import Interpolator, SphericalSplineInterpolator
from .labels import map_event_labels
from .power import extract_band_power, seconds_to_frames
from .recording import Recording
from .windows import assemble_windows

logger = logging.getLogger(__name__)


@dataclass
class ExtractionResult:
    """Outcome of :func:`extract_average_power`.

    On success ``features`` is set and ``error`` is ``None``; on failure
    ``features`` is ``None`` and ``error`` says why.
    """

    features: Optional[FeatureSet]
    config: Optional[AveragePowerConfig]
    error: Optional[ExtractionFailure] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> FeatureSet:
        if self.error is not None:
            self.error.raise_error()
        return self.features


def resolve_config(
    config: Optional[AveragePowerConfig] = None, **options: Any
) -> AveragePowerConfig:
    """Apply keyword options on top of ``config`` (or the defaults)."""
    if config is None:
        return AveragePowerConfig.from_options(options)
    if not options:
        return config
    base = {f.name: getattr(config, f.name) for f in fields(config)}
    return AveragePowerConfig.from_options(base, **options)


def compute_features(
    recording: Recording,
    config: AveragePowerConfig,
    band_filter: BandPassFilter,
    interpolator: Interpolator,
) -> FeatureSet:
    """
    Run the extraction steps, raising on the first failure.
    """

    recording = drop_external_channels(recording)
    headset = resolve_headset(config.target_headset)
    recording = align_to_headset(recording, headset, interpolator)

    feature_subj = extract_band_power(
        recording,
        config.subbands,
        config.filter_order,
        config.sub_window_length,
        config.step,
        band_filter,
    )
    samples = assemble_windows(
        feature_subj,
        len(config.subbands),
        config.sub_window_count,
        config.alignment,
    )
    n_samples = samples.shape[1]

    step_frames = seconds_to_frames(config.step, recording.sfreq)
    times = np.arange(n_samples) * step_frames / recording.sfreq
    labels = map_event_labels(recording.events, recording.sfreq, config.step, n_samples)
    mask = build_exclusion_mask(
        times,
        recording.events,
        recording.sfreq,
        tail_exclusion=config.tail_exclusion,
        boundary_margin=config.boundary_margin,
        boundary_type=config.boundary_type,
    )

    return FeatureSet(
        name=recording.name,
        channels=recording.n_channels,
        samples=samples,
        labels=labels,
        times=times,
        mask=mask,
        headset=headset.name if headset is not None else None,
        feature_names=feature_names(
            recording.ch_names, config.subbands, config.sub_window_count
        ),
    )


def extract_average_power(
    recording: Recording,
    config: Optional[AveragePowerConfig] = None,
    *,
    band_filter: Optional[BandPassFilter] = None,
    interpolator: Optional[Interpolator] = None,
    **options: Any,
) -> ExtractionResult:
    """
    Extract windowed average band-power features from ``recording``.

    Keyword ``options`` override fields of ``config``. Errors are not
    raised: they are logged and returned in ``ExtractionResult.error``,
    and ``recording`` is left untouched.
    """

    effective: Optional[AveragePowerConfig] = None
    try:
        effective = resolve_config(config, **options)
        features = compute_features(
            recording,
            effective,
            band_filter or FirBandPassFilter(),
            interpolator or SphericalSplineInterpolator(),
        )
    except Exception as exc:
        failure = ExtractionFailure(
            message=f"failed average power: {type(exc).__name__}: {exc}",
            exception=exc,
        )
        name = getattr(recording, "name", "recording")
        logger.error("%s: %s", name, failure.message)
        return ExtractionResult(features=None, config=effective, error=failure)

    logger.info(
        "%s: %d samples x %d features, %d excluded",
        features.name,
        features.n_samples,
        features.n_features,
        features.mask.n_excluded,
    )
    return ExtractionResult(features=features, config=effective)
