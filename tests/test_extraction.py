"""Tests for the end-to-end feature extraction."""

import logging

import numpy as np
import pytest

from avgpower import (
    AveragePowerConfig,
    AveragePowerError,
    BandPassFilter,
    Event,
    FilterError,
    Headset,
    MneBandPassFilter,
    extract_average_power,
)
from avgpower.exclusion import BOUNDARY_SAMPLES, NOT_ENOUGH_SUB_WINDOWS


class FailingFilter(BandPassFilter):
    def apply(self, data, sfreq, band, order):
        raise FilterError("filter order too large")


def test_default_extraction_shapes(make_recording, identity_filter):
    recording = make_recording(n_channels=5, n_times=1000, sfreq=100.0, external=(4,))
    result = extract_average_power(recording, band_filter=identity_filter)

    assert result.ok
    features = result.features
    assert features.name == "synthetic"
    assert features.channels == 4
    assert features.samples.shape == (4 * 1 * 4, 40)
    assert len(features.feature_names) == 16
    assert features.feature_names[0] == "E1_broadband_w0"
    assert result.config == AveragePowerConfig()


def test_times_grid(make_recording, identity_filter):
    recording = make_recording(n_times=1000, sfreq=100.0)
    features = extract_average_power(recording, band_filter=identity_filter).unwrap()

    assert len(features.times) == features.n_samples == (1000 - 25) // 25 + 1
    assert features.times[0] == 0.0
    assert np.all(np.diff(features.times) > 0)
    assert np.allclose(features.times, np.arange(40) * 0.25)


def test_times_use_rounded_step(make_recording, identity_filter):
    recording = make_recording(n_times=1000, sfreq=250.0)
    features = extract_average_power(
        recording, band_filter=identity_filter, filter_order=100
    ).unwrap()
    assert np.allclose(np.diff(features.times), 63 / 250.0)


def test_default_filter_at_low_rate_keeps_signal(make_recording):
    # 0-50 Hz covers the whole spectrum at 100 Hz
    recording = make_recording(n_times=1000, sfreq=100.0)
    features = extract_average_power(recording).unwrap()
    assert features.samples.shape == (16, 40)
    assert np.all(np.isfinite(features.samples))


def test_tail_is_excluded(make_recording, identity_filter):
    features = extract_average_power(
        make_recording(), band_filter=identity_filter
    ).unwrap()
    assert features.mask.index[-7:].all()
    assert not features.mask.index[:-7].any()
    assert features.mask.comments[-1] == [NOT_ENOUGH_SUB_WINDOWS]


def test_labels_and_boundaries(make_recording, identity_filter):
    events = [
        Event(3, 120),
        Event("stim_on", 300),
        Event("boundary", 500, 25),
    ]
    recording = make_recording(n_times=1000, sfreq=100.0, events=events)
    features = extract_average_power(recording, band_filter=identity_filter).unwrap()

    assert features.labels[4] == ["3"]
    assert features.labels[12] == ["stim_on"]
    assert features.labels[20] == ["boundary"]
    assert features.labels[0] == []

    boundary = [i for i, c in enumerate(features.mask.comments) if BOUNDARY_SAMPLES in c]
    assert boundary == [20, 21]
    assert features.mask.index[13:29].all()
    assert not features.mask.index[:13].any()


def test_multiple_bands(make_recording, identity_filter):
    config = AveragePowerConfig(subbands=[(1, 10), (10, 20)], filter_order=50)
    short = extract_average_power(
        make_recording(n_times=600), config, band_filter=identity_filter
    ).unwrap()
    long = extract_average_power(
        make_recording(n_times=1200), config, band_filter=identity_filter
    ).unwrap()

    assert short.samples.shape[0] == long.samples.shape[0] == 4 * 2 * 4
    assert len(identity_filter.calls) == 4
    # second copy of the window is shifted by one sub-window
    dimension = 8
    assert np.allclose(
        short.samples[dimension : 2 * dimension, :-1], short.samples[:dimension, 1:]
    )


def test_keyword_options_override_config(make_recording, identity_filter):
    result = extract_average_power(
        make_recording(n_times=1000),
        AveragePowerConfig(filter_order=50),
        band_filter=identity_filter,
        subWindowLength=0.5,
        step=0.5,
    )
    assert result.config.filter_order == 50
    assert result.config.sub_window_count == 2
    assert result.features.samples.shape == (4 * 2, 20)


def test_target_headset_same_layout(make_recording, identity_filter, zero_interpolator):
    recording = make_recording(n_channels=5, external=(0,))
    headset = Headset("same", recording.channels[1:])
    features = extract_average_power(
        recording,
        band_filter=identity_filter,
        interpolator=zero_interpolator,
        target_headset=headset,
    ).unwrap()
    assert zero_interpolator.calls == 0
    assert features.headset == "same"
    assert features.channels == 4


def test_target_headset_interpolated(make_recording, identity_filter, zero_interpolator):
    recording = make_recording(n_channels=4)
    headset = Headset("small", recording.channels[:2])
    result = extract_average_power(
        recording,
        band_filter=identity_filter,
        interpolator=zero_interpolator,
        target_headset=headset,
    )
    assert zero_interpolator.calls == 1
    assert result.features.channels == 2
    assert result.features.samples.shape[0] == 2 * 4


def test_failure_is_returned_not_raised(make_recording, caplog):
    recording = make_recording()
    data_before = recording.data.copy()

    with caplog.at_level(logging.ERROR, logger="avgpower"):
        result = extract_average_power(recording, band_filter=FailingFilter())

    assert not result.ok
    assert result.features is None
    assert result.error.status == "unprocessed"
    assert result.error.message.startswith("failed average power")
    assert "filter order too large" in result.error.message
    assert isinstance(result.error.exception, FilterError)
    assert result.config == AveragePowerConfig()
    assert np.array_equal(recording.data, data_before)
    assert "failed average power" in caplog.text

    with pytest.raises(AveragePowerError):
        result.unwrap()


def test_filter_longer_than_recording_fails(make_recording):
    recording = make_recording(n_times=300, sfreq=250.0)
    result = extract_average_power(recording)
    assert not result.ok
    assert "FilterError" in result.error.message


def test_invalid_options_fail_without_config(make_recording, identity_filter):
    result = extract_average_power(
        make_recording(), band_filter=identity_filter, sub_window_length=0.3
    )
    assert not result.ok
    assert result.config is None
    assert "ConfigError" in result.error.message


def test_to_frame_and_included(make_recording, identity_filter):
    events = [Event("a", 120), Event("b", 124)]
    features = extract_average_power(
        make_recording(events=events), band_filter=identity_filter
    ).unwrap()

    frame = features.to_frame()
    assert list(frame.columns) == ["time", "labels", "excluded", "comments"]
    assert len(frame) == features.n_samples
    assert frame.loc[4, "labels"] == "a|b"
    assert frame["excluded"].sum() == 7

    samples, labels, times = features.included()
    assert samples.shape == (16, 33)
    assert len(labels) == len(times) == 33


def test_mne_filter_extracts_low_band(make_recording):
    recording = make_recording(n_times=2500, sfreq=250.0)
    result = extract_average_power(
        recording, subbands=[(1, 4)], band_filter=MneBandPassFilter()
    )
    assert result.ok, result.error
    assert result.features.samples.shape == (16, (2500 - 63) // 63 + 1)
    assert np.all(np.isfinite(result.features.samples))
