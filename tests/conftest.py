"""Shared fixtures: synthetic recordings and stub filter / interpolator."""

import numpy as np
import pytest

from avgpower import BandPassFilter, ChannelInfo, Interpolator, Recording


class IdentityFilter(BandPassFilter):
    """Returns the data unchanged and records the requested bands."""

    def __init__(self):
        self.calls = []

    def apply(self, data, sfreq, band, order):
        self.calls.append((band, order))
        return np.array(data, copy=True)


class ZeroInterpolator(Interpolator):
    """Produces flat channels at the headset positions."""

    def __init__(self):
        self.calls = 0

    def interpolate(self, recording, headset):
        self.calls += 1
        data = np.zeros((len(headset), recording.n_times))
        return recording.with_channels(data, headset.channels)


def make_channels(n_channels, external=()):
    return [
        ChannelInfo(
            f"E{i + 1}",
            None if i in external else (float(i + 1), 0.5, 1.0),
        )
        for i in range(n_channels)
    ]


@pytest.fixture
def identity_filter():
    return IdentityFilter()


@pytest.fixture
def zero_interpolator():
    return ZeroInterpolator()


@pytest.fixture
def make_recording():
    def factory(
        n_channels=4,
        n_times=1000,
        sfreq=100.0,
        events=(),
        external=(),
        seed=0,
        name="synthetic",
    ):
        rng = np.random.default_rng(seed)
        return Recording(
            data=rng.standard_normal((n_channels, n_times)),
            sfreq=sfreq,
            channels=make_channels(n_channels, external),
            events=events,
            name=name,
        )

    return factory
