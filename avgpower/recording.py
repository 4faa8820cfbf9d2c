"""
Recording container consumed by the extraction, and converters from MNE.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple, Union

import mne
import numpy as np

logger = logging.getLogger(__name__)

Position = Tuple[float, float, float]


@dataclass(frozen=True)
class ChannelInfo:
    """A channel label with its optional 3-D sensor position."""

    name: str
    position: Optional[Position] = None

    @property
    def is_external(self) -> bool:
        """Channels without scalp position (reference, EOG, auxiliary ...)."""
        if self.position is None:
            return True
        position = np.asarray(self.position, dtype=float)
        return not np.all(np.isfinite(position)) or not np.any(position)


@dataclass(frozen=True)
class Event:
    """An annotated event.

    ``latency`` and ``duration`` are in samples from the start of the data.
    ``type`` is usually a string or a number.
    """

    type: Any
    latency: float
    duration: Optional[float] = None


@dataclass(frozen=True)
class Recording:
    """Continuous multichannel EEG, shaped (n_channels, n_times)."""

    data: np.ndarray
    sfreq: float
    channels: Tuple[ChannelInfo, ...]
    events: Tuple[Event, ...] = field(default_factory=tuple)
    name: str = "recording"

    def __post_init__(self) -> None:
        data = np.asarray(self.data, dtype=float)
        if data.ndim != 2:
            raise ValueError(
                f"Recording data must be 2-D (channels, times), got shape {data.shape}."
            )
        object.__setattr__(self, "data", data)
        object.__setattr__(self, "channels", tuple(self.channels))
        object.__setattr__(self, "events", tuple(self.events))
        if len(self.channels) != data.shape[0]:
            raise ValueError(
                f"{len(self.channels)} channel descriptions for "
                f"{data.shape[0]} data rows."
            )
        if not self.sfreq > 0:
            raise ValueError(f"Sampling rate must be positive, got {self.sfreq!r}.")

    @property
    def n_channels(self) -> int:
        return self.data.shape[0]

    @property
    def n_times(self) -> int:
        return self.data.shape[1]

    @property
    def ch_names(self) -> List[str]:
        return [ch.name for ch in self.channels]

    def pick(self, indices: Sequence[int]) -> "Recording":
        """Return a recording restricted to ``indices`` in the given order."""
        indices = list(indices)
        return replace(
            self,
            data=self.data[indices, :],
            channels=tuple(self.channels[i] for i in indices),
        )

    def with_channels(
        self, data: np.ndarray, channels: Sequence[ChannelInfo]
    ) -> "Recording":
        """Return a recording with new channel data, keeping events and timing."""
        return replace(self, data=data, channels=tuple(channels))

    @classmethod
    def from_raw(cls, raw: mne.io.BaseRaw, name: Optional[str] = None) -> "Recording":
        """
        Convert an MNE raw object, turning annotations into events.
        """

        sfreq = float(raw.info["sfreq"])
        channels = tuple(
            ChannelInfo(ch["ch_name"], _position_from_loc(ch["loc"]))
            for ch in raw.info["chs"]
        )

        annotations = raw.annotations
        offset = raw.first_time if annotations.orig_time is not None else 0.0
        events = tuple(
            Event(
                type=str(description),
                latency=(onset - offset) * sfreq,
                duration=duration * sfreq,
            )
            for onset, duration, description in zip(
                annotations.onset, annotations.duration, annotations.description
            )
        )

        if name is None:
            name = _raw_name(raw)
        return cls(
            data=raw.get_data(),
            sfreq=sfreq,
            channels=channels,
            events=events,
            name=name,
        )

    def to_raw(self) -> mne.io.RawArray:
        """Build an MNE ``RawArray`` carrying positions and events as annotations."""

        info = mne.create_info(self.ch_names, sfreq=self.sfreq, ch_types="eeg")
        raw = mne.io.RawArray(self.data, info, verbose=False)
        for ch, channel in zip(raw.info["chs"], self.channels):
            if not channel.is_external:
                ch["loc"][:3] = channel.position

        if self.events:
            raw.set_annotations(
                mne.Annotations(
                    onset=[event.latency / self.sfreq for event in self.events],
                    duration=[
                        (event.duration or 0.0) / self.sfreq for event in self.events
                    ],
                    description=[str(event.type) for event in self.events],
                )
            )
        return raw


def load_recording(path: Union[str, Path]) -> Recording:
    """
    Read a continuous recording with MNE (EEGLAB .set, EDF, BDF, FIF, ...).
    """

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Cannot locate recording: {path.resolve()}")

    raw = mne.io.read_raw(path, preload=True, verbose=False)
    recording = Recording.from_raw(raw, name=path.name)
    logger.info(
        "Loaded %s: %d channels, %d samples at %g Hz, %d events",
        recording.name,
        recording.n_channels,
        recording.n_times,
        recording.sfreq,
        len(recording.events),
    )
    return recording


def _position_from_loc(loc: np.ndarray) -> Optional[Position]:
    pos = np.asarray(loc[:3], dtype=float)
    if not np.all(np.isfinite(pos)) or not np.any(pos):
        return None
    return (float(pos[0]), float(pos[1]), float(pos[2]))


def _raw_name(raw: mne.io.BaseRaw) -> str:
    filenames = [f for f in getattr(raw, "filenames", ()) if f is not None]
    if filenames:
        return Path(filenames[0]).name
    return "recording"
