"""
Channel selection and alignment of recordings onto a target headset layout.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, List, Optional, Sequence, Tuple, Union

import mne
import numpy as np

from .errors import ConfigError, InterpolationError
from .recording import ChannelInfo, Recording

if TYPE_CHECKING:
    from .interpolation import Interpolator

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Headset:
    """A named channel layout: channel labels with 3-D positions."""

    name: str
    channels: Tuple[ChannelInfo, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "channels", tuple(self.channels))

    def __len__(self) -> int:
        return len(self.channels)

    @property
    def positions(self) -> np.ndarray:
        return np.array([ch.position for ch in self.channels], dtype=float)

    @classmethod
    def from_montage(cls, montage: Union[str, mne.channels.DigMontage]) -> "Headset":
        """Build a headset from an MNE montage or a standard montage name."""

        if isinstance(montage, str):
            name = montage
            montage = mne.channels.make_standard_montage(montage)
        else:
            name = "custom"
        ch_pos = montage.get_positions()["ch_pos"]
        channels = tuple(
            ChannelInfo(label, tuple(float(v) for v in pos))
            for label, pos in ch_pos.items()
        )
        return cls(name, channels)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "Headset":
        """Read a channel location file (.elc, .sfp, .loc, .locs, .ced ...)."""

        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Cannot locate headset file: {path.resolve()}")
        headset = cls.from_montage(mne.channels.read_custom_montage(path))
        return cls(path.stem, headset.channels)

    @classmethod
    def from_recording(cls, recording: Recording) -> "Headset":
        return cls(recording.name, recording.channels)


def resolve_headset(target: Any) -> Optional[Headset]:
    """
    Turn a ``target_headset`` option into a :class:`Headset`.

    Strings naming an existing file are read as location files, other strings
    are looked up among MNE's standard montages.
    """

    if target is None or isinstance(target, Headset):
        return target
    if isinstance(target, mne.channels.DigMontage):
        return Headset.from_montage(target)
    if isinstance(target, (str, Path)):
        if Path(target).exists():
            return Headset.from_file(target)
        try:
            return Headset.from_montage(str(target))
        except ValueError as exc:
            raise ConfigError(
                f"Target headset {target!r} is neither a file nor a standard montage."
            ) from exc
    raise ConfigError(f"Unsupported target headset specification: {target!r}")


def external_channel_indices(recording: Recording) -> List[int]:
    return [i for i, ch in enumerate(recording.channels) if ch.is_external]


def drop_external_channels(recording: Recording) -> Recording:
    """
    Remove channels lacking a scalp position, keeping the original order.
    """

    external = external_channel_indices(recording)
    if not external:
        return recording

    logger.debug(
        "Dropping %d external channels: %s",
        len(external),
        ", ".join(recording.channels[i].name for i in external),
    )
    dropped = set(external)
    keep = [i for i in range(recording.n_channels) if i not in dropped]
    return recording.pick(keep)


def get_common_channels(
    channels_small: Sequence[ChannelInfo], channels_large: Sequence[ChannelInfo]
) -> Tuple[List[int], List[int]]:
    """
    Find channels sharing exactly the same position in two layouts.

    Returns index lists ``(index_small, index_large)`` of matching pairs,
    ordered by the position in ``channels_large``.
    """

    index_small: List[int] = []
    index_large: List[int] = []
    for large_idx, large in enumerate(channels_large):
        if large.is_external:
            continue
        for small_idx, small in enumerate(channels_small):
            if small.is_external:
                continue
            if tuple(small.position) == tuple(large.position):
                index_small.append(small_idx)
                index_large.append(large_idx)
    return index_small, index_large


def is_same_layout(headset: Headset, recording: Recording) -> bool:
    """True when every channel of ``recording`` sits at the same index in ``headset``."""

    if len(headset) != recording.n_channels:
        return False
    new_idx, original_idx = get_common_channels(headset.channels, recording.channels)
    identity = list(range(recording.n_channels))
    return new_idx == identity and original_idx == identity


def align_to_headset(
    recording: Recording,
    headset: Optional[Headset],
    interpolator: "Interpolator",
) -> Recording:
    """
    Map ``recording`` onto ``headset``, interpolating unless the layouts match.
    """

    if headset is None:
        return recording
    if is_same_layout(headset, recording):
        logger.debug("Recording already matches headset %s", headset.name)
        return recording

    logger.info(
        "Interpolating %d channels onto headset %s (%d channels)",
        recording.n_channels,
        headset.name,
        len(headset),
    )
    aligned = interpolator.interpolate(recording, headset)
    if aligned.n_channels != len(headset):
        raise InterpolationError(
            f"Interpolation produced {aligned.n_channels} channels, "
            f"headset {headset.name} has {len(headset)}."
        )
    return aligned
