"""
Configuration objects used by the average band-power feature extraction.
"""

from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

from .errors import ConfigError

ALIGNMENTS = ("band", "sliding")

# Option names accepted by ``AveragePowerConfig.from_options``.
_OPTION_ALIASES = {
    "subbands": "subbands",
    "filterOrder": "filter_order",
    "windowLength": "window_length",
    "subWindowLength": "sub_window_length",
    "subLength": "sub_window_length",
    "step": "step",
    "targetHeadset": "target_headset",
    "headset": "target_headset",
}


@dataclass(frozen=True)
class BandDefinition:
    """Describes a frequency band."""

    name: str
    fmin: float
    fmax: float

    @classmethod
    def coerce(cls, band: Union["BandDefinition", Sequence[float]]) -> "BandDefinition":
        if isinstance(band, BandDefinition):
            return band
        try:
            fmin, fmax = band
        except (TypeError, ValueError) as exc:
            raise ConfigError(
                f"Sub-band must be a (low, high) pair, got {band!r}."
            ) from exc
        return cls(f"{float(fmin):g}-{float(fmax):g}Hz", float(fmin), float(fmax))


@dataclass(frozen=True)
class AveragePowerConfig:
    """Holds the feature extraction hyperparameters.

    Lengths are in seconds. ``target_headset`` is ``None`` (keep the
    recording's own layout), a :class:`~avgpower.channels.Headset`, an MNE
    standard montage name or a montage file path.
    """

    subbands: Tuple[BandDefinition, ...] = field(
        default_factory=lambda: (BandDefinition("broadband", 0.0, 50.0),)
    )
    filter_order: int = 500
    window_length: float = 1.0
    sub_window_length: float = 0.25
    step: float = 0.25
    target_headset: Optional[Any] = None
    alignment: str = "band"
    tail_exclusion: int = 7
    boundary_margin: int = 7
    boundary_type: str = "boundary"

    def __post_init__(self) -> None:
        bands = self.subbands
        if hasattr(bands, "tolist"):
            bands = bands.tolist()
        if isinstance(bands, BandDefinition) or _is_pair(bands):
            bands = (bands,)
        object.__setattr__(
            self, "subbands", tuple(BandDefinition.coerce(b) for b in bands)
        )
        if isinstance(self.target_headset, Path):
            object.__setattr__(self, "target_headset", str(self.target_headset))
        self.validate()

    @property
    def sub_window_count(self) -> int:
        """Number of sub-windows aggregated into one window."""
        return int(round(self.window_length / self.sub_window_length))

    def validate(self) -> None:
        if not self.subbands:
            raise ConfigError("At least one sub-band is required.")
        for band in self.subbands:
            if band.fmin < 0 or band.fmax <= band.fmin:
                raise ConfigError(
                    f"Invalid sub-band {band.name}: need 0 <= low < high, "
                    f"got ({band.fmin}, {band.fmax})."
                )
        if int(self.filter_order) != self.filter_order or self.filter_order <= 0:
            raise ConfigError(
                f"filter_order must be a positive integer, got {self.filter_order!r}."
            )
        for name in ("window_length", "sub_window_length", "step"):
            value = getattr(self, name)
            if not value > 0:
                raise ConfigError(f"{name} must be positive, got {value!r}.")
        ratio = self.window_length / self.sub_window_length
        if ratio < 1 or not math.isclose(ratio, round(ratio), rel_tol=0, abs_tol=1e-9):
            raise ConfigError(
                "window_length must be a whole multiple of sub_window_length "
                f"({self.window_length} / {self.sub_window_length} = {ratio:g})."
            )
        if self.alignment not in ALIGNMENTS:
            raise ConfigError(
                f"alignment must be one of {ALIGNMENTS}, got {self.alignment!r}."
            )
        if self.alignment == "band" and len(self.subbands) > self.sub_window_count:
            raise ConfigError(
                f"Band alignment shifts one window tile per sub-band; "
                f"{len(self.subbands)} sub-bands exceed the "
                f"{self.sub_window_count} sub-windows of a window."
            )
        if self.tail_exclusion < 0 or self.boundary_margin < 0:
            raise ConfigError("tail_exclusion and boundary_margin must be >= 0.")

    @classmethod
    def from_options(cls, options: Optional[Mapping[str, Any]] = None, **kwargs: Any):
        """Build a config from keyword options; unset options keep their defaults.

        Both the snake_case field names and the camelCase option names
        (``filterOrder``, ``subWindowLength``, ``targetHeadset`` ...) are
        accepted.
        """

        merged = dict(options or {})
        merged.update(kwargs)
        known = {f.name for f in fields(cls)}
        values = {}
        for key, value in merged.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ConfigError(f"Unknown option: {key!r}.")
            values[name] = value
        return cls(**values)


def _is_pair(value: Any) -> bool:
    return (
        isinstance(value, (tuple, list))
        and len(value) == 2
        and all(isinstance(v, numbers.Real) for v in value)
    )


DEFAULT_CONFIG = AveragePowerConfig()
