"""
Feature set produced for one recording.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd

from .config import BandDefinition


@dataclass
class ExclusionMask:
    """Per-sample exclusion flags with the reasons for each excluded sample."""

    index: np.ndarray
    comments: List[List[str]]

    @property
    def n_excluded(self) -> int:
        return int(np.count_nonzero(self.index))


@dataclass
class FeatureSet:
    """
    Average band-power features of one recording.

    ``samples`` has one column per output sample (features in the columns),
    ``labels``, ``times`` and ``mask`` have one entry per column.
    """

    name: str
    channels: int
    samples: np.ndarray
    labels: List[List[str]]
    times: np.ndarray
    mask: ExclusionMask
    headset: Optional[str] = None
    feature_names: List[str] = field(default_factory=list)

    @property
    def n_samples(self) -> int:
        return self.samples.shape[1]

    @property
    def n_features(self) -> int:
        return self.samples.shape[0]

    def included(self) -> Tuple[np.ndarray, List[List[str]], np.ndarray]:
        """Samples, labels and times with the excluded samples removed."""
        keep = ~self.mask.index
        labels = [label for label, k in zip(self.labels, keep) if k]
        return self.samples[:, keep], labels, self.times[keep]

    def to_frame(self) -> pd.DataFrame:
        """One row per sample: start time, labels, exclusion flag and reasons."""
        return pd.DataFrame(
            {
                "time": self.times,
                "labels": ["|".join(label) for label in self.labels],
                "excluded": self.mask.index.astype(bool),
                "comments": ["; ".join(c) for c in self.mask.comments],
            }
        )


def feature_names(
    ch_names: Sequence[str],
    subbands: Sequence[BandDefinition],
    sub_window_count: int,
) -> List[str]:
    """Row labels of the assembled feature matrix (copy, band, channel order)."""
    return [
        f"{ch}_{band.name}_w{copy}"
        for copy in range(sub_window_count)
        for band in subbands
        for ch in ch_names
    ]
