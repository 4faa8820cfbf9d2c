"""
Exclusion mask flagging samples that should not be used for training.
"""

from __future__ import annotations

from typing import Iterable, List, Sequence

import numpy as np

from .features import ExclusionMask
from .recording import Event

NOT_ENOUGH_SUB_WINDOWS = "not enough sub-windows"
BOUNDARY_SAMPLES = "boundary samples"
OVERLAPPED_WITH_BOUNDARY = "overlapped with boundary"


def add_comment(comments: List[List[str]], indices: Iterable[int], comment: str) -> None:
    """Append ``comment`` to each listed sample unless it is already there."""
    for index in indices:
        if comment not in comments[index]:
            comments[index].append(comment)


def boundary_sample_flags(
    times: np.ndarray,
    events: Sequence[Event],
    sfreq: float,
    boundary_type: str = "boundary",
) -> np.ndarray:
    """Flag samples whose start time lies inside a boundary event interval."""

    flags = np.zeros(len(times), dtype=bool)
    for event in events:
        if not isinstance(event.type, str) or event.type != boundary_type:
            continue
        begin = event.latency / sfreq
        end = (event.latency + (event.duration or 0.0)) / sfreq
        flags |= (begin <= times) & (times <= end)
    return flags


def build_exclusion_mask(
    times: np.ndarray,
    events: Sequence[Event],
    sfreq: float,
    tail_exclusion: int = 7,
    boundary_margin: int = 7,
    boundary_type: str = "boundary",
) -> ExclusionMask:
    """
    Mark the trailing samples and the samples around boundary events.

    Each excluded sample lists why: ``"not enough sub-windows"`` for the
    last ``tail_exclusion`` samples, ``"boundary samples"`` inside a boundary
    interval, and ``"overlapped with boundary"`` for everything within
    ``boundary_margin`` samples of a boundary sample.
    """

    n_samples = len(times)
    index = np.zeros(n_samples, dtype=bool)
    comments: List[List[str]] = [[] for _ in range(n_samples)]

    tail = np.arange(max(n_samples - tail_exclusion, 0), n_samples)
    index[tail] = True
    add_comment(comments, tail, NOT_ENOUGH_SUB_WINDOWS)

    boundary = np.flatnonzero(
        boundary_sample_flags(np.asarray(times), events, sfreq, boundary_type)
    )
    index[boundary] = True
    add_comment(comments, boundary, BOUNDARY_SAMPLES)

    if len(boundary):
        offsets = np.arange(-boundary_margin, boundary_margin + 1)
        nearby = np.unique((boundary[:, np.newaxis] + offsets).ravel())
        nearby = nearby[(nearby >= 0) & (nearby < n_samples)]
        index[nearby] = True
        add_comment(comments, nearby, OVERLAPPED_WITH_BOUNDARY)

    return ExclusionMask(index=index, comments=comments)
