"""
Projection of recording events onto the sub-window grid as string labels.
"""

from __future__ import annotations

import math
import numbers
import warnings
from typing import Any, List, Optional, Sequence

from .errors import UnknownEventTypeWarning
from .recording import Event


def event_label(event_type: Any) -> Optional[str]:
    """
    Stringify an event type; ``None`` for types that are neither numbers nor text.

    >>> event_label(3), event_label("stim_on")
    ('3', 'stim_on')
    """

    if isinstance(event_type, str):
        return event_type
    if isinstance(event_type, numbers.Real) and not isinstance(event_type, bool):
        if isinstance(event_type, numbers.Integral):
            return str(int(event_type))
        value = float(event_type)
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return f"{value:g}"
    warnings.warn(
        f"unknown event type: {event_type!r}", UnknownEventTypeWarning, stacklevel=2
    )
    return None


def event_sample_index(latency: float, sfreq: float, step: float) -> int:
    """Sub-window index of an event latency given in samples."""
    return int(math.floor(latency / sfreq / step))


def map_event_labels(
    events: Sequence[Event], sfreq: float, step: float, n_samples: int
) -> List[List[str]]:
    """
    Collect event labels per output sample.

    An event lands on the sample ``floor(latency / sfreq / step)``. Events on
    the last sample or beyond are dropped, as are events without a usable
    label. Several events on one sample keep all their labels, duplicates
    included.
    """

    labels: List[List[str]] = [[] for _ in range(n_samples)]
    for event in events:
        label = event_label(event.type)
        if label is None:
            continue
        index = event_sample_index(event.latency, sfreq, step)
        if 0 <= index < n_samples - 1:
            labels[index].append(label)
    return labels
