"""
Assembly of sub-window band powers into per-window feature vectors.
"""

from __future__ import annotations

import numpy as np


def assemble_windows(
    feature_subj: np.ndarray,
    n_bands: int,
    sub_window_count: int,
    alignment: str = "band",
) -> np.ndarray:
    """
    Stack ``sub_window_count`` shifted copies of ``feature_subj``.

    The output keeps one column per sub-window start. With ``"band"``
    alignment, copy ``b`` (``b = 1 .. n_bands - 1``) is shifted left by ``b``
    columns. With ``"sliding"`` alignment every copy ``k`` is shifted by ``k``
    columns, so column ``j`` holds sub-windows ``j .. j + sub_window_count - 1``.
    Shifted copies keep their unshifted values in the last columns.
    """

    dimension, n_columns = feature_subj.shape
    out = np.tile(feature_subj, (sub_window_count, 1))

    if alignment == "band":
        offsets = range(1, n_bands)
    elif alignment == "sliding":
        offsets = range(1, sub_window_count)
    else:
        raise ValueError(f"Unknown alignment: {alignment!r}")

    for offset in offsets:
        if offset >= sub_window_count:
            raise ValueError(
                f"Cannot shift copy {offset}; only {sub_window_count} copies exist."
            )
        if offset >= n_columns:
            continue
        rows = slice(offset * dimension, (offset + 1) * dimension)
        out[rows, : n_columns - offset] = out[rows, offset:]
    return out
