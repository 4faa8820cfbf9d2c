"""
Extract windowed average band-power features from one EEG recording.
"""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path

import joblib

from avgpower import (
    DEFAULT_CONFIG,
    AveragePowerConfig,
    BandDefinition,
    ConfigError,
    FirBandPassFilter,
    MneBandPassFilter,
    extract_average_power,
    load_recording,
)

FILTERS = {
    "fir": FirBandPassFilter,
    "mne": MneBandPassFilter,
}


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Extract windowed average band-power features from an EEG recording."
    )
    parser.add_argument(
        "recording",
        type=Path,
        help="Path to a continuous recording readable by MNE (.set, .edf, .fif ...).",
    )
    parser.add_argument(
        "--subband",
        type=float,
        nargs=2,
        action="append",
        metavar=("LOW", "HIGH"),
        default=None,
        help="Sub-band edges in Hz; repeat for several bands (default: 0 50).",
    )
    parser.add_argument(
        "--filter-order",
        type=int,
        default=None,
        help="FIR filter order (defaults to config).",
    )
    parser.add_argument(
        "--window-length",
        type=float,
        default=None,
        help="Window length in seconds.",
    )
    parser.add_argument(
        "--sub-window-length",
        type=float,
        default=None,
        help="Sub-window length in seconds.",
    )
    parser.add_argument(
        "--step",
        type=float,
        default=None,
        help="Step between sub-windows in seconds.",
    )
    parser.add_argument(
        "--target-headset",
        type=str,
        default=None,
        help="Standard MNE montage name or channel location file to interpolate onto.",
    )
    parser.add_argument(
        "--alignment",
        choices=("band", "sliding"),
        default=None,
        help="How copies of the sub-window features are shifted within a window.",
    )
    parser.add_argument(
        "--filter",
        choices=sorted(FILTERS),
        default="fir",
        help="Band-pass filter implementation.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Where to store the features (joblib); defaults to <recording>.avgpower.joblib.",
    )
    parser.add_argument(
        "--table",
        type=Path,
        default=None,
        help="Optional CSV file with times, labels and exclusion reasons per sample.",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Show debug messages from the extraction.",
    )
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(asctime)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    config = _derive_config(args)

    print(f"Loading recording {args.recording}...")
    recording = load_recording(args.recording)
    print(
        f"Loaded {recording.n_channels} channels, {recording.n_times} samples "
        f"at {recording.sfreq:g} Hz, {len(recording.events)} events"
    )

    print("Extracting average band power...")
    result = extract_average_power(
        recording, config, band_filter=FILTERS[args.filter]()
    )
    if not result.ok:
        print(result.error.message)
        return 1

    features = result.features
    print(f"Feature matrix shape: {features.samples.shape}")
    print(
        f"Excluded samples: {features.mask.n_excluded} of {features.n_samples}"
    )

    output = args.output or args.recording.with_suffix(".avgpower.joblib")
    output = Path(output).resolve()
    output.parent.mkdir(parents=True, exist_ok=True)
    joblib.dump({"features": features, "config": result.config}, output)
    print(f"Features saved to {output}")

    if args.table is not None:
        args.table.parent.mkdir(parents=True, exist_ok=True)
        features.to_frame().to_csv(args.table, index=False)
        print(f"Sample table saved to {args.table}")
    return 0


def _derive_config(args: argparse.Namespace) -> AveragePowerConfig:
    options = {}
    if args.subband is not None:
        options["subbands"] = tuple(
            BandDefinition.coerce(edges) for edges in args.subband
        )
    if args.filter_order is not None:
        options["filter_order"] = args.filter_order
    if args.window_length is not None:
        options["window_length"] = args.window_length
    if args.sub_window_length is not None:
        options["sub_window_length"] = args.sub_window_length
    if args.step is not None:
        options["step"] = args.step
    if args.target_headset is not None:
        options["target_headset"] = args.target_headset
    if args.alignment is not None:
        options["alignment"] = args.alignment
    try:
        return replace(DEFAULT_CONFIG, **options)
    except ConfigError as exc:
        raise SystemExit(f"Invalid extraction options: {exc}") from exc


if __name__ == "__main__":
    raise SystemExit(main())
