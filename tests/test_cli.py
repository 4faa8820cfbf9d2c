"""Tests for the command-line driver."""

import joblib
import pandas as pd
import pytest

from avgpower import Event
from extract_features import _derive_config, main, parse_args


def test_derive_config_defaults():
    config = _derive_config(parse_args(["recording.set"]))
    assert config.filter_order == 500
    assert len(config.subbands) == 1


def test_derive_config_from_arguments():
    args = parse_args(
        [
            "recording.set",
            "--subband", "0", "4",
            "--subband", "4", "8",
            "--window-length", "2.0",
            "--sub-window-length", "0.5",
            "--step", "0.5",
            "--filter-order", "200",
            "--alignment", "sliding",
        ]
    )
    config = _derive_config(args)
    assert [(b.fmin, b.fmax) for b in config.subbands] == [(0.0, 4.0), (4.0, 8.0)]
    assert config.sub_window_count == 4
    assert config.step == 0.5
    assert config.filter_order == 200
    assert config.alignment == "sliding"


def test_invalid_arguments_exit():
    with pytest.raises(SystemExit):
        _derive_config(parse_args(["recording.set", "--sub-window-length", "0.3"]))


def test_main_writes_features(tmp_path, make_recording):
    recording = make_recording(n_times=1000, sfreq=100.0, events=[Event("stim", 120)])
    source = tmp_path / "subject_raw.fif"
    recording.to_raw().save(source, verbose=False)
    output = tmp_path / "out" / "features.joblib"
    table = tmp_path / "out" / "samples.csv"

    status = main([str(source), "--output", str(output), "--table", str(table)])

    assert status == 0
    stored = joblib.load(output)
    assert stored["features"].samples.shape == (16, 40)
    assert stored["config"].filter_order == 500
    frame = pd.read_csv(table)
    assert len(frame) == 40
    assert frame.loc[4, "labels"] == "stim"


def test_main_reports_failure(tmp_path, make_recording):
    source = tmp_path / "short_raw.fif"
    make_recording(n_times=300, sfreq=250.0).to_raw().save(source, verbose=False)

    assert main([str(source), "--output", str(tmp_path / "x.joblib")]) == 1
    assert not (tmp_path / "x.joblib").exists()
