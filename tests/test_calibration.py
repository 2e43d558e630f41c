import logging

import pytest

from landmarkbench.application.calibration import (
    adjust_crown_chin_coefficients,
    compute_coefficients,
    face_ratios,
)
from landmarkbench.domain.exceptions import CalibrationError

from conftest import make_record


def test_reference_scenario():
    c1, c2 = compute_coefficients([make_record()])

    # ref = |pupils| + |face center - mouth center| = 10 + 100
    assert c1 == pytest.approx(200 / 110)
    assert c2 == pytest.approx(170 / 110)


def test_degenerate_sample_is_excluded(caplog):
    degenerate = make_record(left_pupil=(5, 50), right_pupil=(5, 50), left_lip=(5, 50), right_lip=(5, 50))
    assert face_ratios(degenerate) is None

    with caplog.at_level(logging.WARNING):
        c1, _ = compute_coefficients([degenerate, make_record()])

    assert c1 == pytest.approx(200 / 110)
    assert "zero reference distance" in caplog.text


def test_no_valid_samples_raises():
    degenerate = make_record(left_pupil=(0, 0), right_pupil=(0, 0), left_lip=(0, 0), right_lip=(0, 0))
    with pytest.raises(CalibrationError):
        compute_coefficients([degenerate])

    with pytest.raises(CalibrationError):
        compute_coefficients([])


def test_median_ignores_single_outlier():
    records = [
        make_record(crown=(10, 30)),
        make_record(crown=(10, 25)),
        make_record(crown=(10, 20)),
        make_record(crown=(10, 15)),
        make_record(crown=(10, -5000)),
    ]
    regular = [face_ratios(r)[0] for r in records[:-1]]

    c1, _ = compute_coefficients(records)

    assert min(regular) <= c1 <= max(regular)


def test_adjust_logs_both_coefficients(caplog):
    with caplog.at_level(logging.INFO):
        c1, c2 = adjust_crown_chin_coefficients([make_record()])

    assert "Chin-crown normalization" in caplog.text
    assert "Chin-frown normalization" in caplog.text
    assert (c1, c2) == compute_coefficients([make_record()])
