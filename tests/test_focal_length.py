import math

import pytest

from objmeasure.focal_length import FocalLengthEstimator, focal_length_from_fov


def test_fov_derived_focal_length() -> None:
    estimator = FocalLengthEstimator()
    expected = 640 / math.tan(math.radians(30))

    assert not estimator.is_calibrated
    assert estimator.effective_focal_length_px(1280) == pytest.approx(expected)
    assert estimator.effective_focal_length_px(1280) == pytest.approx(1108.51, abs=0.01)
    assert focal_length_from_fov(1280, 60.0) == pytest.approx(expected)


def test_per_call_fov_overrides_assumed_fov() -> None:
    estimator = FocalLengthEstimator(assumed_fov_degrees=60.0)
    expected = 320 / math.tan(math.radians(45))

    assert estimator.effective_focal_length_px(640, assumed_fov_degrees=90.0) == pytest.approx(expected)


def test_calibration_takes_precedence_until_cleared() -> None:
    estimator = FocalLengthEstimator()

    focal = estimator.calibrate(known_width_cm=10, known_distance_cm=50, observed_pixel_width=200)

    assert focal == pytest.approx(1000.0)
    assert estimator.is_calibrated
    # independent of image width and FOV once calibrated
    assert estimator.effective_focal_length_px(640) == pytest.approx(1000.0)
    assert estimator.effective_focal_length_px(1920, assumed_fov_degrees=90) == pytest.approx(1000.0)

    estimator.clear_calibration()
    assert not estimator.is_calibrated
    assert estimator.effective_focal_length_px(1280) == pytest.approx(1108.51, abs=0.01)


def test_recalibration_replaces_previous_value() -> None:
    estimator = FocalLengthEstimator()
    estimator.calibrate(10, 50, 200)
    estimator.calibrate(8, 100, 100)

    assert estimator.calibrated_focal_length_px == pytest.approx(1250.0)


@pytest.mark.parametrize("args", [(0, 50, 200), (10, 0, 200), (10, 50, 0), (-1, 50, 200)])
def test_calibration_rejects_non_positive_inputs(args) -> None:
    with pytest.raises(ValueError):
        FocalLengthEstimator().calibrate(*args)


def test_constructor_validation() -> None:
    with pytest.raises(ValueError):
        FocalLengthEstimator(assumed_fov_degrees=0)
    with pytest.raises(ValueError):
        FocalLengthEstimator(calibrated_focal_length_px=-5)
