import itertools

import pytest

from objmeasure.dimensions import DimensionCalculator, Dimensions, round_half_up


def test_projection_at_sweet_spot() -> None:
    dims = DimensionCalculator().compute(100, 100, 100.0, 1280, 720)

    # visible width at 100 cm with a 60 deg FOV is ~115.5 cm
    assert dims == Dimensions(width_cm=9, height_cm=9, depth_cm=6, confidence_pct=100)


def test_unrounded_projection() -> None:
    width, height, depth = DimensionCalculator().project(640, 360, 100.0, 1280, 720)

    assert width == pytest.approx(57.735, abs=1e-3)
    assert height == pytest.approx(57.735 * 720 / 1280, abs=1e-3)
    assert depth == pytest.approx((width + height) / 2 * 0.7)


def test_dimensions_scale_with_distance() -> None:
    calc = DimensionCalculator()
    near = calc.project(200, 100, 50.0, 1280, 720)
    far = calc.project(200, 100, 200.0, 1280, 720)

    assert far[0] == pytest.approx(near[0] * 4)
    assert far[1] == pytest.approx(near[1] * 4)


def test_distance_factor_peaks_at_100cm() -> None:
    calc = DimensionCalculator()

    assert calc.confidence_factors(100, 100, 100.0)["distance"] == 1.0
    assert calc.confidence_factors(100, 100, 200.0)["distance"] == pytest.approx(0.5)
    assert calc.confidence_factors(100, 100, 0.0)["distance"] == pytest.approx(0.5)
    assert calc.confidence_factors(100, 100, 500.0)["distance"] == 0.0

    best = calc.compute(100, 100, 100.0, 1280, 720).confidence_pct
    for distance in (20.0, 60.0, 99.0, 101.0, 150.0, 400.0):
        assert calc.compute(100, 100, distance, 1280, 720).confidence_pct <= best


def test_size_factor_penalises_small_boxes() -> None:
    calc = DimensionCalculator()

    assert calc.compute(50, 50, 100.0, 1280, 720).confidence_pct == 25
    assert calc.compute(400, 400, 100.0, 1280, 720).confidence_pct == 100


def test_aspect_factor_penalises_elongation() -> None:
    calc = DimensionCalculator()

    assert calc.compute(200, 100, 100.0, 1280, 720).confidence_pct == 50
    assert calc.compute(1000, 100, 100.0, 1280, 720).confidence_pct == 0


def test_confidence_always_within_percent_range() -> None:
    calc = DimensionCalculator()
    sizes = [1, 5, 40, 100, 300, 1200]
    distances = [10.0, 55.5, 100.0, 250.0, 999.0]

    for w, h, d in itertools.product(sizes, sizes, distances):
        dims = calc.compute(w, h, d, 1280, 720)
        assert 0 <= dims.confidence_pct <= 100
        assert isinstance(dims.confidence_pct, int)
        assert isinstance(dims.width_cm, int)


@pytest.mark.parametrize("args", [
    (0, 100, 100.0, 1280, 720),
    (100, 0, 100.0, 1280, 720),
    (100, 100, 0.0, 1280, 720),
    (100, 100, None, 1280, 720),
    (100, 100, 100.0, 0, 720),
    (100, 100, 100.0, 1280, 0),
])
def test_degenerate_geometry_gives_no_dimensions(args) -> None:
    assert DimensionCalculator().compute(*args) is None


def test_custom_constants() -> None:
    calc = DimensionCalculator(sweet_spot_distance_cm=50.0, depth_ratio=1.0)

    assert calc.confidence_factors(100, 100, 50.0)["distance"] == 1.0
    width, height, depth = calc.project(100, 100, 100.0, 1280, 720)
    assert depth == pytest.approx((width + height) / 2)


def test_round_half_up() -> None:
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.49) == 2
    assert round_half_up(0.0) == 0


def test_to_dict() -> None:
    dims = Dimensions(10, 20, 11, 75)

    assert dims.to_dict() == {"width_cm": 10, "height_cm": 20, "depth_cm": 11, "confidence_pct": 75}
