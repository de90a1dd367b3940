import numpy as np
import pytest

from iris_recognition import HaarEyeDetector, HaarFaceDetector, HoughIrisLocalizer, IrisLocation, LocalizerConfig

from conftest import draw_irises


def assert_near_circle(location, center, radius, size):
    assert location is not None
    assert abs(location.center[0] - center[0]) <= 0.05 * size[1]
    assert abs(location.center[1] - center[1]) <= 0.05 * size[0]
    assert abs(location.radius - radius) <= 0.15 * radius


@pytest.mark.parametrize("pupil", [False, True])
def test_locates_synthetic_iris_at_center(localizer, pupil):
    image = draw_irises((160, 160), [(80, 80)], 30, pupil=pupil)

    location = localizer.locate(image[:, :, 0])

    assert_near_circle(location, (80, 80), 30, (160, 160))
    assert location.quality == 1.0
    assert not location.is_fallback


def test_locates_iris_in_wide_bgr_region(localizer):
    image = draw_irises((120, 200), [(100, 60)], 25)

    location = localizer.locate(image)

    assert_near_circle(location, (100, 60), 25, (120, 200))


def test_falls_back_to_centered_guess_without_circle(localizer):
    flat = np.full((100, 120), 128, dtype=np.uint8)

    location = localizer.locate(flat)

    assert location is not None
    assert location.is_fallback
    assert location.quality == pytest.approx(localizer.config.fallback_quality)
    assert location.center == (60.0, 50.0)
    assert location.radius == pytest.approx(0.28 * 120)


@pytest.mark.parametrize("region", [
    None,
    np.zeros((0, 0), dtype=np.uint8),
    np.zeros((3, 40), dtype=np.uint8),
    np.zeros(10, dtype=np.uint8),
])
def test_degenerate_region_is_not_found(localizer, region):
    assert localizer.locate(region) is None


def test_selects_central_circle_then_larger_radius(localizer):
    # Far circle loses against central ones
    circles = [(10.0, 10.0, 30.0), (50.0, 50.0, 10.0), (58.0, 50.0, 20.0)]
    assert localizer._select_circle(circles, (50.0, 50.0)) == (50.0, 50.0, 10.0)

    # Near tie in distance: the larger radius wins
    circles = [(50.0, 50.0, 10.0), (50.5, 50.0, 20.0)]
    assert localizer._select_circle(circles, (50.0, 50.0)) == (50.5, 50.0, 20.0)


def test_scan_finds_both_irises(localizer, two_eye_frame):
    locations = localizer.scan(two_eye_frame, max_candidates=2)

    assert len(locations) == 2
    xs = sorted(location.center[0] for location in locations)
    assert xs[0] == pytest.approx(90, abs=5)
    assert xs[1] == pytest.approx(210, abs=5)
    for location in locations:
        assert location.radius == pytest.approx(12, rel=0.25)


def test_scan_of_flat_region_is_empty(localizer):
    assert localizer.scan(np.full((200, 300), 90, dtype=np.uint8)) == []
    assert localizer.scan(None) == []


def test_iris_location_requires_positive_radius():
    with pytest.raises(ValueError):
        IrisLocation(center=(1, 1), radius=0)
    with pytest.raises(ValueError):
        IrisLocation(center=(1, 1), radius=5, quality=0)


def test_iris_location_translation_keeps_radius_and_quality():
    location = IrisLocation(center=(10, 20), radius=5, quality=0.5)

    moved = location.translated(3, -4)

    assert moved.center == (13.0, 16.0)
    assert moved.radius == 5.0
    assert moved.quality == 0.5
    assert IrisLocation.deserialize(moved.serialize()) == moved


def test_localizer_config_validation():
    with pytest.raises(ValueError):
        LocalizerConfig(min_radius_ratio=0.6, max_radius_ratio=0.5)
    with pytest.raises(ValueError):
        LocalizerConfig(fallback_quality=1.0)
    with pytest.raises(ValueError):
        LocalizerConfig(blur_kernel=(4, 4))

    localizer = HoughIrisLocalizer(LocalizerConfig(fallback_radius_ratio=0.3))
    location = localizer.locate(np.full((50, 50), 10, dtype=np.uint8))
    assert location.radius == pytest.approx(15.0)


def test_eye_detector_finds_nothing_in_blank_image():
    detector = HaarEyeDetector()

    assert detector.detect(np.full((200, 200), 127, dtype=np.uint8)) == []
    assert detector.detect(np.zeros((10, 10), dtype=np.uint8)) == []


def test_eye_detector_rejects_missing_cascade(tmp_path):
    with pytest.raises(RuntimeError):
        HaarEyeDetector(cascade_path=str(tmp_path / "missing.xml"))


def test_locates_single_channel_region(localizer):
    image = draw_irises((160, 160), [(80, 80)], 30)[:, :, :1]

    location = localizer.locate(image)

    assert_near_circle(location, (80, 80), 30, (160, 160))


def test_face_detector_finds_nothing_in_blank_frame():
    detector = HaarFaceDetector()

    assert detector.detect(np.full((300, 300), 127, dtype=np.uint8)) == []
    assert detector.detect(np.zeros((100, 100), dtype=np.uint8)) == []


def test_face_detector_validation(tmp_path):
    with pytest.raises(RuntimeError):
        HaarFaceDetector(cascade_path=str(tmp_path / "missing.xml"))
    with pytest.raises(ValueError):
        HaarFaceDetector(scale_factor=1.0)
