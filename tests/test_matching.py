import numpy as np
import pytest

from iris_recognition import FeatureLengthMismatchError, MatcherConfig, WeightedSimilarityMatcher
from iris_recognition.config import DEFAULT_LAYOUT
from iris_recognition.utils.dataclasses import SimilarityBreakdown
from iris_recognition.utils.geometry import cosine_similarity, crop_with_zero_fill, expand_box, l1_normalize, l2_normalize


def test_cosine_similarity_with_itself_is_one(rng):
    a = rng.random(50)
    assert cosine_similarity(a, a) == pytest.approx(1.0, abs=1e-5)


def test_cosine_similarity_is_symmetric(rng):
    a, b = rng.random(50), rng.normal(size=50)
    assert cosine_similarity(a, b) == cosine_similarity(b, a)


def test_cosine_similarity_of_zero_vector_is_zero():
    assert cosine_similarity(np.zeros(10), np.ones(10)) == 0.0
    assert cosine_similarity(np.zeros(10), np.zeros(10)) == 0.0


def test_cosine_similarity_shape_mismatch():
    with pytest.raises(ValueError):
        cosine_similarity(np.ones(3), np.ones(4))


def test_normalizers_keep_zero_vectors():
    assert np.array_equal(l2_normalize(np.zeros(4)), np.zeros(4))
    assert np.array_equal(l1_normalize(np.zeros(4)), np.zeros(4))
    assert l1_normalize(np.array([1.0, 3.0])).tolist() == [0.25, 0.75]
    assert np.linalg.norm(l2_normalize(np.array([3.0, 4.0]))) == pytest.approx(1.0)


def test_expand_box_adds_margin_and_clips():
    assert expand_box((50, 50, 100, 100), 0.2, (400, 400)) == (30, 30, 140, 140)
    assert expand_box((0, 0, 100, 100), 0.2, (110, 110)) == (0, 0, 110, 110)
    assert expand_box((500, 500, 10, 10), 0.2, (100, 100)) is None


def test_crop_with_zero_fill():
    image = np.arange(1, 10, dtype=np.uint8).reshape(3, 3)

    patch = crop_with_zero_fill(image, -1, -1, 2, 2)

    assert patch.tolist() == [[0, 0, 0], [0, 1, 2], [0, 4, 5]]


def test_self_match_scores_one(matcher, random_features):
    v = random_features()
    assert matcher.match(v, v) == pytest.approx(1.0, abs=1e-5)


def test_match_is_symmetric(matcher, random_features):
    a, b = random_features(), random_features()
    assert matcher.match(a, b) == matcher.match(b, a)


def test_weights_are_applied(matcher, random_features):
    v = random_features()
    color_only = v.copy()
    color_only[DEFAULT_LAYOUT.color_slice] = random_features()[DEFAULT_LAYOUT.color_slice]
    everything = random_features()

    assert matcher.match(v, color_only) > matcher.match(v, everything)


def test_match_is_scale_invariant(matcher, random_features):
    v, stored = random_features(), random_features()
    assert matcher.match(2.0 * v, stored) == pytest.approx(matcher.match(v, stored), abs=1e-12)


def test_zero_query_scores_exactly_zero(matcher, random_features):
    breakdown = matcher.compare(np.zeros(DEFAULT_LAYOUT.length), random_features())

    assert breakdown == SimilarityBreakdown(shape=0.0, texture=0.0, color=0.0, combined=0.0)


def test_length_mismatch_is_fatal(matcher, random_features):
    with pytest.raises(FeatureLengthMismatchError):
        matcher.match(random_features(), np.ones(DEFAULT_LAYOUT.length - 1))
    with pytest.raises(ValueError):
        matcher.match(np.ones((2, DEFAULT_LAYOUT.length)), random_features())


def test_color_gate_rejects_color_mismatch(matcher):
    strong_but_wrong_color = SimilarityBreakdown(shape=1.0, texture=1.0, color=0.5, combined=0.8)
    assert not matcher.accepts(strong_but_wrong_color)

    ungated = WeightedSimilarityMatcher(MatcherConfig(color_gate=False))
    assert ungated.accepts(strong_but_wrong_color)


def test_low_quality_localization_is_discounted(matcher):
    breakdown = SimilarityBreakdown(shape=0.9, texture=0.9, color=0.9, combined=0.9)

    assert matcher.accepts(breakdown, quality=1.0)
    assert not matcher.accepts(breakdown, quality=0.85)
    assert matcher.confidence(breakdown, quality=0.85) == pytest.approx(0.765)


def test_threshold_property(matcher):
    matcher.threshold = 0.5
    assert matcher.config.min_confidence == 0.5
    with pytest.raises(ValueError):
        matcher.threshold = 1.5


def test_matcher_config_validation():
    with pytest.raises(ValueError):
        MatcherConfig(shape_weight=0.5, texture_weight=0.5, color_weight=0.5)
    with pytest.raises(ValueError):
        MatcherConfig(shape_weight=-0.1, texture_weight=0.7, color_weight=0.4)
    with pytest.raises(ValueError):
        MatcherConfig(min_confidence=2.0)
