import numpy as np
from typing import Optional
from .interface import IrisMatcher, FeatureLengthMismatchError
from ..config import DEFAULT_LAYOUT, FeatureLayout, MatcherConfig
from ..utils.dataclasses import SimilarityBreakdown
from ..utils.geometry import cosine_similarity


def validate_features(features: np.ndarray, layout: FeatureLayout, name: str = "features") -> np.ndarray:
    """Return features as a flat float64 array, or raise if they do not fit the layout."""
    features = np.asarray(features, dtype=np.float64)
    if features.ndim != 1:
        raise FeatureLengthMismatchError(f"{name} must be a 1D vector, got shape {features.shape}")
    if features.shape[0] != layout.length:
        raise FeatureLengthMismatchError(
            f"{name} has {features.shape[0]} values, layout expects {layout.length}"
        )
    return features


class WeightedSimilarityMatcher(IrisMatcher):
    """Weighted per-segment cosine similarity between feature vectors.

    Each segment (shape, texture, color) is L2-normalized on its own right
    before the dot product, so the score does not depend on vector magnitude
    and a zero segment contributes 0 instead of NaN.
    """
    def __init__(self, config: Optional[MatcherConfig] = None, layout: FeatureLayout = DEFAULT_LAYOUT):
        """Initialize matcher parameters."""
        self.config = config or MatcherConfig()
        self.layout = layout

    @property
    def threshold(self) -> float:
        return self.config.min_confidence

    @threshold.setter
    def threshold(self, value: float):
        if not (0 <= value <= 1):
            raise ValueError("Threshold must be between 0 and 1.")
        self.config.min_confidence = value

    def compare(self, feature1: np.ndarray, feature2: np.ndarray) -> SimilarityBreakdown:
        """Per-segment similarities and their weighted combination."""
        feature1 = validate_features(feature1, self.layout, "feature1")
        feature2 = validate_features(feature2, self.layout, "feature2")

        shape = cosine_similarity(feature1[self.layout.shape_slice], feature2[self.layout.shape_slice])
        texture = cosine_similarity(feature1[self.layout.texture_slice], feature2[self.layout.texture_slice])
        color = cosine_similarity(feature1[self.layout.color_slice], feature2[self.layout.color_slice])

        combined = (
            self.config.shape_weight * shape
            + self.config.texture_weight * texture
            + self.config.color_weight * color
        )
        return SimilarityBreakdown(
            shape=shape,
            texture=texture,
            color=color,
            combined=float(np.clip(combined, -1.0, 1.0))
        )

    def match(self, feature1: np.ndarray, feature2: np.ndarray) -> float:
        """Combined similarity score, higher is more similar."""
        return self.compare(feature1, feature2).combined

    def confidence(self, breakdown: SimilarityBreakdown, quality: float = 1.0) -> float:
        """Combined score discounted by localization quality, clipped to [0, 1]."""
        return float(np.clip(breakdown.combined * quality, 0.0, 1.0))

    def accepts(self, breakdown: SimilarityBreakdown, quality: float = 1.0) -> bool:
        """Whether a comparison is strong enough to count as the same identity.

        Color alone must not carry a match, so when the color gate is enabled
        the color similarity has its own minimum as well.
        """
        if self.confidence(breakdown, quality) < self.config.min_confidence:
            return False
        if self.config.color_gate and breakdown.color < self.config.color_threshold:
            return False
        return True
