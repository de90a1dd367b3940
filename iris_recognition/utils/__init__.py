from .dataclasses import (
    FeatureVector,
    EyeImage,
    IrisLocation,
    NormalizedIris,
    SimilarityBreakdown,
    IrisRecord,
    MatchResult,
    DetectedIris,
    IrisPair,
)
from .geometry import (
    Box,
    l2_normalize,
    l1_normalize,
    cosine_similarity,
    euclidean_distance,
    expand_box,
    crop,
    crop_with_zero_fill,
)

__all__ = [
    'FeatureVector', 'EyeImage', 'IrisLocation', 'NormalizedIris', 'SimilarityBreakdown',
    'IrisRecord', 'MatchResult', 'DetectedIris', 'IrisPair',
    'Box', 'l2_normalize', 'l1_normalize', 'cosine_similarity', 'euclidean_distance',
    'expand_box', 'crop', 'crop_with_zero_fill',
]
