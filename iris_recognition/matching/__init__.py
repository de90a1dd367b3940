from .interface import IrisMatcher, FeatureLengthMismatchError
from .weighted_matcher import WeightedSimilarityMatcher, validate_features
__all__ = ['IrisMatcher', 'FeatureLengthMismatchError', 'WeightedSimilarityMatcher', 'validate_features']
