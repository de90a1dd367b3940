"""Iris localization, feature extraction and identity matching."""
from .config import (
    DEFAULT_LAYOUT,
    ExtractorConfig,
    FeatureLayout,
    LocalizerConfig,
    MatcherConfig,
    PipelineConfig,
)
from .database import IrisDatabase
from .feature_extraction import FeatureExtractor, MultiModalFeatureExtractor
from .localization import HaarEyeDetector, HaarFaceDetector, HoughIrisLocalizer, IrisLocalizer
from .matching import FeatureLengthMismatchError, IrisMatcher, WeightedSimilarityMatcher
from .normalization import IrisNormalizer, PolarNormalizer
from .pipeline import IrisRecognitionPipeline
from .utils import DetectedIris, EyeImage, IrisLocation, IrisPair, IrisRecord, MatchResult

__all__ = [
    'DEFAULT_LAYOUT', 'ExtractorConfig', 'FeatureLayout', 'LocalizerConfig', 'MatcherConfig', 'PipelineConfig',
    'IrisDatabase', 'FeatureExtractor', 'MultiModalFeatureExtractor',
    'HaarEyeDetector', 'HaarFaceDetector', 'HoughIrisLocalizer', 'IrisLocalizer',
    'FeatureLengthMismatchError', 'IrisMatcher', 'WeightedSimilarityMatcher',
    'IrisNormalizer', 'PolarNormalizer', 'IrisRecognitionPipeline',
    'DetectedIris', 'EyeImage', 'IrisLocation', 'IrisPair', 'IrisRecord', 'MatchResult',
]
