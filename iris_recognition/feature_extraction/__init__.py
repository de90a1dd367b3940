from .interface import FeatureExtractor
from .multimodal_extractor import MultiModalFeatureExtractor, LocalBinaryPatternEncoder, HSVColorEncoder

__all__ = ['FeatureExtractor', 'MultiModalFeatureExtractor', 'LocalBinaryPatternEncoder', 'HSVColorEncoder']
