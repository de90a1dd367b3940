from .interface import IrisNormalizer
from .polar_normalizer import PolarNormalizer

__all__ = ['IrisNormalizer', 'PolarNormalizer']
