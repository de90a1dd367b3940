from abc import ABC, abstractmethod
import numpy as np


class FeatureLengthMismatchError(ValueError):
    """Raised when two feature vectors do not share the same length and layout."""
    pass


class IrisMatcher(ABC):
    @abstractmethod
    def match(self, feature1: np.ndarray, feature2: np.ndarray) -> float:
        """Compare two iris features and return similarity score."""
        pass
