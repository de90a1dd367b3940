from abc import ABC, abstractmethod
import numpy as np
from ..config import FeatureLayout
from ..utils.dataclasses import EyeImage, FeatureVector, IrisLocation

class FeatureExtractor(ABC):
    layout: FeatureLayout

    @abstractmethod
    def extract(self, eye_image: EyeImage | np.ndarray, location: IrisLocation) -> FeatureVector:
        """Extract a fixed-length feature vector from a located iris."""
        pass
