from abc import ABC, abstractmethod
import numpy as np
from ..utils.dataclasses import IrisLocation, NormalizedIris

class IrisNormalizer(ABC):
    @abstractmethod
    def normalize(self, image: np.ndarray, location: IrisLocation) -> NormalizedIris:
        """Sample the iris into a fixed-size polar representation."""
        pass
