from abc import ABC, abstractmethod
import numpy as np
from typing import List, Optional
from ..utils.dataclasses import IrisLocation

class IrisLocalizer(ABC):
    @abstractmethod
    def locate(self, eye_image: np.ndarray) -> Optional[IrisLocation]:
        """Locate the iris in a grayscale eye region.
        Returns: IrisLocation, or None when the region is degenerate."""
        pass

    def scan(self, image: np.ndarray, max_candidates: int = 2) -> List[IrisLocation]:
        """Find iris-like circles anywhere in a larger grayscale region."""
        return []
