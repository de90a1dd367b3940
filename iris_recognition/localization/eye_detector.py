import logging
import os
import numpy as np
import cv2
from typing import List, Optional, Tuple
from ..utils.geometry import Box

logger = logging.getLogger(__name__)


def load_cascade(filename: str, cascade_path: Optional[str] = None) -> cv2.CascadeClassifier:
    """Load a Haar cascade, by default one of the files bundled with OpenCV."""
    if cascade_path is None:
        cascade_path = os.path.join(cv2.data.haarcascades, filename)
    cascade = cv2.CascadeClassifier(cascade_path)
    if cascade.empty():
        raise RuntimeError(f"Failed to load cascade classifier: {cascade_path}")
    return cascade


def largest_first(detections) -> List[Box]:
    boxes = [tuple(int(v) for v in box) for box in detections]
    boxes.sort(key=lambda b: b[2] * b[3], reverse=True)
    return boxes


class HaarEyeDetector:
    """Propose eye regions inside a face crop with OpenCV's Haar eye cascade."""

    CASCADE_FILE = "haarcascade_eye.xml"

    def __init__(
        self,
        scale_factor: float = 1.1,
        min_neighbors: int = 8,
        min_size: Tuple[int, int] = (24, 24),
        max_eyes: int = 2,
        cascade_path: Optional[str] = None
    ):
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = tuple(min_size)
        self.max_eyes = max_eyes
        self.cascade = load_cascade(self.CASCADE_FILE, cascade_path)

    def detect(self, gray: np.ndarray) -> List[Box]:
        """Return at most `max_eyes` eye boxes (x, y, w, h), largest first."""
        if gray is None or gray.ndim != 2 or min(gray.shape) < self.min_size[0]:
            return []

        equalized = cv2.equalizeHist(gray)
        eyes = self.cascade.detectMultiScale(
            equalized,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size
        )
        if len(eyes) == 0:
            return []

        boxes = largest_first(eyes)
        logger.debug("Eye cascade found %d region(s)", len(boxes))
        return boxes[:self.max_eyes]
