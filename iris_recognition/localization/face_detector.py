import logging
import numpy as np
import cv2
from typing import List, Optional, Tuple
from .eye_detector import largest_first, load_cascade
from ..utils.geometry import Box

logger = logging.getLogger(__name__)


class HaarFaceDetector:
    """Find face boxes in a whole frame with OpenCV's frontal face cascade.

    The largest face bounds the iris search when the caller does not pass a
    face region of its own.
    """

    CASCADE_FILE = "haarcascade_frontalface_alt.xml"

    def __init__(
        self,
        scale_factor: float = 1.05,
        min_neighbors: int = 4,
        min_size: Tuple[int, int] = (150, 150),
        max_size: Tuple[int, int] = (800, 800),
        cascade_path: Optional[str] = None
    ):
        if scale_factor <= 1.0:
            raise ValueError("scale_factor must be > 1")
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = tuple(min_size)
        self.max_size = tuple(max_size)
        self.cascade = load_cascade(self.CASCADE_FILE, cascade_path)

    def detect(self, gray: np.ndarray) -> List[Box]:
        """Return face boxes (x, y, w, h), largest first."""
        if gray is None or gray.ndim != 2 or min(gray.shape) < min(self.min_size):
            return []

        faces = self.cascade.detectMultiScale(
            cv2.equalizeHist(gray),
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_size,
            maxSize=self.max_size
        )
        if len(faces) == 0:
            return []

        boxes = largest_first(faces)
        logger.debug("Face cascade found %d face(s), using %s", len(boxes), boxes[0])
        return boxes
