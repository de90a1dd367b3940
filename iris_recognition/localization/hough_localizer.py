import logging
import numpy as np
import cv2
from typing import List, Optional, Tuple
from .interface import IrisLocalizer
from ..config import LocalizerConfig
from ..utils.dataclasses import IrisLocation
from ..utils.geometry import euclidean_distance

logger = logging.getLogger(__name__)

# (x, y, radius)
Circle = Tuple[float, float, float]


class HoughIrisLocalizer(IrisLocalizer):
    """Locate the iris as the most central circle found by a gradient Hough transform.

    The eye region is contrast-enhanced with CLAHE and smoothed before circle
    detection. Candidate radii are bounded relative to the region height. When
    no circle is found the localizer returns a centered guess with a reduced
    quality instead of failing, so that callers can still enroll or match and
    discount the result.
    """
    def __init__(self, config: Optional[LocalizerConfig] = None):
        super().__init__()
        self.config = config or LocalizerConfig()
        self.clahe = cv2.createCLAHE(
            clipLimit=self.config.clahe_clip_limit,
            tileGridSize=tuple(self.config.clahe_tile_grid)
        )

    def locate(self, eye_image: np.ndarray) -> Optional[IrisLocation]:
        """Locate the iris in a grayscale (or BGR) eye region."""
        if self._is_degenerate(eye_image):
            logger.debug("Degenerate eye region, no iris located")
            return None

        gray = self._to_gray(eye_image)
        h, w = gray.shape
        min_radius, max_radius = self._radius_band(
            h, self.config.min_radius_ratio, self.config.max_radius_ratio
        )
        min_dist = max(1.0, h * self.config.hough_min_dist_ratio)

        # Enhanced image first, plain smoothed image as a second chance
        circles = self._detect_circles(self.enhance(gray), min_dist, min_radius, max_radius)
        if not circles:
            circles = self._detect_circles(self._smooth(gray), min_dist, min_radius, max_radius)

        if circles:
            x, y, r = self._select_circle(circles, (w / 2.0, h / 2.0))
            return IrisLocation(center=(x, y), radius=r)

        return self._fallback(w, h)

    def scan(self, image: np.ndarray, max_candidates: int = 2) -> List[IrisLocation]:
        """Find up to `max_candidates` iris circles in a whole face or frame region.

        Candidates keep the accumulator order reported by OpenCV (strongest first).
        No fallback guess is made here.
        """
        if max_candidates < 1 or self._is_degenerate(image):
            return []

        gray = self._to_gray(image)
        h = gray.shape[0]
        min_radius, max_radius = self._radius_band(
            h, self.config.scan_min_radius_ratio, self.config.scan_max_radius_ratio
        )
        min_dist = max(2.0 * max_radius, h * self.config.hough_min_dist_ratio)

        circles = self._detect_circles(self.enhance(gray), min_dist, min_radius, max_radius)
        return [IrisLocation(center=(x, y), radius=r) for x, y, r in circles[:max_candidates]]

    def enhance(self, gray: np.ndarray) -> np.ndarray:
        """Apply CLAHE then Gaussian smoothing."""
        return self._smooth(self.clahe.apply(gray))

    def _smooth(self, gray: np.ndarray) -> np.ndarray:
        return cv2.GaussianBlur(gray, tuple(self.config.blur_kernel), self.config.blur_sigma)

    def _detect_circles(
        self, image: np.ndarray, min_dist: float, min_radius: int, max_radius: int
    ) -> List[Circle]:
        try:
            circles = cv2.HoughCircles(
                image,
                cv2.HOUGH_GRADIENT,
                dp=self.config.hough_dp,
                minDist=min_dist,
                param1=self.config.canny_threshold,
                param2=self.config.accumulator_threshold,
                minRadius=min_radius,
                maxRadius=max_radius
            )
        except cv2.error as e:
            logger.warning("Circle detection failed on %s region: %s", image.shape, e)
            return []

        if circles is None:
            return []
        return [(float(x), float(y), float(r)) for x, y, r in circles[0] if r > 0]

    def _select_circle(self, circles: List[Circle], region_center: Tuple[float, float]) -> Circle:
        """Closest circle to the region center; a larger radius wins near ties."""
        weight = self.config.radius_weight
        return min(
            circles,
            key=lambda c: euclidean_distance((c[0], c[1]), region_center) - weight * c[2]
        )

    def _fallback(self, width: int, height: int) -> IrisLocation:
        radius = max(1.0, self.config.fallback_radius_ratio * width)
        logger.debug("No circle found in %dx%d region, using centered fallback (r=%.1f)", width, height, radius)
        return IrisLocation(
            center=(width / 2.0, height / 2.0),
            radius=radius,
            quality=self.config.fallback_quality
        )

    def _is_degenerate(self, image: Optional[np.ndarray]) -> bool:
        if image is None or not isinstance(image, np.ndarray) or image.ndim < 2:
            return True
        h, w = image.shape[:2]
        return min(h, w) < self.config.min_region_size

    @staticmethod
    def _radius_band(height: int, min_ratio: float, max_ratio: float) -> Tuple[int, int]:
        min_radius = max(1, int(round(height * min_ratio)))
        max_radius = max(min_radius + 1, int(round(height * max_ratio)))
        return min_radius, max_radius

    @staticmethod
    def _to_gray(image: np.ndarray) -> np.ndarray:
        image = np.ascontiguousarray(image)
        if image.dtype != np.uint8:
            image = np.clip(image, 0, 255).astype(np.uint8)
        if image.ndim == 3 and image.shape[2] == 1:
            return np.ascontiguousarray(image[:, :, 0])
        if image.ndim == 3:
            code = cv2.COLOR_BGRA2GRAY if image.shape[2] == 4 else cv2.COLOR_BGR2GRAY
            image = cv2.cvtColor(image, code)
        return image
