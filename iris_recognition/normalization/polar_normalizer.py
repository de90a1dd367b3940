import numpy as np
import cv2
from typing import Tuple
from .interface import IrisNormalizer
from ..utils.dataclasses import IrisLocation, NormalizedIris


def polar_grid(rings: int, angles: int) -> Tuple[np.ndarray, np.ndarray]:
    """Relative radii (0..1, inclusive) and angles (0..2pi, exclusive) of the sampling grid."""
    rhos = np.linspace(0.0, 1.0, rings, endpoint=True)
    phis = np.linspace(0.0, 2.0 * np.pi, angles, endpoint=False)
    return rhos, phis


class PolarNormalizer(IrisNormalizer):
    """
    Implementation of a normalization algorithm which samples intensities on
    concentric rings around the iris center.

    The grid size is fixed, so the output shape does not depend on the input
    image size or iris radius. Samples falling outside the image are zero and
    masked out.
    """
    def __init__(self, rings: int = 8, angles: int = 16, max_value: float = 255.0):
        if rings < 2 or angles < 2:
            raise ValueError("rings and angles must be >= 2")
        if max_value <= 0:
            raise ValueError("max_value must be > 0")
        self.rings = rings
        self.angles = angles
        self.max_value = max_value
        self.rhos, self.phis = polar_grid(rings, angles)

    def normalize(self, image: np.ndarray, location: IrisLocation) -> NormalizedIris:
        """
        Normalize iris by nearest-pixel sampling from cartesian to polar coordinates.

        Args:
            image (np.ndarray): Grayscale (or BGR) eye image.
            location (IrisLocation): Iris center and radius in image coordinates.

        Returns:
            NormalizedIris: rings x angles samples in [0, 1] and their validity mask.
        """
        if image.ndim == 3:
            image = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        h, w = image.shape[:2]
        cx, cy = location.center

        # Sampling points for every (ring, angle) pair
        radii = self.rhos[:, np.newaxis] * location.radius
        xs = np.round(cx + radii * np.cos(self.phis)[np.newaxis, :]).astype(int)
        ys = np.round(cy + radii * np.sin(self.phis)[np.newaxis, :]).astype(int)

        # Check points outside image
        inside = (xs >= 0) & (xs < w) & (ys >= 0) & (ys < h)

        norm_img = np.zeros((self.rings, self.angles), dtype=np.float64)
        norm_img[inside] = image[ys[inside], xs[inside]] / self.max_value
        norm_img = np.clip(norm_img, 0.0, 1.0)

        return NormalizedIris(normalized_img=norm_img, normalized_mask=inside)
