import logging
import numpy as np
import cv2
from typing import Optional
from skimage.feature import local_binary_pattern
from .interface import FeatureExtractor
from ..config import ExtractorConfig
from ..normalization.polar_normalizer import PolarNormalizer
from ..utils.dataclasses import EyeImage, FeatureVector, IrisLocation
from ..utils.geometry import crop_with_zero_fill, l1_normalize

logger = logging.getLogger(__name__)

LBP_POINTS = 8
LBP_RADIUS = 1
LBP_CODES = 2 ** LBP_POINTS

HUE_RANGE = 180.0
SATURATION_RANGE = 256.0


def iris_bounding_patch(gray: np.ndarray, location: IrisLocation, size: int) -> np.ndarray:
    """Square patch around the iris, zero-filled outside the image and resampled to size x size."""
    cx, cy = location.center
    r = location.radius
    x1, y1 = int(np.floor(cx - r)), int(np.floor(cy - r))
    x2, y2 = int(np.ceil(cx + r)) + 1, int(np.ceil(cy + r)) + 1

    patch = crop_with_zero_fill(gray, x1, y1, x2, y2)
    return cv2.resize(patch, (size, size), interpolation=cv2.INTER_LINEAR)


def cell_histograms(codes: np.ndarray, grid: int, bins: int, n_codes: int = LBP_CODES) -> np.ndarray:
    """Split a code map into grid x grid cells and L1-normalize one histogram per cell."""
    histograms = []
    for band in np.array_split(codes, grid, axis=0):
        for cell in np.array_split(band, grid, axis=1):
            hist, _ = np.histogram(cell, bins=bins, range=(0, n_codes))
            histograms.append(l1_normalize(hist))
    return np.concatenate(histograms)


def iris_disc_mask(shape, location: IrisLocation) -> np.ndarray:
    """uint8 mask (255 inside) of the iris disc, clipped to the image."""
    mask = np.zeros(shape[:2], dtype=np.uint8)
    center = (int(round(location.center[0])), int(round(location.center[1])))
    cv2.circle(mask, center, int(round(location.radius)), 255, thickness=-1)
    return mask


def hue_saturation_histogram(hsv: np.ndarray, mask: np.ndarray, hue_bins: int, saturation_bins: int) -> np.ndarray:
    hist = cv2.calcHist(
        [hsv], [0, 1], mask, [hue_bins, saturation_bins], [0, HUE_RANGE, 0, SATURATION_RANGE]
    )
    return l1_normalize(hist.ravel())


def hue_saturation_moments(hsv: np.ndarray, mask: np.ndarray) -> np.ndarray:
    """Mean and standard deviation of hue and saturation, scaled by the channel range."""
    pixels = hsv[mask > 0]
    if pixels.size == 0:
        return np.zeros(4, dtype=np.float64)

    hue = pixels[:, 0].astype(np.float64)
    saturation = pixels[:, 1].astype(np.float64)
    return np.array([
        hue.mean() / HUE_RANGE,
        hue.std() / HUE_RANGE,
        saturation.mean() / 255.0,
        saturation.std() / 255.0,
    ])


class LocalBinaryPatternEncoder:
    """Per-cell histograms of 8-neighbour LBP codes over the iris bounding box."""
    def __init__(self, patch_size: int = 64, grid: int = 4, bins: int = 8):
        self.patch_size = patch_size
        self.grid = grid
        self.bins = bins

    @property
    def length(self) -> int:
        return self.grid * self.grid * self.bins

    def run(self, gray: np.ndarray, location: IrisLocation) -> np.ndarray:
        patch = iris_bounding_patch(gray, location, self.patch_size)
        codes = local_binary_pattern(patch, LBP_POINTS, LBP_RADIUS, method="default")
        return cell_histograms(codes, self.grid, self.bins)


class HSVColorEncoder:
    """Joint hue/saturation histogram of the iris disc followed by hue/saturation moments."""
    def __init__(self, hue_bins: int = 8, saturation_bins: int = 8):
        self.hue_bins = hue_bins
        self.saturation_bins = saturation_bins

    @property
    def length(self) -> int:
        return self.hue_bins * self.saturation_bins + 4

    def run(self, hsv: np.ndarray, location: IrisLocation) -> np.ndarray:
        mask = iris_disc_mask(hsv.shape, location)
        return np.concatenate([
            hue_saturation_histogram(hsv, mask, self.hue_bins, self.saturation_bins),
            hue_saturation_moments(hsv, mask),
        ])


class MultiModalFeatureExtractor(FeatureExtractor):
    """Concatenate polar intensity samples, LBP histograms and HSV color statistics.

    Segment order and lengths come from ExtractorConfig.layout and never from
    the input, so vectors from any image size are comparable.
    """
    def __init__(self, config: Optional[ExtractorConfig] = None):
        super().__init__()
        self.config = config or ExtractorConfig()
        self.layout = self.config.layout

        self.normalizer = PolarNormalizer(rings=self.config.rings, angles=self.config.angles)
        self.lbp_encoder = LocalBinaryPatternEncoder(
            patch_size=self.config.lbp_patch_size,
            grid=self.config.lbp_grid,
            bins=self.config.lbp_bins
        )
        self.color_encoder = HSVColorEncoder(
            hue_bins=self.config.hue_bins,
            saturation_bins=self.config.saturation_bins
        )

    def extract(self, eye_image: EyeImage | np.ndarray, location: IrisLocation) -> FeatureVector:
        """Extract features from the eye image around the located iris."""
        if not isinstance(eye_image, EyeImage):
            eye_image = EyeImage.from_image(eye_image)

        shape = self.normalizer.normalize(eye_image.gray, location).normalized_image.ravel()
        texture = self.lbp_encoder.run(eye_image.gray, location)
        color = self.color_encoder.run(eye_image.hsv, location)

        features = np.concatenate([shape, texture, color]).astype(np.float64)
        if features.shape[0] != self.layout.length:
            raise ValueError(
                f"Extracted {features.shape[0]} features, layout expects {self.layout.length}"
            )

        logger.debug(
            "Extracted %d features at %s (quality %.2f)",
            features.shape[0], location.center, location.quality
        )
        return features
