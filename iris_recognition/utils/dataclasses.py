import numpy as np
import cv2
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

# A feature vector is a flat float64 array laid out by config.FeatureLayout
FeatureVector = np.ndarray


class EyeImage:
    """Grayscale and HSV views of one cropped eye region."""
    def __init__(self, gray: np.ndarray, hsv: np.ndarray) -> None:
        self._validate_array_2d(gray, "gray")
        if not isinstance(hsv, np.ndarray) or hsv.ndim != 3 or hsv.shape[2] != 3:
            raise ValueError("hsv must be a 3-channel numpy array.")
        if gray.shape != hsv.shape[:2]:
            raise ValueError(f"gray and hsv must be aligned, got {gray.shape} and {hsv.shape[:2]}")

        self.gray = gray
        self.hsv = hsv

    @staticmethod
    def from_image(image: np.ndarray) -> "EyeImage":
        """Build an EyeImage from a BGR, BGRA or grayscale (H x W or H x W x 1) uint8 array."""
        image = np.ascontiguousarray(image)
        if image.dtype != np.uint8:
            image = np.clip(image, 0, 255).astype(np.uint8)
        if image.ndim == 3 and image.shape[2] == 1:
            image = np.ascontiguousarray(image[:, :, 0])

        if image.ndim == 2:
            gray = image
            bgr = cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
        elif image.ndim == 3 and image.shape[2] == 4:
            bgr = cv2.cvtColor(image, cv2.COLOR_BGRA2BGR)
            gray = cv2.cvtColor(bgr, cv2.COLOR_BGR2GRAY)
        elif image.ndim == 3 and image.shape[2] == 3:
            bgr = image
            gray = cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
        else:
            raise ValueError(f"Unsupported image shape {image.shape}")

        return EyeImage(gray=gray, hsv=cv2.cvtColor(bgr, cv2.COLOR_BGR2HSV))

    @property
    def height(self) -> int:
        return self.gray.shape[0]

    @property
    def width(self) -> int:
        return self.gray.shape[1]

    @staticmethod
    def _validate_array_2d(arr: np.ndarray, name: str):
        if not isinstance(arr, np.ndarray) or arr.ndim != 2:
            raise ValueError(f"{name} must be a 2D numpy array.")


class IrisLocation:
    """Iris circle in pixel coordinates.

    quality is 1.0 for a detected circle and lower for a fallback guess, so
    that matching can discount imprecise localizations.
    """
    def __init__(self, center: Tuple[float, float], radius: float, quality: float = 1.0) -> None:
        if not radius > 0:
            raise ValueError(f"radius must be > 0, got {radius}")
        if not 0.0 < quality <= 1.0:
            raise ValueError(f"quality must be in (0, 1], got {quality}")

        self.center = (float(center[0]), float(center[1]))
        self.radius = float(radius)
        self.quality = float(quality)

    @property
    def is_fallback(self) -> bool:
        return self.quality < 1.0

    def translated(self, dx: float, dy: float) -> "IrisLocation":
        """Return the same circle shifted by (dx, dy)."""
        return IrisLocation(
            center=(self.center[0] + dx, self.center[1] + dy),
            radius=self.radius,
            quality=self.quality
        )

    def serialize(self) -> Dict[str, Any]:
        return {"center": self.center, "radius": self.radius, "quality": self.quality}

    @staticmethod
    def deserialize(data: Dict[str, Any]) -> "IrisLocation":
        return IrisLocation(**data)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, IrisLocation):
            return NotImplemented
        return self.serialize() == other.serialize()

    def __repr__(self) -> str:
        return f"IrisLocation(center={self.center}, radius={self.radius:.2f}, quality={self.quality:.2f})"


class NormalizedIris:
    """Polar samples of an iris: rows are rings, columns are angular steps."""
    def __init__(self, normalized_img: np.ndarray, normalized_mask: np.ndarray):
        self._validate_array_2d(normalized_img, "normalized_image")
        self._validate_array_2d(normalized_mask, "normalized_mask")
        self._validate_same_shape(normalized_img, normalized_mask)

        self.normalized_image = normalized_img.astype(np.float64)
        self.normalized_mask = normalized_mask.astype(bool)

    @property
    def rings(self) -> int:
        return self.normalized_image.shape[0]

    @property
    def angles(self) -> int:
        return self.normalized_image.shape[1]

    @staticmethod
    def _validate_array_2d(arr: np.ndarray, name: str):
        if not isinstance(arr, np.ndarray) or arr.ndim != 2:
            raise ValueError(f"{name} must be a 2D numpy array.")

    @staticmethod
    def _validate_same_shape(arr1: np.ndarray, arr2: np.ndarray):
        if arr1.shape != arr2.shape:
            raise ValueError("normalized_image and normalized_mask must have the same shape.")


@dataclass(frozen=True)
class SimilarityBreakdown:
    """Per-segment cosine similarities and their weighted combination."""
    shape: float
    texture: float
    color: float
    combined: float


@dataclass(frozen=True)
class IrisRecord:
    """An enrolled identity."""
    name: str
    features: FeatureVector


@dataclass(frozen=True)
class MatchResult:
    best_name: Optional[str]
    confidence: float

    @property
    def is_match(self) -> bool:
        return self.best_name is not None


@dataclass(frozen=True)
class DetectedIris:
    """A located iris (frame coordinates) and the features extracted from it."""
    location: IrisLocation
    features: FeatureVector


@dataclass(frozen=True)
class IrisPair:
    """Up to two irises from one frame, ordered by x position only."""
    left_iris: Optional[DetectedIris] = None
    right_iris: Optional[DetectedIris] = None

    @property
    def primary(self) -> Optional[DetectedIris]:
        return self.left_iris if self.left_iris is not None else self.right_iris

    @property
    def count(self) -> int:
        return sum(iris is not None for iris in (self.left_iris, self.right_iris))
