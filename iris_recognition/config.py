from dataclasses import dataclass
from typing import Tuple


@dataclass(frozen=True)
class FeatureLayout:
    """Fixed segment layout of a feature vector: shape/texture, LBP, color."""
    shape_length: int
    texture_length: int
    color_length: int

    def __post_init__(self) -> None:
        for name in ("shape_length", "texture_length", "color_length"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0")

    @property
    def length(self) -> int:
        return self.shape_length + self.texture_length + self.color_length

    @property
    def shape_slice(self) -> slice:
        return slice(0, self.shape_length)

    @property
    def texture_slice(self) -> slice:
        return slice(self.shape_length, self.shape_length + self.texture_length)

    @property
    def color_slice(self) -> slice:
        return slice(self.shape_length + self.texture_length, self.length)


@dataclass
class LocalizerConfig:
    """Parameters of the Hough circle iris localizer."""
    clahe_clip_limit: float = 2.0
    clahe_tile_grid: Tuple[int, int] = (8, 8)
    blur_kernel: Tuple[int, int] = (5, 5)
    blur_sigma: float = 1.5

    # Radius band as fractions of the eye region height
    min_radius_ratio: float = 0.15
    max_radius_ratio: float = 0.5

    # Radius band for a whole-region scan (face crop, no eye boxes)
    scan_min_radius_ratio: float = 0.03
    scan_max_radius_ratio: float = 0.15

    hough_dp: float = 1.0
    hough_min_dist_ratio: float = 0.125
    canny_threshold: float = 80.0
    accumulator_threshold: float = 18.0

    # Selection score: distance to region center - radius_weight * radius
    radius_weight: float = 0.1

    fallback_radius_ratio: float = 0.28
    fallback_quality: float = 0.85
    min_region_size: int = 8

    def __post_init__(self) -> None:
        if not 0.0 < self.min_radius_ratio < self.max_radius_ratio:
            raise ValueError("Expected 0 < min_radius_ratio < max_radius_ratio")
        if not 0.0 < self.scan_min_radius_ratio < self.scan_max_radius_ratio:
            raise ValueError("Expected 0 < scan_min_radius_ratio < scan_max_radius_ratio")
        if not 0.0 < self.fallback_radius_ratio <= 0.5:
            raise ValueError("fallback_radius_ratio must be in (0, 0.5]")
        if not 0.0 < self.fallback_quality < 1.0:
            raise ValueError("fallback_quality must be in (0, 1)")
        if any(k % 2 == 0 or k < 1 for k in self.blur_kernel):
            raise ValueError("blur_kernel sizes must be positive odd numbers")
        if self.min_region_size < 1:
            raise ValueError("min_region_size must be >= 1")


@dataclass
class ExtractorConfig:
    """Parameters of the multi-modal feature extractor.

    The feature layout is derived from these counts only, so every vector
    produced with the same config has the same length and segment offsets.
    """
    rings: int = 8
    angles: int = 16

    lbp_patch_size: int = 64
    lbp_grid: int = 4
    lbp_bins: int = 8

    hue_bins: int = 8
    saturation_bins: int = 8

    def __post_init__(self) -> None:
        if self.rings < 2 or self.angles < 2:
            raise ValueError("rings and angles must be >= 2")
        if self.lbp_grid < 1 or self.lbp_bins < 1:
            raise ValueError("lbp_grid and lbp_bins must be >= 1")
        if self.lbp_patch_size < 3 * self.lbp_grid:
            raise ValueError("lbp_patch_size is too small for the LBP grid")
        if self.hue_bins < 1 or self.saturation_bins < 1:
            raise ValueError("hue_bins and saturation_bins must be >= 1")

    @property
    def layout(self) -> FeatureLayout:
        return FeatureLayout(
            shape_length=self.rings * self.angles,
            texture_length=self.lbp_grid * self.lbp_grid * self.lbp_bins,
            # joint histogram + hue/saturation mean and std
            color_length=self.hue_bins * self.saturation_bins + 4,
        )


@dataclass
class MatcherConfig:
    """Weights and thresholds of the weighted similarity matcher."""
    shape_weight: float = 0.1
    texture_weight: float = 0.5
    color_weight: float = 0.4
    min_confidence: float = 0.8
    color_gate: bool = True
    color_threshold: float = 0.6

    def __post_init__(self) -> None:
        weights = (self.shape_weight, self.texture_weight, self.color_weight)
        if any(w < 0 for w in weights):
            raise ValueError("Weights must be non-negative")
        if abs(sum(weights) - 1.0) > 1e-6:
            raise ValueError(f"Weights must sum to 1.0, got {sum(weights)}")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError("min_confidence must be between 0 and 1")
        if not 0.0 <= self.color_threshold <= 1.0:
            raise ValueError("color_threshold must be between 0 and 1")


@dataclass
class PipelineConfig:
    """Orchestration parameters."""
    face_margin: float = 0.2
    max_irises: int = 2
    eye_scale_factor: float = 1.1
    eye_min_neighbors: int = 8
    eye_min_size: Tuple[int, int] = (24, 24)
    face_scale_factor: float = 1.05
    face_min_neighbors: int = 4
    face_min_size: Tuple[int, int] = (150, 150)
    face_max_size: Tuple[int, int] = (800, 800)
    output_dir: str = "tmp"

    def __post_init__(self) -> None:
        if self.face_margin < 0:
            raise ValueError("face_margin must be >= 0")
        if self.max_irises < 1:
            raise ValueError("max_irises must be >= 1")
        if self.face_scale_factor <= 1.0 or self.eye_scale_factor <= 1.0:
            raise ValueError("Cascade scale factors must be > 1")


DEFAULT_LAYOUT = ExtractorConfig().layout
