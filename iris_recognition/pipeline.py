import logging
import os
import uuid
import numpy as np
import cv2
import matplotlib.pyplot as plt
from typing import List, Optional, Tuple
from .config import PipelineConfig
from .localization.interface import IrisLocalizer
from .localization.eye_detector import HaarEyeDetector
from .localization.face_detector import HaarFaceDetector
from .feature_extraction.interface import FeatureExtractor
from .database.iris_db import IrisDatabase
from .matching.weighted_matcher import validate_features
from .utils.dataclasses import DetectedIris, EyeImage, FeatureVector, IrisPair, IrisRecord, MatchResult
from .utils.geometry import Box, crop, expand_box

logger = logging.getLogger(__name__)


class IrisRecognitionPipeline:
    """Sequence localization, feature extraction and matching for one frame.

    Irises are ordered by their x position only: the leftmost in the image is
    reported as `left_iris`. This is not an anatomical left/right label.
    """
    def __init__(self, localizer: IrisLocalizer, feature_extractor: FeatureExtractor,
                 database: IrisDatabase, eye_detector: Optional[HaarEyeDetector] = None,
                 config: Optional[PipelineConfig] = None, face_detector: Optional[HaarFaceDetector] = None):
        if feature_extractor.layout != database.layout:
            raise ValueError(
                f"Extractor layout {feature_extractor.layout} does not match database layout {database.layout}"
            )

        self.localizer = localizer
        self.feature_extractor = feature_extractor
        self.database = database
        self.eye_detector = eye_detector
        self.face_detector = face_detector
        self.config = config or PipelineConfig()

    def process(self, frame: np.ndarray, face_region: Optional[Box] = None) -> IrisPair:
        """Locate up to two irises in a frame and extract their features.

        Args:
            frame: BGR or grayscale image.
            face_region: optional (x, y, w, h) face box in frame coordinates,
                expanded by `face_margin` before searching. Without one, the
                largest face found by the face detector (if any) is used.
                With neither, the whole frame is searched.

        Returns:
            IrisPair with locations in frame coordinates. Each side is None
            when fewer irises were found.
        """
        if frame is None or frame.size == 0 or min(frame.shape[:2]) == 0:
            return IrisPair()

        image = EyeImage.from_image(frame)
        if face_region is None and self.face_detector is not None:
            faces = self.face_detector.detect(image.gray)
            face_region = faces[0] if faces else None
        search_box = self._search_region(image, face_region)
        if search_box is None:
            logger.debug("Face region %s lies outside the frame", face_region)
            return IrisPair()

        region = EyeImage(gray=crop(image.gray, search_box), hsv=crop(image.hsv, search_box))
        eye_boxes = self.eye_detector.detect(region.gray) if self.eye_detector is not None else []

        if eye_boxes:
            candidates = self._process_eye_boxes(region, eye_boxes)
        else:
            candidates = self._scan_region(region)

        offset_x, offset_y = search_box[0], search_box[1]
        candidates = [
            DetectedIris(location=iris.location.translated(offset_x, offset_y), features=iris.features)
            for iris in candidates
        ]
        candidates.sort(key=lambda iris: iris.location.center[0])
        candidates = candidates[:self.config.max_irises]

        logger.debug("Found %d iris candidate(s)", len(candidates))
        return IrisPair(
            left_iris=candidates[0] if len(candidates) > 0 else None,
            right_iris=candidates[1] if len(candidates) > 1 else None
        )

    def extract_eye(self, eye_image: EyeImage | np.ndarray) -> Optional[DetectedIris]:
        """Localize and extract a single, already cropped eye region."""
        if not isinstance(eye_image, EyeImage):
            if eye_image is None or eye_image.size == 0:
                return None
            eye_image = EyeImage.from_image(eye_image)

        location = self.localizer.locate(eye_image.gray)
        if location is None:
            return None
        return DetectedIris(location=location, features=self.feature_extractor.extract(eye_image, location))

    def identify(self, frame: np.ndarray, face_region: Optional[Box] = None, eye_crop: bool = False) -> MatchResult:
        """Match the left iris of a frame (the right one if the left is missing).

        With `eye_crop` the frame is taken as a single cropped eye and localized
        with the eye-sized radius band instead of being scanned for two irises.
        """
        iris = self._primary(frame, face_region, eye_crop)
        if iris is None:
            return MatchResult(best_name=None, confidence=0.0)
        return self.database.find_best_match(iris.features, quality=iris.location.quality)

    def enroll(self, name: str, features: FeatureVector) -> IrisRecord:
        """Store extracted features under a user-supplied name."""
        return self.database.add_identity(name, features)

    def enroll_image(self, name: str, image: np.ndarray, face_region: Optional[Box] = None,
                     eye_crop: bool = False) -> Optional[DetectedIris]:
        """Process an image and enroll its primary iris. Returns None if no iris was found."""
        iris = self._primary(image, face_region, eye_crop)
        if iris is None:
            logger.warning("No iris found for %r, nothing enrolled", name)
            return None
        self.enroll(name, iris.features)
        return iris

    def get_threshold(self) -> float:
        """Get the current threshold value."""
        return self.database.matcher.threshold

    def set_threshold(self, threshold: float):
        """Set a new threshold value."""
        self.database.matcher.threshold = threshold

    def _primary(self, image: np.ndarray, face_region: Optional[Box], eye_crop: bool) -> Optional[DetectedIris]:
        if eye_crop:
            return self.extract_eye(image)
        return self.process(image, face_region).primary

    def _search_region(self, image: EyeImage, face_region: Optional[Box]) -> Optional[Box]:
        if face_region is None:
            return 0, 0, image.width, image.height
        return expand_box(face_region, self.config.face_margin, (image.width, image.height))

    def _process_eye_boxes(self, region: EyeImage, eye_boxes: List[Box]) -> List[DetectedIris]:
        candidates = []
        for box in eye_boxes:
            eye = EyeImage(gray=crop(region.gray, box), hsv=crop(region.hsv, box))
            iris = self.extract_eye(eye)
            if iris is None:
                continue
            candidates.append(
                DetectedIris(location=iris.location.translated(box[0], box[1]), features=iris.features)
            )
        return candidates

    def _scan_region(self, region: EyeImage) -> List[DetectedIris]:
        return [
            DetectedIris(location=location, features=self.feature_extractor.extract(region, location))
            for location in self.localizer.scan(region.gray, max_candidates=self.config.max_irises)
        ]

    def save_image(self, image: np.ndarray, filename: str) -> str:
        """Save the image to the specified filename."""
        folder = os.path.dirname(filename)
        if folder and not os.path.exists(folder):
            os.makedirs(folder)
        cv2.imwrite(filename, image)
        return filename

    def get_localization_image(self, frame: np.ndarray, irises: IrisPair, output_path: Optional[str] = None) -> str:
        """Draw located irises on a copy of the frame and return the saved image path."""
        if frame.ndim == 2 or frame.shape[2] == 1:
            canvas = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        elif frame.shape[2] == 4:
            canvas = cv2.cvtColor(frame, cv2.COLOR_BGRA2BGR)
        else:
            canvas = frame.copy()
        colors = [(0, 255, 0), (255, 0, 0)]  # left green, right blue

        for iris, color in zip((irises.left_iris, irises.right_iris), colors):
            if iris is None:
                continue
            center = (int(round(iris.location.center[0])), int(round(iris.location.center[1])))
            cv2.circle(canvas, center, int(round(iris.location.radius)), color, 2)
            cv2.circle(canvas, center, 2, color, -1)

        if output_path is None:
            output_path = os.path.join(self.config.output_dir, f"localization_{uuid.uuid4().hex}.png")
        return self.save_image(canvas, output_path)

    def get_feature_vector_image(self, features: FeatureVector, output_path: Optional[str] = None) -> str:
        """Plot the shape, texture and color segments of a feature vector and return the saved image path."""
        layout = self.database.layout
        features = validate_features(features, layout)
        if output_path is None:
            output_path = os.path.join(self.config.output_dir, f"feature_vector_{uuid.uuid4().hex}.png")
        folder = os.path.dirname(output_path)
        if folder and not os.path.exists(folder):
            os.makedirs(folder)

        segments: List[Tuple[str, slice]] = [
            ("shape (polar samples)", layout.shape_slice),
            ("texture (LBP histograms)", layout.texture_slice),
            ("color (HS histogram + moments)", layout.color_slice),
        ]
        fig, axes = plt.subplots(len(segments), 1, figsize=(8, 2 * len(segments)))

        for ax, (title, segment) in zip(axes, segments):
            values = features[segment]
            ax.bar(np.arange(values.shape[0]), values, width=1.0, color="steelblue")
            ax.set_title(title, fontsize=8, pad=2)
            ax.set_xlim(-0.5, values.shape[0] - 0.5)
            ax.tick_params(labelsize=6)

        plt.subplots_adjust(hspace=0.6, top=0.95, bottom=0.05)
        plt.savefig(output_path, dpi=150, bbox_inches='tight')
        plt.close(fig)

        return output_path
