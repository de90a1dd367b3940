import logging
import os
import sys
import cv2
from iris_recognition import (
    HaarEyeDetector,
    HaarFaceDetector,
    HoughIrisLocalizer,
    IrisDatabase,
    IrisRecognitionPipeline,
    MultiModalFeatureExtractor,
    PipelineConfig,
    WeightedSimilarityMatcher,
)


def build_pipeline(config: PipelineConfig = None) -> IrisRecognitionPipeline:
    config = config or PipelineConfig()
    feature_extractor = MultiModalFeatureExtractor()
    face_detector = HaarFaceDetector(
        scale_factor=config.face_scale_factor,
        min_neighbors=config.face_min_neighbors,
        min_size=config.face_min_size,
        max_size=config.face_max_size
    )
    eye_detector = HaarEyeDetector(
        scale_factor=config.eye_scale_factor,
        min_neighbors=config.eye_min_neighbors,
        min_size=config.eye_min_size,
        max_eyes=config.max_irises
    )
    return IrisRecognitionPipeline(
        localizer=HoughIrisLocalizer(),
        feature_extractor=feature_extractor,
        database=IrisDatabase(WeightedSimilarityMatcher(layout=feature_extractor.layout)),
        eye_detector=eye_detector,
        config=config,
        face_detector=face_detector
    )


def main(image1: str = "Data/reference.jpg", image2: str = "Data/probe.jpg"):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    for path in (image1, image2):
        if not os.path.exists(path):
            print(f"Image {path} not found.")
            return

    pipeline = build_pipeline()

    reference = pipeline.process(cv2.imread(image1, cv2.IMREAD_COLOR)).primary
    probe = pipeline.process(cv2.imread(image2, cv2.IMREAD_COLOR)).primary
    if reference is None or probe is None:
        print("Iris not detected in one of the images.")
        return

    print(f"Reference iris at {reference.location}")
    print(f"Probe iris at {probe.location}")

    breakdown = pipeline.database.matcher.compare(reference.features, probe.features)
    print(f"Shape: {breakdown.shape:.4f}  Texture: {breakdown.texture:.4f}  Color: {breakdown.color:.4f}")
    print(f"Similarity score: {breakdown.combined:.4f} (threshold {pipeline.get_threshold():.2f})")


if __name__ == "__main__":
    main(*sys.argv[1:3])
