import logging
import os
import sys
import cv2
from iris_recognition import IrisDatabase, IrisRecognitionPipeline
from main import build_pipeline

IMAGE_EXTENSIONS = ('.jpg', '.jpeg', '.png', '.bmp')


def parse_filename(filename: str) -> str:
    """Identity name of a reference image, e.g. 'Jack.jpg' -> 'Jack'."""
    name = os.path.splitext(os.path.basename(filename))[0].strip()
    if not name:
        raise ValueError(f"Invalid filename format: {filename}")
    return name


def enroll_images_from_folder(pipeline: IrisRecognitionPipeline, data_folder: str = "Data",
                              eye_crops: bool = False) -> IrisDatabase:
    """Enroll every reference image of a folder under its file name.

    Set `eye_crops` when the folder holds single cropped eyes rather than
    face or frame images.
    """
    if not os.path.exists(data_folder):
        raise FileNotFoundError(f"Data folder {data_folder} does not exist.")

    for filename in sorted(os.listdir(data_folder)):
        if not filename.lower().endswith(IMAGE_EXTENSIONS):
            continue
        name = parse_filename(filename)
        image = cv2.imread(os.path.join(data_folder, filename), cv2.IMREAD_COLOR)
        if image is None:
            print(f"Skipping {filename}: could not read image")
            continue

        print(f"Enrolling {name} from {filename}...")
        iris = pipeline.enroll_image(name, image, eye_crop=eye_crops)
        if iris is None:
            print(f"Skipping {filename}: no iris detected")
        elif iris.location.is_fallback:
            print(f"Enrolled {name} from a fallback localization (quality {iris.location.quality:.2f})")

    print(f"Enrollment complete. Database contains {pipeline.database.get_database_size()} identities.")
    return pipeline.database


def verify_iris(pipeline: IrisRecognitionPipeline, test_image_path: str, eye_crop: bool = False):
    """Identify a test image against the enrolled identities."""
    if pipeline.database.is_database_empty():
        print("Database is empty. Please enroll subjects first.")
        return

    image = cv2.imread(test_image_path, cv2.IMREAD_COLOR)
    if image is None:
        print(f"Could not read {test_image_path}")
        return

    result = pipeline.identify(image, eye_crop=eye_crop)
    if result.is_match:
        print(f"User recognized: {result.best_name} ({result.confidence * 100:.0f}%)")
    else:
        print("New user detected")


def main(data_folder: str = "Data", test_image: str = "Data/probe.jpg", eye_crops: bool = False):
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    pipeline = build_pipeline()

    enroll_images_from_folder(pipeline, data_folder, eye_crops)

    if os.path.exists(test_image):
        print(f"\nVerifying test image: {test_image}")
        verify_iris(pipeline, test_image, eye_crops)
    else:
        print(f"Test image {test_image} not found.")


if __name__ == "__main__":
    args = [arg for arg in sys.argv[1:] if arg != "--eye-crops"]
    main(*args[:2], eye_crops="--eye-crops" in sys.argv)
