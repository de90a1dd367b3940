import cv2
import numpy as np
import pytest

from enroll_verify import enroll_images_from_folder, parse_filename, verify_iris
from iris_recognition import PipelineConfig
from main import build_pipeline


def test_parse_filename():
    assert parse_filename("Data/Jack.jpg") == "Jack"
    assert parse_filename("Mary Ann.png") == "Mary Ann"
    with pytest.raises(ValueError):
        parse_filename(" .png")


def test_enroll_folder_and_verify(pipeline, two_eye_frame, tmp_path, capsys):
    cv2.imwrite(str(tmp_path / "Alice.png"), two_eye_frame)
    cv2.imwrite(str(tmp_path / "Blank.png"), np.full((120, 160, 3), 200, dtype=np.uint8))
    (tmp_path / "notes.txt").write_text("not an image")

    database = enroll_images_from_folder(pipeline, str(tmp_path))

    assert database.names() == ["Alice"]
    assert "Skipping Blank.png: no iris detected" in capsys.readouterr().out

    verify_iris(pipeline, str(tmp_path / "Alice.png"))
    assert "User recognized: Alice" in capsys.readouterr().out


def test_enroll_missing_folder(pipeline, tmp_path):
    with pytest.raises(FileNotFoundError):
        enroll_images_from_folder(pipeline, str(tmp_path / "missing"))


def test_verify_on_empty_database(pipeline, tmp_path, capsys):
    verify_iris(pipeline, str(tmp_path / "probe.png"))
    assert "Database is empty" in capsys.readouterr().out


def test_build_pipeline_uses_config():
    pipeline = build_pipeline(PipelineConfig(eye_min_neighbors=4, max_irises=1))

    assert pipeline.eye_detector.min_neighbors == 4
    assert pipeline.eye_detector.max_eyes == 1
    assert pipeline.config.max_irises == 1
    assert pipeline.face_detector.min_size == (150, 150)
    assert pipeline.face_detector.scale_factor == 1.05


def test_enroll_folder_of_eye_crops(pipeline, eye_image, tmp_path, capsys):
    cv2.imwrite(str(tmp_path / "Bob.png"), eye_image)

    enroll_images_from_folder(pipeline, str(tmp_path), eye_crops=True)

    stored = pipeline.database.get_record("Bob").features
    expected = pipeline.extract_eye(eye_image).features
    assert np.array_equal(stored, expected)

    verify_iris(pipeline, str(tmp_path / "Bob.png"), eye_crop=True)
    assert "User recognized: Bob" in capsys.readouterr().out
