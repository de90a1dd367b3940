import matplotlib

matplotlib.use("Agg")

import numpy as np
import cv2
import pytest

from iris_recognition import (
    HoughIrisLocalizer,
    IrisDatabase,
    IrisRecognitionPipeline,
    MultiModalFeatureExtractor,
    WeightedSimilarityMatcher,
)
from iris_recognition.config import DEFAULT_LAYOUT

BROWN = (30, 60, 120)
BLUE = (160, 90, 40)
SCLERA = (225, 225, 225)


def draw_irises(shape, centers, radius, iris_color=BROWN, background=SCLERA, pupil=True):
    """BGR image with flat iris discs (and darker pupils) on a flat background."""
    image = np.zeros(shape + (3,), dtype=np.uint8)
    image[:] = background
    for center in centers:
        cv2.circle(image, center, radius, iris_color, thickness=-1)
        if pupil:
            cv2.circle(image, center, max(2, radius // 3), (15, 15, 15), thickness=-1)
    return image


@pytest.fixture
def eye_image():
    """160x160 eye crop with an iris of radius 30 at the center."""
    return draw_irises((160, 160), [(80, 80)], 30)


@pytest.fixture
def two_eye_frame():
    """200x300 frame with two irises of radius 12 at x=90 and x=210."""
    return draw_irises((200, 300), [(90, 100), (210, 100)], 12)


@pytest.fixture
def localizer():
    return HoughIrisLocalizer()


@pytest.fixture
def extractor():
    return MultiModalFeatureExtractor()


@pytest.fixture
def matcher():
    return WeightedSimilarityMatcher()


@pytest.fixture
def database(matcher):
    return IrisDatabase(matcher)


@pytest.fixture
def pipeline(localizer, extractor, database):
    return IrisRecognitionPipeline(localizer=localizer, feature_extractor=extractor, database=database)


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def random_features(rng):
    def make():
        return rng.random(DEFAULT_LAYOUT.length)
    return make
