from .interface import IrisLocalizer
from .hough_localizer import HoughIrisLocalizer
from .eye_detector import HaarEyeDetector
from .face_detector import HaarFaceDetector

__all__ = ['IrisLocalizer', 'HoughIrisLocalizer', 'HaarEyeDetector', 'HaarFaceDetector']
