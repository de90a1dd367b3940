import numpy as np
from typing import Optional, Tuple

# (x, y, width, height)
Box = Tuple[int, int, int, int]


def l2_normalize(vector: np.ndarray) -> np.ndarray:
    """Scale a vector to unit L2 norm. A zero vector stays zero."""
    vector = np.asarray(vector, dtype=np.float64)
    norm = np.linalg.norm(vector)
    if norm == 0.0 or not np.isfinite(norm):
        return np.zeros_like(vector)
    return vector / norm


def l1_normalize(vector: np.ndarray) -> np.ndarray:
    """Scale a non-negative histogram to sum 1. An empty histogram stays zero."""
    vector = np.asarray(vector, dtype=np.float64)
    total = vector.sum()
    if total <= 0.0:
        return np.zeros_like(vector)
    return vector / total


def cosine_similarity(a: np.ndarray, b: np.ndarray) -> float:
    """Cosine similarity in [-1, 1]; 0.0 when either side is a zero vector."""
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.shape != b.shape:
        raise ValueError(f"Vectors must have the same shape, got {a.shape} and {b.shape}")

    a_unit = np.clip(l2_normalize(a), -1.0, 1.0)
    b_unit = np.clip(l2_normalize(b), -1.0, 1.0)
    return float(np.clip(np.dot(a_unit, b_unit), -1.0, 1.0))


def euclidean_distance(p: Tuple[float, float], q: Tuple[float, float]) -> float:
    return float(np.hypot(p[0] - q[0], p[1] - q[1]))


def expand_box(box: Box, margin: float, bounds: Tuple[int, int]) -> Optional[Box]:
    """Grow a box by `margin` of its size on every side and clip it to (width, height).

    Returns None when nothing of the box is left inside the bounds.
    """
    x, y, w, h = box
    width, height = bounds
    dx = int(round(w * margin))
    dy = int(round(h * margin))

    x1 = max(0, x - dx)
    y1 = max(0, y - dy)
    x2 = min(width, x + w + dx)
    y2 = min(height, y + h + dy)

    if x2 <= x1 or y2 <= y1:
        return None
    return x1, y1, x2 - x1, y2 - y1


def crop(image: np.ndarray, box: Box) -> np.ndarray:
    x, y, w, h = box
    return np.ascontiguousarray(image[y:y + h, x:x + w])


def crop_with_zero_fill(image: np.ndarray, x1: int, y1: int, x2: int, y2: int) -> np.ndarray:
    """Copy image[y1:y2, x1:x2], filling the part outside the image with zeros."""
    h, w = image.shape[:2]
    patch = np.zeros((max(0, y2 - y1), max(0, x2 - x1)) + image.shape[2:], dtype=image.dtype)

    src_x1, src_y1 = max(0, x1), max(0, y1)
    src_x2, src_y2 = min(w, x2), min(h, y2)
    if src_x2 > src_x1 and src_y2 > src_y1:
        patch[src_y1 - y1:src_y2 - y1, src_x1 - x1:src_x2 - x1] = image[src_y1:src_y2, src_x1:src_x2]

    return patch
