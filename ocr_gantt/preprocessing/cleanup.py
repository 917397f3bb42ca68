"""OpenCV clean-up filters for photographed schedule sheets."""

import cv2
import numpy as np

from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)


def to_grayscale(image: np.ndarray) -> np.ndarray:
    """Return a single-channel copy of an RGB image; grayscale passes through."""
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_RGB2GRAY)
    return image


def remove_speckles(image: np.ndarray, kernel_size: int = 3) -> np.ndarray:
    """Median blur, which removes salt-and-pepper noise without smearing strokes.

    Raises:
        ValueError: If ``kernel_size`` is not an odd number above 1.
    """
    if kernel_size < 3 or kernel_size % 2 == 0:
        raise ValueError(f"kernel_size must be odd and >= 3, got {kernel_size}")
    return cv2.medianBlur(image, kernel_size)


def binarize(image: np.ndarray) -> np.ndarray:
    """Otsu threshold to pure black text on white."""
    gray = to_grayscale(image)
    _, binary = cv2.threshold(gray, 0, 255, cv2.THRESH_BINARY + cv2.THRESH_OTSU)
    return binary


def estimate_skew(image: np.ndarray) -> float:
    """Estimate the page rotation in degrees from the ink's bounding rectangle.

    Returns 0.0 for a blank page.
    """
    gray = to_grayscale(image)
    ink = np.column_stack(np.where(gray < 128))
    if len(ink) < 10:
        return 0.0

    angle = cv2.minAreaRect(ink.astype(np.float32))[-1]
    # minAreaRect reports in (0, 90]; fold to the nearest horizontal
    if angle > 45:
        angle -= 90
    return float(-angle)


def deskew(image: np.ndarray, min_angle: float = 0.3, max_angle: float = 15.0) -> np.ndarray:
    """Rotate the page level. Angles outside [min_angle, max_angle] are left alone."""
    angle = estimate_skew(image)
    if abs(angle) < min_angle or abs(angle) > max_angle:
        return image

    h, w = image.shape[:2]
    matrix = cv2.getRotationMatrix2D((w / 2, h / 2), angle, 1.0)
    logger.info("Deskewing page by %.2f degrees", angle)
    return cv2.warpAffine(
        image,
        matrix,
        (w, h),
        flags=cv2.INTER_CUBIC,
        borderMode=cv2.BORDER_REPLICATE,
    )
