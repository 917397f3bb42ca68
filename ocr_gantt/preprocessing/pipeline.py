"""Configurable clean-up applied to a scan before recognition."""

import numpy as np

from ocr_gantt.preprocessing.cleanup import binarize, deskew, remove_speckles, to_grayscale
from ocr_gantt.utils.config import PreprocessingConfig
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)


class ScanPreprocessor:
    """Grayscale, despeckle, binarize and deskew a document image.

    Args:
        config: Preprocessing configuration controlling which steps run.
    """

    def __init__(self, config: PreprocessingConfig) -> None:
        self.config = config

    def process(self, image: np.ndarray) -> np.ndarray:
        """Run the enabled steps in order and return the cleaned image."""
        if not self.config.enabled:
            return image

        steps = []
        result = to_grayscale(image)

        if self.config.denoise_enabled:
            result = remove_speckles(result, self.config.denoise_kernel)
            steps.append("denoise")

        if self.config.binarize_enabled:
            result = binarize(result)
            steps.append("binarize")

        if self.config.deskew_enabled:
            result = deskew(result)
            steps.append("deskew")

        logger.debug("Preprocessing steps: %s", ", ".join(steps) or "grayscale only")
        return result
