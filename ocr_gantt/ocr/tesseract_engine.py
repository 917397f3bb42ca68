"""Tesseract wrapper acting as the recognition service.

Takes an image and a language hint and returns the recognized text together
with a mean word confidence.
"""

from dataclasses import dataclass

import numpy as np
import pytesseract
from PIL import Image

from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)


class RecognitionError(RuntimeError):
    """Raised when Tesseract fails to recognize an image."""


@dataclass
class OCRResult:
    """Recognized text for a single image."""

    text: str
    language: str
    confidence: float
    word_count: int = 0


class TesseractEngine:
    """Runs Tesseract on document images.

    Args:
        tesseract_cmd: Path to the Tesseract executable.
            If ``None``, uses the system default.
        default_lang: Language hint used when none is passed per call.
        psm: Tesseract page segmentation mode. 6 treats the page as a
            single uniform block, which keeps table rows on one line.
    """

    def __init__(
        self,
        tesseract_cmd: str | None = None,
        default_lang: str = "jpn",
        psm: int = 6,
    ) -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd
        self.default_lang = default_lang
        self.psm = psm

    def recognize(self, image: np.ndarray, lang: str | None = None) -> OCRResult:
        """Recognize the text in an image.

        Args:
            image: Input image as a numpy array.
            lang: Tesseract language code. Defaults to the engine default.

        Returns:
            OCRResult with the full text and mean confidence in [0, 1].

        Raises:
            RecognitionError: If Tesseract is missing or fails.
        """
        lang = lang or self.default_lang
        config = f"--psm {self.psm}"
        pil_image = Image.fromarray(image)

        try:
            text = pytesseract.image_to_string(pil_image, lang=lang, config=config)
            data = pytesseract.image_to_data(
                pil_image,
                lang=lang,
                config=config,
                output_type=pytesseract.Output.DICT,
            )
        except (pytesseract.TesseractError, pytesseract.TesseractNotFoundError) as exc:
            raise RecognitionError(f"Tesseract failed: {exc}") from exc

        confidences = [
            float(conf)
            for conf, word in zip(data["conf"], data["text"])
            if float(conf) > 0 and word.strip()
        ]
        confidence = sum(confidences) / len(confidences) / 100.0 if confidences else 0.0

        logger.info(
            "Recognized %d words (lang=%s, confidence %.2f)",
            len(confidences),
            lang,
            confidence,
        )
        return OCRResult(
            text=text,
            language=lang,
            confidence=confidence,
            word_count=len(confidences),
        )
