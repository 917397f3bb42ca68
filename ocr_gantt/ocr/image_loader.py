"""Image intake for the recognition step.

Accepts a file path, raw bytes or a ``data:`` URL and returns the image as
a numpy array. Scanned PDFs are rasterized and their first page is used.
"""

import base64
import binascii
import io
import re
from pathlib import Path

import numpy as np
from pdf2image import convert_from_bytes
from PIL import Image, UnidentifiedImageError

from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)

_DATA_URL = re.compile(
    r"^data:(?P<mime>[\w.+-]+/[\w.+-]+)?(?P<b64>;base64)?,(?P<data>.*)$", re.S
)


class ImageLoadError(ValueError):
    """Raised when the supplied document cannot be decoded as an image."""


def decode_data_url(data_url: str) -> tuple[str | None, bytes]:
    """Split a ``data:`` URL into its MIME type and decoded payload.

    Raises:
        ImageLoadError: If the string is not a base64 data URL.
    """
    match = _DATA_URL.match(data_url.strip())
    if not match or not match.group("b64"):
        raise ImageLoadError("Expected a base64 data URL")
    try:
        payload = base64.b64decode(match.group("data"), validate=True)
    except binascii.Error as exc:
        raise ImageLoadError(f"Invalid base64 payload: {exc}") from exc
    return match.group("mime"), payload


def encode_data_url(content: bytes, mime: str = "image/png") -> str:
    """Encode raw image bytes as a base64 ``data:`` URL."""
    return f"data:{mime};base64,{base64.b64encode(content).decode('ascii')}"


class ImageLoader:
    """Turns user-supplied documents into RGB or grayscale arrays.

    Args:
        pdf_dpi: Resolution used when rasterizing a PDF page.
    """

    def __init__(self, pdf_dpi: int = 300) -> None:
        self.pdf_dpi = pdf_dpi

    def load(self, source: Path | bytes | str) -> np.ndarray:
        """Load a document image.

        Args:
            source: A path, raw file bytes, or a base64 ``data:`` URL.

        Returns:
            The image as a numpy array.

        Raises:
            FileNotFoundError: If a path is given and does not exist.
            ImageLoadError: If the content is not a readable image or PDF.
        """
        if isinstance(source, str) and source.startswith("data:"):
            mime, content = decode_data_url(source)
            if mime and not (mime.startswith("image/") or mime == "application/pdf"):
                raise ImageLoadError(f"Unsupported data URL type: {mime}")
            return self._from_bytes(content)

        if isinstance(source, bytes):
            return self._from_bytes(source)

        path = Path(source)
        if not path.exists():
            raise FileNotFoundError(f"Image file not found: {path}")
        return self._from_bytes(path.read_bytes())

    def _from_bytes(self, content: bytes) -> np.ndarray:
        if content[:4] == b"%PDF":
            return self._first_pdf_page(content)
        try:
            img = Image.open(io.BytesIO(content))
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ImageLoadError(f"Cannot read image: {exc}") from exc

        if img.mode not in ("L", "RGB"):
            img = img.convert("RGB")
        logger.debug("Loaded %s image %dx%d", img.mode, img.width, img.height)
        return np.array(img)

    def _first_pdf_page(self, content: bytes) -> np.ndarray:
        try:
            pages = convert_from_bytes(
                content, dpi=self.pdf_dpi, first_page=1, last_page=1
            )
        except Exception as exc:
            raise ImageLoadError(f"PDF conversion failed: {exc}") from exc
        if not pages:
            raise ImageLoadError("PDF has no pages")
        logger.info("Rasterized first PDF page at %d DPI", self.pdf_dpi)
        return np.array(pages[0].convert("RGB"))
