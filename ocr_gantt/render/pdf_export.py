"""Place a rendered chart bitmap on a single PDF page."""

import io
from pathlib import Path

from PIL import Image
from reportlab.lib.pagesizes import A3, A4, landscape, letter
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from ocr_gantt.utils.config import ExportConfig
from ocr_gantt.utils.logger import get_logger

logger = get_logger(__name__)

PAGE_SIZES: dict[str, tuple[float, float]] = {
    "A4": A4,
    "A4-LANDSCAPE": landscape(A4),
    "A3": A3,
    "A3-LANDSCAPE": landscape(A3),
    "LETTER": letter,
}


def fit_to_page_width(
    image_width: int, image_height: int, page_width: float
) -> tuple[float, float]:
    """Scale an image to the page width, keeping its aspect ratio.

    Returns:
        ``(width, height)`` in PDF points.

    Raises:
        ValueError: If either image dimension is not positive.
    """
    if image_width <= 0 or image_height <= 0:
        raise ValueError(f"Invalid image size {image_width}x{image_height}")
    return page_width, image_height * page_width / image_width


def export_pdf(
    image_bytes: bytes,
    config: ExportConfig | None = None,
    output_path: Path | None = None,
) -> bytes:
    """Build a one-page PDF holding ``image_bytes`` at the top-left corner.

    The image spans the full page width; a very tall chart runs off the
    bottom of the page rather than being shrunk.

    Args:
        image_bytes: PNG (or any Pillow-readable) bitmap.
        config: Page size options. Defaults to A4 portrait.
        output_path: If given, the PDF is also written there.

    Returns:
        The PDF document bytes.

    Raises:
        ValueError: If the page size is unknown.
    """
    config = config or ExportConfig()
    page_size = PAGE_SIZES.get(config.page_size.upper())
    if page_size is None:
        raise ValueError(f"Unsupported page size: {config.page_size}")

    with Image.open(io.BytesIO(image_bytes)) as img:
        img_width, img_height = img.size

    page_width, page_height = page_size
    draw_width, draw_height = fit_to_page_width(img_width, img_height, page_width)

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=page_size)
    pdf.setTitle(Path(config.filename).stem)
    # reportlab's origin is bottom-left; anchor the image to the top edge
    pdf.drawImage(
        ImageReader(io.BytesIO(image_bytes)),
        0,
        page_height - draw_height,
        width=draw_width,
        height=draw_height,
    )
    pdf.showPage()
    pdf.save()
    content = buffer.getvalue()

    if output_path is not None:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(content)
        logger.info("Wrote %s (%d bytes)", output_path, len(content))

    logger.debug(
        "PDF page %.0fx%.0fpt, image drawn at %.0fx%.0fpt",
        page_width,
        page_height,
        draw_width,
        draw_height,
    )
    return content
