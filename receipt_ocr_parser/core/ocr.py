"""
OCR boundary: turn receipt images and PDFs into plain-text transcripts.
"""

import io
from pathlib import Path

from .errors import NoTextFoundError, UnsupportedFileError
from .utils import IMAGE_EXTS, PDF_EXTS, TEXT_EXTS

# Shorter OCR output is treated as "no text found"
MIN_TRANSCRIPT_CHARS = 10


def _lazy_import_ocr_deps():
    """Lazy import heavy OCR dependencies."""
    global pytesseract, PIL_Image, fitz
    import importlib
    pytesseract = importlib.import_module("pytesseract")
    PIL_Image = importlib.import_module("PIL.Image")
    fitz = importlib.import_module("fitz")  # pymupdf


# Initialize on first use
pytesseract = None
PIL_Image = None
fitz = None


def _ocr_pil_image(img) -> str:
    # Improve OCR: convert to grayscale
    if img.mode != "L":
        img = img.convert("L")
    return pytesseract.image_to_string(img)


def ocr_image_to_text(img_path: Path) -> str:
    """OCR an image file to text."""
    if pytesseract is None:
        _lazy_import_ocr_deps()

    with PIL_Image.open(img_path) as img:
        return _ocr_pil_image(img)


def pdf_to_text(pdf_path: Path) -> str:
    """
    Extract text from a PDF using PyMuPDF.

    Pages without a text layer are rasterized and run through Tesseract.
    """
    if fitz is None:
        _lazy_import_ocr_deps()

    chunks = []
    doc = fitz.open(pdf_path.as_posix())
    try:
        for page in doc:
            text = page.get_text()
            if not text.strip():
                pix = page.get_pixmap(matrix=fitz.Matrix(2, 2), alpha=False)
                with PIL_Image.open(io.BytesIO(pix.tobytes("png"))) as img:
                    text = _ocr_pil_image(img)
            chunks.append(text)
    finally:
        doc.close()
    return "\n".join(chunks)


def has_enough_text(text: str) -> bool:
    """True when the trimmed text is at least MIN_TRANSCRIPT_CHARS long (inner spaces count)."""
    return len(text.strip()) >= MIN_TRANSCRIPT_CHARS


def transcript_from_file(path: Path) -> str:
    """
    Produce the OCR transcript for a receipt file.

    Images are OCR'd directly, PDFs use their text layer (or OCR), and .txt
    files are taken as an existing transcript.

    Raises:
        UnsupportedFileError: unknown extension
        NoTextFoundError: too little text to parse
    """
    ext = path.suffix.lower()
    if ext in IMAGE_EXTS:
        text = ocr_image_to_text(path)
    elif ext in PDF_EXTS:
        text = pdf_to_text(path)
    elif ext in TEXT_EXTS:
        text = path.read_text(encoding="utf-8")
    else:
        raise UnsupportedFileError(f"Unsupported file type: {path}")

    if not has_enough_text(text):
        raise NoTextFoundError(f"No text found in {path.name}")
    return text
