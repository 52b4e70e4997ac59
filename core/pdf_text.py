# core/pdf_text.py
import re
from typing import List, Tuple
import fitz
from util.timing import timed
import logging

logger = logging.getLogger(__name__)

_SPACE_BEFORE_NL = re.compile(r"\s+\n")
_SPACE_AFTER_NL = re.compile(r"\n\s+")
_INLINE_SPACE = re.compile(r"[ \t]+")

_TEXT_FLAGS = fitz.TEXTFLAGS_TEXT | fitz.TEXT_DEHYPHENATE


def clean_page_text(raw: str) -> str:
    """
    Normalize extracted page text:
    whitespace around newlines dropped, space/tab runs collapsed, trimmed.
    """
    txt = _SPACE_BEFORE_NL.sub("\n", raw or "")
    txt = _SPACE_AFTER_NL.sub("\n", txt)
    txt = _INLINE_SPACE.sub(" ", txt)
    return txt.strip()


def extract_pages_texts(file_bytes: bytes) -> List[Tuple[int, str]]:
    """
    Return [(page_number, page_text)] for the whole PDF, de-hyphenated and cleaned.
    If PyMuPDF cannot parse the bytes, returns [].
    """
    try:
        out: List[Tuple[int, str]] = []
        with timed(logger, "pdf.open"):
            with fitz.open(stream=file_bytes, filetype="pdf") as doc:
                pages = doc.page_count
                with timed(logger, "pdf.parse", pages=pages):
                    for i in range(pages):
                        page = doc.load_page(i)
                        txt = clean_page_text(page.get_text("text", flags=_TEXT_FLAGS))
                        out.append((i + 1, txt))
        logger.info("pdf.pages count=%d", len(out))
        return out
    except Exception:
        # do not log payloads
        logger.error("pdf.parse.error", exc_info=True)
        return []


def render_page_png(file_bytes: bytes, page_number: int, zoom: float = 0.9) -> bytes:
    """
    Rasterize one 1-based page to PNG bytes for previews.
    Raises ValueError for a page outside the document.
    """
    with fitz.open(stream=file_bytes, filetype="pdf") as doc:
        if page_number < 1 or page_number > doc.page_count:
            raise ValueError(f"page {page_number} out of range 1..{doc.page_count}")
        with timed(logger, "pdf.render", page=page_number, zoom=zoom):
            page = doc.load_page(page_number - 1)
            pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
            return pix.tobytes("png")
