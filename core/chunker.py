# core/chunker.py
from typing import List
from core.entities import PassageStub
import logging

logger = logging.getLogger(__name__)


def passage_id(page_number: int, start: int) -> str:
    return f"{page_number}-{start}"


def chunk_page(
    page_text: str, page_number: int, chunk_size: int = 700, overlap: int = 150
) -> List[PassageStub]:
    """
    Fixed-size, overlapping character windows over one page.

    Each window is [start, min(start + chunk_size, len)); its trimmed text is
    emitted when non-empty. The cursor then moves to end - overlap (never
    below 0) until a window reaches the end of the text.

    Known quirk: a whitespace-only window is dropped, yet the cursor still
    advances from its untrimmed end, so such windows are skipped silently.
    """
    if chunk_size <= 0:
        raise ValueError("chunk_size must be positive")
    if overlap < 0 or overlap >= chunk_size:
        raise ValueError("overlap must satisfy 0 <= overlap < chunk_size")
    if page_number < 1:
        raise ValueError("page_number is 1-based")

    text = (page_text or "").replace("\x00", "")
    length = len(text)
    out: List[PassageStub] = []
    start = 0
    while start < length:
        end = min(start + chunk_size, length)
        segment = text[start:end].strip()
        if segment:
            out.append(
                PassageStub(
                    id=passage_id(page_number, start),
                    page=page_number,
                    text=segment,
                    start=start,
                    end=end,
                )
            )
        if end == length:
            break
        start = max(end - overlap, 0)

    logger.debug("chunk.page page=%d chars=%d chunks=%d", page_number, length, len(out))
    return out
