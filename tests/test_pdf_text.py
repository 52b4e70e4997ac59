import fitz
import pytest

from core.pdf_text import clean_page_text, extract_pages_texts, render_page_png


def make_pdf(*pages: str) -> bytes:
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


def test_clean_page_text_normalizes_whitespace():
    assert clean_page_text("a  \n  b\t\tc ") == "a\nb c"
    assert clean_page_text("  lots   of    space  ") == "lots of space"
    assert clean_page_text("") == ""


def test_extract_pages_texts_is_one_based_and_cleaned():
    pdf = make_pdf("The capital of France is Paris.", "", "Rome is the capital of Italy.")

    pages = extract_pages_texts(pdf)

    assert [n for n, _ in pages] == [1, 2, 3]
    assert pages[0][1] == "The capital of France is Paris."
    assert pages[1][1] == ""
    assert pages[2][1] == "Rome is the capital of Italy."


def test_extract_pages_texts_on_garbage_returns_empty():
    assert extract_pages_texts(b"definitely not a pdf") == []


def test_render_page_png():
    pdf = make_pdf("page one", "page two")

    png = render_page_png(pdf, 2)

    assert png.startswith(b"\x89PNG\r\n\x1a\n")


@pytest.mark.parametrize("page", [0, 3])
def test_render_page_out_of_range(page):
    with pytest.raises(ValueError):
        render_page_png(make_pdf("page one", "page two"), page)
