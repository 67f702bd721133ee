import asyncio
import io

import pytest
from pypdf import PdfWriter

import config
from parsing.models import empty_resume_record
from services import text_source
from services.importer import SCANNED_HINT, blank_report, import_resume, status_message
from services.text_source import AcquisitionError, acquire_text, extract_raw_text

SAMPLE = (
    "Jane Doe jane@x.com (415) 555-0100 San Francisco, CA PROFESSIONAL EXPERIENCE "
    "Senior Engineer • Acme Inc • Austin, TX January 2020 - Present Led the platform team."
)


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def test_txt_is_decoded():
    assert asyncio.run(acquire_text("cv.txt", b"Jane Doe")) == "Jane Doe"


def test_txt_falls_back_to_latin1():
    assert asyncio.run(acquire_text("cv.TXT", b"Caf\xe9")) == "Café"


def test_csv_uses_text_column():
    data = b"name,text\nJane,Hello world\n"
    assert asyncio.run(acquire_text("cv.csv", data)) == "Hello world"


def test_unsupported_type_raises():
    with pytest.raises(AcquisitionError):
        asyncio.run(acquire_text("cv.docx", b"PK..."))


def test_empty_file_raises():
    with pytest.raises(AcquisitionError):
        asyncio.run(acquire_text("cv.txt", b""))


def test_blank_pdf_reads_as_empty_text():
    assert asyncio.run(acquire_text("cv.pdf", _blank_pdf())).strip() == ""


def test_unreadable_pdf_raises():
    with pytest.raises(AcquisitionError):
        asyncio.run(acquire_text("cv.pdf", b"not a pdf at all"))


def test_pdfminer_used_when_pypdf_fails(monkeypatch):
    def boom(data):
        raise ValueError("broken xref")

    monkeypatch.setattr(text_source, "_pypdf_extract", boom)
    monkeypatch.setattr(text_source, "_pdfminer_extract", lambda data: "text from pdfminer")
    assert extract_raw_text("cv.pdf", b"%PDF-1.4") == "text from pdfminer"


def test_pdfminer_used_when_pypdf_text_is_thin(monkeypatch):
    monkeypatch.setattr(text_source, "_pypdf_extract", lambda data: "thin")
    monkeypatch.setattr(text_source, "_pdfminer_extract", lambda data: "a much richer text layer")
    assert extract_raw_text("cv.pdf", b"%PDF-1.4") == "a much richer text layer"


def test_pypdf_text_kept_when_long_enough(monkeypatch):
    def boom(data):
        raise AssertionError("pdfminer should not run")

    monkeypatch.setattr(config, "PDF_MIN_TEXT_CHARS", 5)
    monkeypatch.setattr(text_source, "_pypdf_extract", lambda data: "plenty of text")
    monkeypatch.setattr(text_source, "_pdfminer_extract", boom)
    assert extract_raw_text("cv.pdf", b"%PDF-1.4") == "plenty of text"


def test_import_resume_end_to_end():
    report = asyncio.run(import_resume("cv.txt", SAMPLE.encode("utf-8")))
    assert report.status == "ok"
    assert report.record.personal_info.full_name == "Jane Doe"
    assert report.record.experience[0].current is True
    assert report.hints == []
    assert "Review" in status_message(report)


def test_import_resume_flags_scanned_pdf(monkeypatch):
    monkeypatch.setitem(text_source.READERS, ".pdf", lambda data: "")
    report = asyncio.run(import_resume("scan.pdf", b"0" * 300_000))
    assert report.status == "low_confidence"
    assert report.hints == [SCANNED_HINT]


def test_small_pdf_without_text_is_not_flagged(monkeypatch):
    monkeypatch.setitem(text_source.READERS, ".pdf", lambda data: "")
    assert asyncio.run(import_resume("cv.pdf", b"0" * 1000)).hints == []


def test_import_resume_propagates_acquisition_errors():
    with pytest.raises(AcquisitionError):
        asyncio.run(import_resume("cv.rtf", b"{\\rtf1}"))


def test_blank_form_has_neutral_message():
    report = blank_report()
    assert report.status == "skipped"
    assert report.record == empty_resume_record()
    assert status_message(report) == "Starting from a blank form."
