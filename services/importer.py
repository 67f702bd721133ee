from parsing.cv_parser import parse_resume_report
from parsing.models import ParseReport, empty_resume_record

from .text_source import acquire_text, looks_scanned

STATUS_MESSAGES = {
    "ok": "Resume imported. Review the fields before saving.",
    "low_confidence": "We couldn't recognise this layout reliably. Please fill in the form manually.",
    "anomaly": "Something went wrong while reading this resume. Please fill in the form manually.",
    "skipped": "Starting from a blank form.",
}
SCANNED_HINT = "This PDF looks scanned. Upload a .txt or a PDF with selectable text for better results."


async def import_resume(name: str, data: bytes) -> ParseReport:
    """Acquire the document's text, then parse it.

    ``AcquisitionError`` propagates; everything after the text is in hand
    degrades to an empty record instead of raising.
    """
    text = await acquire_text(name, data)
    report = parse_resume_report(text)
    if looks_scanned(name, data, text):
        report = report.model_copy(update={"hints": [*report.hints, SCANNED_HINT]})
    return report


def blank_report() -> ParseReport:
    return ParseReport(record=empty_resume_record(), status="skipped")


def status_message(report: ParseReport) -> str:
    return STATUS_MESSAGES[report.status]
