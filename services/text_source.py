import asyncio
import io

import pandas as pd

import config
from utils.logger import get_logger

logger = get_logger(__name__)

TEXT_COLUMNS = {"text", "cv_text", "resume", "profile"}

# a big PDF with almost no text layer is most likely a scan
SCANNED_MAX_TEXT_CHARS = 200
SCANNED_MIN_BYTES = 200_000


class AcquisitionError(Exception):
    """The source document could not be read or decoded into text."""


def _pypdf_extract(data: bytes) -> str:
    from pypdf import PdfReader
    reader = PdfReader(io.BytesIO(data))
    return "\n".join(p.extract_text() or "" for p in reader.pages)


def _pdfminer_extract(data: bytes) -> str:
    from pdfminer.high_level import extract_text
    return extract_text(io.BytesIO(data)) or ""


def _pdf_text(data: bytes) -> str:
    try:
        text = _pypdf_extract(data)
    except Exception as e:
        logger.info("pypdf failed (%s), switching to pdfminer", e)
        try:
            return _pdfminer_extract(data)
        except Exception as inner:
            raise AcquisitionError(f"PDF could not be read: {inner}") from inner

    if len(text.strip()) < config.PDF_MIN_TEXT_CHARS:
        try:
            alt = _pdfminer_extract(data)
        except Exception as e:
            logger.debug("pdfminer second pass failed: %s", e)
        else:
            if len(alt.strip()) > len(text.strip()):
                logger.info("Used pdfminer for richer text")
                text = alt
    return text


def _csv_text(data: bytes) -> str:
    try:
        try:
            df = pd.read_csv(io.BytesIO(data))
        except Exception:
            df = pd.read_csv(io.BytesIO(data), sep=";")
    except Exception as e:
        raise AcquisitionError(f"CSV could not be read: {e}") from e
    text_col = next((c for c in df.columns if str(c).lower() in TEXT_COLUMNS), None)
    if text_col is not None:
        return "\n\n".join(str(x) for x in df[text_col].fillna("").tolist())
    return "\n\n".join(" ".join(str(v) for v in row if pd.notna(v)) for row in df.values)


def _txt_text(data: bytes) -> str:
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data.decode("latin-1", errors="ignore")


READERS = {
    ".pdf": _pdf_text,
    ".csv": _csv_text,
    ".txt": _txt_text,
}


def looks_scanned(name: str, data: bytes, text: str) -> bool:
    return (
        name.lower().endswith(".pdf")
        and len(data) > SCANNED_MIN_BYTES
        and len(text.strip()) < SCANNED_MAX_TEXT_CHARS
    )


def extract_raw_text(name: str, data: bytes) -> str:
    """Blocking text extraction keyed on the file extension."""
    suffix = name.lower()[name.rfind("."):] if "." in name else ""
    reader = READERS.get(suffix)
    if reader is None:
        raise AcquisitionError(f"Unsupported file type: {name}")
    if not data:
        raise AcquisitionError(f"{name} is empty")
    text = reader(data)
    logger.info("Extracted %d chars from %s", len(text), name)
    if looks_scanned(name, data, text):
        logger.warning("%s looks like a scanned PDF (%d bytes, %d chars of text)", name, len(data), len(text.strip()))
    return text


async def acquire_text(name: str, data: bytes) -> str:
    return await asyncio.to_thread(extract_raw_text, name, data)
