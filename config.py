"""
Runtime settings for the resume importer.

Values come from the environment (a local .env is honoured) and fall back
to the defaults below.
"""
import os

from dotenv import load_dotenv

load_dotenv()

# Records scoring below this are discarded in favour of an empty form.
MIN_QUALITY_SCORE = int(os.getenv("RESUME_MIN_QUALITY_SCORE", "20"))

# Longer input is truncated before normalisation.
MAX_INPUT_CHARS = int(os.getenv("RESUME_MAX_INPUT_CHARS", "60000"))

# pypdf output shorter than this triggers a second pass with pdfminer.
PDF_MIN_TEXT_CHARS = int(os.getenv("RESUME_PDF_MIN_TEXT_CHARS", "500"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FILE = os.getenv("LOG_FILE") or None
