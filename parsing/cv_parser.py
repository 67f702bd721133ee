from typing import Any, Callable, Dict, List, Optional, TypeVar

import config
from utils.logger import get_logger

from .errors import ExtractionAnomaly
from .extractors import (
    extract_education,
    extract_experience,
    extract_personal_info,
    extract_skills,
    extract_summary,
)
from .models import ParseReport, PersonalInfo, ResumeRecord, SectionKind, TraceEvent, empty_resume_record
from .normalizers import normalize_text
from .quality import score
from .sections import segment

logger = get_logger(__name__)

T = TypeVar("T")

SECTION_EXTRACTORS = {
    SectionKind.SUMMARY: extract_summary,
    SectionKind.EXPERIENCE: extract_experience,
    SectionKind.EDUCATION: extract_education,
    SectionKind.SKILLS: extract_skills,
}


def _run_stage(stage: str, fn: Callable[..., T], *args) -> T:
    try:
        return fn(*args)
    except Exception as exc:
        raise ExtractionAnomaly(stage, exc) from exc


def _count(value) -> str:
    return f"{len(value)} item(s)" if isinstance(value, list) else f"{len(value)} chars"


def _assemble(personal: PersonalInfo, sections: Dict[SectionKind, Any]) -> ResumeRecord:
    return ResumeRecord(
        personal_info=personal.model_copy(update={"summary": sections.get(SectionKind.SUMMARY, "")}),
        experience=sections.get(SectionKind.EXPERIENCE, []),
        education=sections.get(SectionKind.EDUCATION, []),
        skills=sections.get(SectionKind.SKILLS, []),
    )


def parse_resume_report(raw_text: str, min_score: Optional[int] = None) -> ParseReport:
    """Run normalise -> segment -> extract -> quality gate over one document's text.

    Never raises: a failing stage or a score below ``min_score`` both yield the
    empty record, with ``status`` telling them apart.
    """
    threshold = config.MIN_QUALITY_SCORE if min_score is None else min_score
    trace: List[TraceEvent] = []

    try:
        text = _run_stage("normalize", normalize_text, (raw_text or "")[:config.MAX_INPUT_CHARS])
        trace.append(TraceEvent(stage="normalize", outcome="ok", detail=_count(text)))

        spans = _run_stage("segment", segment, text)
        found = ", ".join(kind.value for kind in spans) or "no headings"
        trace.append(TraceEvent(stage="segment", outcome="ok", detail=found))

        personal = _run_stage("personal_info", extract_personal_info, text)
        trace.append(TraceEvent(stage="personal_info", outcome="ok"))

        sections = {}
        for kind, extractor in SECTION_EXTRACTORS.items():
            span = spans.get(kind)
            if span is None:
                trace.append(TraceEvent(stage=kind.value, outcome="skipped", detail="no heading"))
                continue
            sections[kind] = _run_stage(kind.value, extractor, span.body(text))
            trace.append(TraceEvent(stage=kind.value, outcome="ok", detail=_count(sections[kind])))

        record = _run_stage("assemble", _assemble, personal, sections)
        quality = _run_stage("quality_gate", score, record)
    except ExtractionAnomaly as exc:
        logger.warning("Resume extraction failed, returning empty record (%s)", exc, exc_info=exc.cause)
        trace.append(TraceEvent(stage=exc.stage, outcome="anomaly", detail=str(exc.cause)))
        return ParseReport(record=empty_resume_record(), score=0, status="anomaly", trace=trace)

    if quality < threshold:
        logger.debug("Quality score %d below %d, returning empty record", quality, threshold)
        trace.append(TraceEvent(stage="quality_gate", outcome="low_confidence", detail=f"{quality} < {threshold}"))
        return ParseReport(record=empty_resume_record(), score=quality, status="low_confidence", trace=trace)

    trace.append(TraceEvent(stage="quality_gate", outcome="ok", detail=str(quality)))
    return ParseReport(record=record, score=quality, status="ok", trace=trace)


def parse_resume(raw_text: str) -> ResumeRecord:
    return parse_resume_report(raw_text).record
