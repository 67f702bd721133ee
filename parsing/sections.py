import re
from typing import Dict, List, Optional, Tuple

from .models import SectionKind, SectionSpan

SECTION_HEADINGS: Dict[SectionKind, Tuple[str, ...]] = {
    SectionKind.SUMMARY: ("PROFESSIONAL SUMMARY", "EXECUTIVE SUMMARY", "CAREER SUMMARY", "SUMMARY"),
    SectionKind.EXPERIENCE: ("PROFESSIONAL EXPERIENCE", "WORK EXPERIENCE", "EMPLOYMENT HISTORY", "EXPERIENCE"),
    SectionKind.EDUCATION: ("EDUCATION",),
    SectionKind.SKILLS: ("TECHNICAL SKILLS", "CORE SKILLS", "SKILLS"),
}


def _heading_pattern(variant: str, flags: int = 0) -> "re.Pattern[str]":
    words = r"\s+".join(re.escape(w) for w in variant.split())
    return re.compile(rf"\b{words}\b", flags)


# Uppercase headings are tried before case-insensitive ones so that prose
# like "ten years of experience" does not shadow a real "EXPERIENCE" heading.
HEADING_PASSES: List[Dict[SectionKind, List["re.Pattern[str]"]]] = [
    {kind: [_heading_pattern(v) for v in variants] for kind, variants in SECTION_HEADINGS.items()},
    {kind: [_heading_pattern(v, re.IGNORECASE) for v in variants] for kind, variants in SECTION_HEADINGS.items()},
]


def find_heading(text: str, kind: SectionKind) -> Optional["re.Match[str]"]:
    """First heading of ``kind``; the longer variant wins when two start at the same offset."""
    for patterns in HEADING_PASSES:
        best = None
        for rx in patterns[kind]:
            m = rx.search(text)
            if not m:
                continue
            if best is None or m.start() < best.start() or (
                m.start() == best.start() and len(m.group()) > len(best.group())
            ):
                best = m
        if best:
            return best
    return None


def segment(text: str) -> Dict[SectionKind, SectionSpan]:
    located = {}
    for kind in SECTION_HEADINGS:
        m = find_heading(text, kind)
        if m:
            located[kind] = m

    spans: Dict[SectionKind, SectionSpan] = {}
    for kind, m in located.items():
        later = [o.start() for k, o in located.items() if k is not kind and o.start() > m.start()]
        end = min(later) if later else len(text)
        spans[kind] = SectionSpan(
            kind=kind,
            heading=m.group(),
            start=m.start(),
            body_start=min(m.end(), end),
            end=end,
        )
    return spans
