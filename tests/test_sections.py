from parsing.models import SectionKind
from parsing.sections import segment

TEXT = "Jane Doe SUMMARY Short bio. EXPERIENCE Engineer stuff. EDUCATION Some school. SKILLS Tools: Git"


def test_spans_end_at_next_heading():
    spans = segment(TEXT)
    assert set(spans) == set(SectionKind)
    assert spans[SectionKind.SUMMARY].end == spans[SectionKind.EXPERIENCE].start
    assert spans[SectionKind.EXPERIENCE].end == spans[SectionKind.EDUCATION].start
    assert spans[SectionKind.SKILLS].end == len(TEXT)
    assert spans[SectionKind.SUMMARY].body(TEXT) == "Short bio."
    assert spans[SectionKind.SKILLS].body(TEXT) == "Tools: Git"


def test_qualified_heading_is_kept_whole():
    text = "PROFESSIONAL SUMMARY Ships things. TECHNICAL SKILLS Tools: Git"
    spans = segment(text)
    assert spans[SectionKind.SUMMARY].heading == "PROFESSIONAL SUMMARY"
    assert spans[SectionKind.SUMMARY].start == 0
    assert spans[SectionKind.SKILLS].heading == "TECHNICAL SKILLS"
    assert spans[SectionKind.SUMMARY].body(text) == "Ships things."


def test_missing_heading_yields_no_span():
    spans = segment("Jane Doe EXPERIENCE Engineer SKILLS Tools: Git")
    assert SectionKind.EDUCATION not in spans
    assert SectionKind.SUMMARY not in spans
    assert spans[SectionKind.EXPERIENCE].end == spans[SectionKind.SKILLS].start


def test_headings_match_case_insensitively():
    spans = segment("Jane Doe Education Acme University Skills Languages: Go")
    assert spans[SectionKind.EDUCATION].heading == "Education"
    assert spans[SectionKind.SKILLS].body("Jane Doe Education Acme University Skills Languages: Go") == "Languages: Go"


def test_uppercase_heading_preferred_over_prose():
    text = "SUMMARY Ten years of experience shipping. EXPERIENCE Engineer"
    spans = segment(text)
    assert spans[SectionKind.EXPERIENCE].start == text.index("EXPERIENCE")
    assert spans[SectionKind.SUMMARY].body(text) == "Ten years of experience shipping."


def test_no_headings():
    assert segment("random unrelated text with no structure") == {}
