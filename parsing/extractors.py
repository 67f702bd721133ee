"""Per-section heuristic extractors.

Every extractor is a pure function of the (normalised) text it is given and
returns a fresh value; the pipeline in ``cv_parser`` merges the results.
Fields that can be recognised several ways carry an ordered list of named
strategies and the first one that yields a value wins.
"""
import re
from typing import Callable, List, Optional, Sequence, Tuple

from utils.logger import get_logger

from .models import (
    DEGREE_PLACEHOLDER,
    FIELD_PLACEHOLDER,
    INSTITUTION_PLACEHOLDER,
    EducationEntry,
    ExperienceEntry,
    PersonalInfo,
    SkillCategory,
)
from .normalizers import (
    MONTH_YEAR,
    MONTH_YEAR_RE,
    MONTHS,
    canonical_url,
    collapse_repeats,
    parse_ym,
    repair_skill_spacing,
)
from .sections import segment

logger = get_logger(__name__)

Strategy = Tuple[str, Callable[[str], Optional[str]]]


def first_match(field: str, strategies: Sequence[Strategy], text: str) -> str:
    for name, strategy in strategies:
        value = strategy(text)
        if value:
            logger.debug("%s matched by %s", field, name)
            return value
    return ""


def _group(rx: "re.Pattern[str]", group: int = 1) -> Callable[[str], Optional[str]]:
    def run(text: str) -> Optional[str]:
        m = rx.search(text)
        return m.group(group).strip() if m else None
    return run


# personal info
NAME_STOP = (
    r"(?i:professional|summary|experience|education|skills|technical|work|resume|curriculum"
    r"|senior|junior|lead|staff|principal|engineer|developer|manager|designer|analyst)"
)
NAME_RE = re.compile(rf"^((?!{NAME_STOP}\b)[A-Z][a-zA-Z'-]+(?:\s+(?!{NAME_STOP}\b)[A-Z][a-zA-Z'-]+){{1,3}})\b")
EMAIL_RE = re.compile(r"[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}")
PAREN_PHONE_RE = re.compile(r"\((\d{3})\)\s*(\d{3})[-.\s]?(\d{4})\b")
DASHED_PHONE_RE = re.compile(r"(?<![\d-])(\d{3})-(\d{3})-(\d{4})(?![\d-])")
LOCATION_RE = re.compile(r"\b([A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+){0,2},\s*[A-Z]{2})\b")
LINKEDIN_SCHEMED_RE = re.compile(r"https?://(?:www\.)?linkedin\.com/in/([A-Za-z0-9_-]+)", re.IGNORECASE)
LINKEDIN_BARE_RE = re.compile(r"(?:www\.)?linkedin\.com/in/([A-Za-z0-9_-]+)", re.IGNORECASE)


def _website_patterns(tlds: str) -> List["re.Pattern[str]"]:
    domain = rf"(?:[A-Za-z0-9-]+\.)+(?:{tlds})\b(?:/[^\s]*?)?"
    tail = r"(?=[.,;)]?(?:\s|$))"
    return [
        re.compile(rf"https?://({domain}){tail}"),
        re.compile(rf"(?<![@\w./:-])({domain}){tail}"),
    ]


WEBSITE_PATTERNS = [
    ("schemed_dev", "bare_dev", "dev"),
    ("schemed_com", "bare_com", "com"),
    ("schemed_other", "bare_other", "io|me|org|net"),
]


def _format_paren_phone(text: str) -> Optional[str]:
    m = PAREN_PHONE_RE.search(text)
    return f"({m.group(1)}) {m.group(2)}-{m.group(3)}" if m else None


def _format_dashed_phone(text: str) -> Optional[str]:
    m = DASHED_PHONE_RE.search(text)
    return f"{m.group(1)}-{m.group(2)}-{m.group(3)}" if m else None


def _linkedin(rx: "re.Pattern[str]") -> Callable[[str], Optional[str]]:
    def run(text: str) -> Optional[str]:
        m = rx.search(text)
        return f"https://linkedin.com/in/{m.group(1)}" if m else None
    return run


def _acceptable_site(site: str) -> bool:
    low = site.lower()
    return len(site) > 3 and "@" not in site and "linkedin" not in low and "email" not in low


def contact_block(text: str) -> str:
    """Text before the first section heading, where contact details live."""
    spans = segment(text)
    return text[:min(s.start for s in spans.values())] if spans else text


def _website(rx: "re.Pattern[str]", header_only: bool = False) -> Callable[[str], Optional[str]]:
    # bare domains past the header are usually library names ("Socket.io")
    def run(text: str) -> Optional[str]:
        for m in rx.finditer(contact_block(text) if header_only else text):
            site = m.group(1).rstrip("/")
            if _acceptable_site(site):
                return canonical_url(site)
        return None
    return run


NAME_STRATEGIES: List[Strategy] = [("leading_capitalized_run", _group(NAME_RE))]
EMAIL_STRATEGIES: List[Strategy] = [("local_at_domain", _group(EMAIL_RE, 0))]
PHONE_STRATEGIES: List[Strategy] = [
    ("parenthesized_area_code", _format_paren_phone),
    ("hyphen_delimited", _format_dashed_phone),
]
LOCATION_STRATEGIES: List[Strategy] = [("city_state", _group(LOCATION_RE))]
LINKEDIN_STRATEGIES: List[Strategy] = [
    ("schemed_profile", _linkedin(LINKEDIN_SCHEMED_RE)),
    ("bare_profile", _linkedin(LINKEDIN_BARE_RE)),
]
WEBSITE_STRATEGIES: List[Strategy] = []
for _schemed, _bare, _tlds in WEBSITE_PATTERNS:
    _with_scheme, _without = _website_patterns(_tlds)
    WEBSITE_STRATEGIES += [(_schemed, _website(_with_scheme)), (_bare, _website(_without, header_only=True))]


def extract_personal_info(text: str) -> PersonalInfo:
    """Contact fields from the whole text; each field is searched independently."""
    return PersonalInfo(
        full_name=first_match("full_name", NAME_STRATEGIES, text),
        email=first_match("email", EMAIL_STRATEGIES, text),
        phone=first_match("phone", PHONE_STRATEGIES, text),
        location=first_match("location", LOCATION_STRATEGIES, text),
        linked_in=first_match("linked_in", LINKEDIN_STRATEGIES, text),
        website=first_match("website", WEBSITE_STRATEGIES, text),
    )


# summary
def extract_summary(body: str) -> str:
    return " ".join(body.split())


# experience
WORD = r"[A-Z][\w&/+#'-]*"
CONNECTOR = r"(?:of|and|&|for|the|to|in)"
POSITION = rf"{WORD}(?:\s+(?:{WORD}|{CONNECTOR})){{0,5}}"
DELIM = r"\s*(?:[•|·@–—]|\bat\b)\s*"
PRESENT_WORDS = {"present", "current", "now"}
DATE_RANGE = (
    rf"(?P<start>{MONTH_YEAR})"
    rf"(?:\s*(?:-|–|—|\bto\b)\s*(?P<end>{MONTH_YEAR}|\b(?i:present|current|now)\b)?)?"
)
ROLE_NOUNS = (
    r"(?:Engineer|Developer|Manager|Analyst|Specialist|Director|Lead|Consultant|Designer|Architect"
    r"|Intern|Scientist|Administrator|Coordinator|Officer|Programmer|Technician|Head|President)\b"
)
CITY_STATE = r"[A-Z][a-zA-Z]+(?:\s+[A-Z][a-zA-Z]+){0,2},\s*[A-Z]{2}"

DELIMITED_HEADER_RE = re.compile(
    rf"(?P<position>{POSITION}){DELIM}(?P<company>[^•|·@–—]{{1,80}}?)"
    rf"(?:{DELIM}(?P<location>[^•|·@–—]{{1,60}}?))?\s*,?\s+{DATE_RANGE}"
)
ROLE_NOUN_HEADER_RE = re.compile(
    rf"(?P<position>(?:{WORD}\s+){{0,4}}?{ROLE_NOUNS})\s*,?\s+"
    rf"(?P<company>{WORD}(?:,?\s+(?:{WORD}|&)){{0,6}})\s*,?\s+{DATE_RANGE}"
)
HEADER_STRATEGIES = [
    ("delimited", DELIMITED_HEADER_RE),
    ("role_noun", ROLE_NOUN_HEADER_RE),
]

COMPANY_SUFFIX_LOCATION_RE = re.compile(
    rf"^(?P<company>.*?\b(?:Inc|LLC|Ltd|Corp|Corporation|Co|GmbH|Group|Labs|Technologies|Solutions|Systems)\.?)"
    rf",?\s+(?P<location>{CITY_STATE})$"
)
STATE_TAIL_RE = re.compile(r",\s*(?P<state>[A-Z]{2})$")
CITY_WORD_RE = re.compile(r"^[A-Z][a-zA-Z.'-]*$")
# words that start a multi-word US city name ("New York", "San Francisco")
CITY_FIRST_WORDS = frozenset({
    "San", "Santa", "New", "Los", "Las", "Salt", "Palo", "Mountain", "Fort", "Ft.", "St", "St.",
    "Saint", "El", "Des", "Baton", "Little", "Grand", "Ann", "Kansas", "Oklahoma", "Colorado",
    "Jersey", "Long", "Virginia", "Sioux", "Cedar", "Corpus", "Menlo", "Redwood", "Sandy",
    "Boca", "West", "North", "South", "East", "Lake", "Silver", "Bay", "Round", "Thousand",
})
MAX_CITY_WORDS = 3

ACTION_VERBS = (
    "Led", "Architected", "Mentored", "Optimized", "Collaborated", "Implemented", "Developed",
    "Created", "Managed", "Built", "Designed", "Established", "Improved", "Increased", "Reduced",
    "Delivered", "Launched", "Automated", "Migrated", "Owned", "Drove", "Spearheaded",
    "Streamlined", "Coordinated", "Analyzed", "Maintained", "Wrote", "Shipped", "Introduced",
    "Scaled", "Deployed", "Supported", "Trained", "Partnered", "Oversaw", "Negotiated",
    "Resolved", "Authored", "Engineered", "Refactored",
)
_VERBS = "|".join(ACTION_VERBS)
RESPONSIBILITY_RE = re.compile(rf"\b(?:{_VERBS})\b.*?(?=\s*[•▪●*-]?\s*\b(?:{_VERBS})\b|$)")
MIN_RESPONSIBILITY_LEN = 20
MAX_RESPONSIBILITY_LEN = 300
HEADER_JUNK = " •|·@–—-,;"


def find_headers(body: str) -> Tuple[str, List["re.Match[str]"]]:
    for name, rx in HEADER_STRATEGIES:
        matches = list(rx.finditer(body))
        if matches:
            return name, matches
    return "", []


def split_date_range(start: str, end: Optional[str]) -> Tuple[str, str, bool]:
    """Return (start_date, end_date, current); unreadable parts become ""."""
    end = (end or "").strip()
    if end.lower() in PRESENT_WORDS:
        return parse_ym(start), "", True
    return parse_ym(start), parse_ym(end) if end else "", False


def _split_company_location(text: str) -> Tuple[str, str]:
    """Split ``"<company> <City>, ST"`` into company and location.

    A legal suffix (Inc, Corp, ...) ends the company outright. Otherwise the
    city is whatever follows the last comma, or, with no comma, the last word
    grown leftwards over ``CITY_FIRST_WORDS``.
    """
    m = COMPANY_SUFFIX_LOCATION_RE.match(text)
    if m:
        return m.group("company").strip(HEADER_JUNK), m.group("location")

    tail = STATE_TAIL_RE.search(text)
    if not tail:
        return text, ""
    head = text[:tail.start()]
    if "," in head:
        company, city = head.rsplit(",", 1)
        city_words = city.split()
    else:
        words = head.split()
        n = 1
        while n < MAX_CITY_WORDS and len(words) - n > 1 and words[-n - 1] in CITY_FIRST_WORDS:
            n += 1
        company, city_words = " ".join(words[:-n]), words[-n:]

    company = company.strip(HEADER_JUNK)
    if not company or not 0 < len(city_words) <= MAX_CITY_WORDS:
        return text, ""
    if not all(CITY_WORD_RE.match(w) for w in city_words):
        return text, ""
    return company, f"{' '.join(city_words)}, {tail.group('state')}"


def extract_responsibilities(window: str) -> List[str]:
    found = []
    for m in RESPONSIBILITY_RE.finditer(window):
        line = m.group().strip().rstrip(" •▪●*-")
        if MIN_RESPONSIBILITY_LEN < len(line) < MAX_RESPONSIBILITY_LEN:
            found.append(line)
    return found


def extract_experience(body: str) -> List[ExperienceEntry]:
    strategy, headers = find_headers(body)
    if not headers:
        return []
    logger.debug("%d experience header(s) via %s", len(headers), strategy)

    entries = []
    for i, m in enumerate(headers):
        stop = headers[i + 1].start() if i + 1 < len(headers) else len(body)
        company = m.group("company").strip(HEADER_JUNK)
        location = (m.groupdict().get("location") or "").strip(HEADER_JUNK)
        if not location:
            company, location = _split_company_location(company)
        start_date, end_date, current = split_date_range(m.group("start"), m.group("end"))
        entries.append(ExperienceEntry(
            position=m.group("position").strip(HEADER_JUNK),
            company=company,
            location=location,
            start_date=start_date,
            end_date=end_date,
            current=current,
            responsibilities=extract_responsibilities(body[m.end():stop]),
        ))
    return entries


# education
DEGREE_RE = re.compile(
    r"\b(?:(?:Master|Bachelor|Doctor|Associate)(?:'s)?\s+of\s+"
    r"(?:Applied\s+Science|Science|Fine\s+Arts|Arts|Business\s+Administration|Engineering|Philosophy|Laws|Education)\b"
    r"|Ph\.?\s?D\b\.?|MBA\b|(?:Master|Bachelor|Doctor|Associate)(?:'s)?\b)",
    re.IGNORECASE,
)
FIELDS_OF_STUDY = (
    "Computer Science", "Computer Engineering", "Software Engineering", "Electrical Engineering",
    "Mechanical Engineering", "Civil Engineering", "Chemical Engineering", "Information Technology",
    "Information Systems", "Data Science", "Business Administration", "Applied Mathematics",
    "Mathematics", "Statistics", "Physics", "Chemistry", "Biology", "Economics", "Finance",
    "Accounting", "Marketing", "Psychology", "Engineering",
)
FIELD_RE = re.compile(
    r"\b(?:" + "|".join(
        r"\s+".join(map(re.escape, f.split())) for f in sorted(FIELDS_OF_STUDY, key=len, reverse=True)
    ) + r")\b",
    re.IGNORECASE,
)
_TAIL_WORD = rf"(?!GPA\b|{MONTHS}\b)[A-Z][\w'-]*"
INSTITUTION_RE = re.compile(
    rf"\bUniversity\s+of\s+[A-Z][\w'-]*(?:\s+{_TAIL_WORD}){{0,2}}"
    rf"|\b(?:[A-Z][\w&'.-]*\s+){{0,3}}(?:University|College|Institute)\b(?:\s+of\s+[A-Z][\w'-]*(?:\s+{_TAIL_WORD})?)?"
)
INSTITUTION_KEYWORD_RE = re.compile(r"\b(?:University|College|Institute)\b")
GPA_RE = re.compile(r"\bGPA\s*:?\s*(\d(?:\.\d{1,2})?)\b", re.IGNORECASE)


def _overlaps(a: Tuple[int, int], b: Tuple[int, int]) -> bool:
    return a[0] < b[1] and b[0] < a[1]


def _institutions(body: str, taken: List[Tuple[int, int]]) -> List[Tuple[int, int]]:
    """Institution spans, trimmed to start after any degree/field text they swallowed."""
    spans = []
    for m in INSTITUTION_RE.finditer(body):
        start, end = m.span()
        for t_start, t_end in taken:
            if _overlaps((start, end), (t_start, t_end)) and t_end < end:
                start = max(start, t_end)
        if INSTITUTION_KEYWORD_RE.search(body[start:end]):
            spans.append((start, end))
    return spans


def extract_education(body: str) -> List[EducationEntry]:
    """Collect every degree, institution, field, GPA and date, then pair them by index.

    Pairing assumes the document lists those attributes in the same order for
    every entry; interleaved layouts will pair the wrong values together.
    """
    body = collapse_repeats(body)

    degree_spans = [m.span() for m in DEGREE_RE.finditer(body)]
    field_spans = [
        m.span() for m in FIELD_RE.finditer(body)
        if not any(d[0] <= m.start() and m.end() <= d[1] for d in degree_spans)
    ]
    inst_spans = _institutions(body, degree_spans + field_spans)
    field_spans = [f for f in field_spans if not any(i[0] <= f[0] and f[1] <= i[1] for i in inst_spans)]

    degrees = [body[s:e].strip() for s, e in degree_spans]
    institutions = [body[s:e].strip() for s, e in inst_spans]
    fields = [body[s:e].strip() for s, e in field_spans]
    gpas = [m.group(1) for m in GPA_RE.finditer(body)]
    dates = [parse_ym(m.group()) for m in MONTH_YEAR_RE.finditer(body)]

    def at(items: List[str], i: int) -> str:
        return items[i] if i < len(items) else ""

    entries = []
    for i in range(max(len(degrees), len(institutions), 1)):
        degree, institution = at(degrees, i), at(institutions, i)
        if len(degree) <= 2 and len(institution) <= 2:
            continue
        entries.append(EducationEntry(
            institution=institution or INSTITUTION_PLACEHOLDER,
            degree=degree or DEGREE_PLACEHOLDER,
            field=at(fields, i) or FIELD_PLACEHOLDER,
            graduation_date=at(dates, i),
            gpa=at(gpas, i),
        ))
    return entries


# skills
KNOWN_SKILL_CATEGORIES = (
    "Programming Languages", "Frontend Frameworks & Libraries", "Backend Technologies",
    "Databases & Cloud", "Development Tools", "Frameworks & Libraries", "Cloud & Dev Ops",
    "Spoken Languages", "Soft Skills", "Languages", "Frameworks", "Libraries", "Tools",
    "Databases", "Cloud", "Dev Ops", "Platforms", "Technologies", "Methodologies", "Testing",
    "Certifications", "Other",
)
_KNOWN_BY_LENGTH = sorted(KNOWN_SKILL_CATEGORIES, key=len, reverse=True)
LABEL_COLON_RE = re.compile(r":(?!//)")
NUMERIC_RE = re.compile(r"^\d+(?:\.\d+)?$")
DEFAULT_SKILL_CATEGORY = "Skills"
MAX_LABEL_WORDS = 3
MAX_SKILL_LEN = 50


def _label_start(head: str) -> Optional[int]:
    """Offset in ``head`` where the category label ending at its last char begins."""
    trimmed = head.rstrip()
    low = trimmed.lower()
    for cat in _KNOWN_BY_LENGTH:
        if low.endswith(cat.lower()):
            at = len(trimmed) - len(cat)
            if at == 0 or not trimmed[at - 1].isalnum():
                return at
    boundary = max(head.rfind(","), head.rfind(";"), head.rfind(":")) + 1
    words = list(re.finditer(r"\S+", head[boundary:]))
    label = []
    for w in reversed(words[-MAX_LABEL_WORDS:]):
        if not (w.group()[0].isupper() or w.group() == "&"):
            break
        label.append(w)
    return boundary + label[-1].start() if label else None


def skill_lines(body: str) -> List[str]:
    """Split the skills block into ``category: skills`` lines, recovering breaks lost in normalisation."""
    if "\n" in body:
        return [ln.strip() for ln in body.splitlines() if ln.strip()]
    cuts = []
    for m in LABEL_COLON_RE.finditer(body):
        at = _label_start(body[:m.start()])
        if at and at > (cuts[-1] if cuts else 0):
            cuts.append(at)
    bounds = [0] + cuts + [len(body)]
    return [body[a:b].strip() for a, b in zip(bounds, bounds[1:]) if body[a:b].strip()]


def split_skills(text: str) -> List[str]:
    seen, out = set(), []
    for raw in re.split(r"[,;]", text):
        skill = repair_skill_spacing(raw.strip(" •·*-\t"))
        if not (1 < len(skill) < MAX_SKILL_LEN) or NUMERIC_RE.match(skill):
            continue
        if skill.lower() not in seen:
            seen.add(skill.lower())
            out.append(skill)
    return out


def extract_skills(body: str) -> List[SkillCategory]:
    groups: List[List[str]] = []
    for line in skill_lines(body):
        m = LABEL_COLON_RE.search(line)
        name = line[:m.start()].strip(" •·*-") if m else ""
        if name:
            groups.append([name, line[m.end():]])
        elif groups:
            groups[-1][1] += " " + line
        else:
            groups.append([DEFAULT_SKILL_CATEGORY, line])

    categories = []
    for name, text in groups:
        skills = split_skills(text)
        if skills:
            categories.append(SkillCategory(category=repair_skill_spacing(name), skills=skills))
    return categories
