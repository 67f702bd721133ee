import re

import dateparser

WHITESPACE_RE = re.compile(r"\s+")
CAMEL_RE = re.compile(r"(?<=[a-z])(?=[A-Z])")
REPEAT_RE = re.compile(r"\b(\w[\w ,.&'/-]{7,79}?)\s+\1\b")
SCHEME_RE = re.compile(r"^https?://", re.IGNORECASE)

MONTHS = (
    r"(?:Jan(?:uary)?|Feb(?:ruary)?|Mar(?:ch)?|Apr(?:il)?|May|June?|July?|Aug(?:ust)?"
    r"|Sep(?:t(?:ember)?)?|Oct(?:ober)?|Nov(?:ember)?|Dec(?:ember)?)"
)
MONTH_YEAR = rf"\b(?i:{MONTHS})\.?\s+\d{{4}}\b"
MONTH_YEAR_RE = re.compile(MONTH_YEAR)

# normalize_text splits these at the case boundary
SKILL_SPACING_FIXES = {
    "Java Script": "JavaScript",
    "Type Script": "TypeScript",
    "Coffee Script": "CoffeeScript",
    "Graph QL": "GraphQL",
    "Postgre SQL": "PostgreSQL",
    "My SQL": "MySQL",
    "Mongo DB": "MongoDB",
    "Dynamo DB": "DynamoDB",
    "Git Hub": "GitHub",
    "Git Lab": "GitLab",
    "Dev Ops": "DevOps",
    "Tensor Flow": "TensorFlow",
    "Py Torch": "PyTorch",
    "Fast API": "FastAPI",
    "Word Press": "WordPress",
}


def collapse_whitespace(txt: str) -> str:
    return WHITESPACE_RE.sub(" ", txt).strip()


def decamel(txt: str) -> str:
    return CAMEL_RE.sub(" ", txt)


def normalize_text(txt: str) -> str:
    """Flatten extracted text to one line and re-split words fused at column breaks."""
    return decamel(collapse_whitespace(txt or ""))


def collapse_repeats(txt: str) -> str:
    """Drop runs duplicated back-to-back by the text layer ("X Y X Y" -> "X Y")."""
    for _ in range(10):
        fixed = REPEAT_RE.sub(r"\1", txt)
        if fixed == txt:
            break
        txt = fixed
    return txt


def repair_skill_spacing(skill: str) -> str:
    for broken, whole in SKILL_SPACING_FIXES.items():
        skill = skill.replace(broken, whole)
    return skill


def parse_ym(s: str) -> str:
    """Month-year token -> ``YYYY-MM``; empty string when it cannot be read."""
    if not s:
        return ""
    dt = dateparser.parse(
        s.replace(".", " ").strip(),
        languages=["en"],
        settings={"PREFER_DAY_OF_MONTH": "first", "REQUIRE_PARTS": ["month", "year"]},
    )
    if not dt:
        return ""
    return f"{dt.year:04d}-{dt.month:02d}"


def canonical_url(token: str) -> str:
    token = (token or "").strip()
    if not token:
        return ""
    if SCHEME_RE.match(token):
        return token
    return f"https://{token}"
