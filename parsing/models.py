"""Typed resume record produced by the import pipeline.

Field names are snake_case in Python and camelCase on the wire
(``record.model_dump(by_alias=True)``), which is what the editor stores.
"""
import uuid
from enum import Enum
from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

RESPONSIBILITY_PLACEHOLDER = "Key responsibilities and achievements in this role."
INSTITUTION_PLACEHOLDER = "Institution"
DEGREE_PLACEHOLDER = "Degree"
FIELD_PLACEHOLDER = "Field of Study"
MAX_SKILLS_PER_CATEGORY = 15


def new_id(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class PersonalInfo(_Record):
    full_name: str = ""
    email: str = ""
    phone: str = ""
    location: str = ""
    linked_in: str = ""
    website: str = ""
    summary: str = ""


class ExperienceEntry(_Record):
    id: str = Field(default_factory=lambda: new_id("exp"))
    company: str = ""
    position: str = ""
    location: str = ""
    start_date: str = ""
    end_date: str = ""
    current: bool = False
    responsibilities: List[str] = Field(default_factory=list, validate_default=True)

    @model_validator(mode="before")
    @classmethod
    def _current_clears_end(cls, data):
        if isinstance(data, dict) and data.get("current"):
            data = {**data, "end_date": "", "endDate": ""}
        return data

    @field_validator("responsibilities")
    @classmethod
    def _never_empty(cls, v: List[str]) -> List[str]:
        kept = [r for r in v if r and r.strip()]
        return kept or [RESPONSIBILITY_PLACEHOLDER]


class EducationEntry(_Record):
    id: str = Field(default_factory=lambda: new_id("edu"))
    institution: str = INSTITUTION_PLACEHOLDER
    degree: str = DEGREE_PLACEHOLDER
    field: str = FIELD_PLACEHOLDER
    graduation_date: str = ""
    gpa: str = ""


class SkillCategory(_Record):
    id: str = Field(default_factory=lambda: new_id("skill"))
    category: str = Field(min_length=1)
    skills: List[str]

    @field_validator("skills")
    @classmethod
    def _bounded_and_non_empty(cls, v: List[str]) -> List[str]:
        kept = [s for s in v if s][:MAX_SKILLS_PER_CATEGORY]
        if not kept:
            raise ValueError("a skill category needs at least one skill")
        return kept


class ResumeRecord(_Record):
    personal_info: PersonalInfo = Field(default_factory=PersonalInfo)
    experience: List[ExperienceEntry] = Field(default_factory=list)
    education: List[EducationEntry] = Field(default_factory=list)
    skills: List[SkillCategory] = Field(default_factory=list)


def empty_resume_record() -> ResumeRecord:
    return ResumeRecord()


class SectionKind(str, Enum):
    SUMMARY = "summary"
    EXPERIENCE = "experience"
    EDUCATION = "education"
    SKILLS = "skills"


class SectionSpan(_Record):
    """Offsets of one located section; ``body_start`` is just past the heading."""

    kind: SectionKind
    heading: str
    start: int
    body_start: int
    end: int

    def body(self, text: str) -> str:
        return text[self.body_start:self.end].strip()


class TraceEvent(_Record):
    stage: str
    outcome: str
    detail: str = ""


ParseStatus = Literal["ok", "low_confidence", "anomaly", "skipped"]


class ParseReport(_Record):
    record: ResumeRecord
    score: int = 0
    status: ParseStatus = "ok"
    trace: List[TraceEvent] = Field(default_factory=list)
    hints: List[str] = Field(default_factory=list)
