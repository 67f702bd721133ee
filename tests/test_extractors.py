import pytest
from pydantic import ValidationError

from parsing.extractors import (
    extract_education,
    extract_experience,
    extract_personal_info,
    extract_skills,
    extract_summary,
    skill_lines,
)
from parsing.models import ExperienceEntry, SkillCategory


def test_personal_info_dashed_phone_and_links():
    pi = extract_personal_info("John Smith john@smith.io 415-555-0199 Seattle, WA linkedin.com/in/jsmith jsmith.dev")
    assert pi.full_name == "John Smith"
    assert pi.email == "john@smith.io"
    assert pi.phone == "415-555-0199"
    assert pi.location == "Seattle, WA"
    assert pi.linked_in == "https://linkedin.com/in/jsmith"
    assert pi.website == "https://jsmith.dev"


def test_website_ignores_email_domain_and_linkedin():
    pi = extract_personal_info("Jane Roe jroe@roe.io https://www.linkedin.com/in/jroe")
    assert pi.website == ""
    assert pi.linked_in == "https://linkedin.com/in/jroe"


def test_schemed_website_keeps_https():
    assert extract_personal_info("Jane Roe http://janeroe.com").website == "https://janeroe.com"


def test_name_stops_before_heading_words():
    assert extract_personal_info("JANE DOE PROFESSIONAL SUMMARY Writes code").full_name == "JANE DOE"


def test_personal_info_defaults_to_empty():
    pi = extract_personal_info("nothing useful here")
    assert pi.model_dump() == {
        "full_name": "", "email": "", "phone": "", "location": "",
        "linked_in": "", "website": "", "summary": "",
    }


def test_summary_joins_fragments():
    assert extract_summary("  Ships   reliable\nsoftware.  ") == "Ships reliable software."


def test_experience_company_location_without_second_delimiter():
    jobs = extract_experience("Backend Engineer • Acme Inc Austin, TX Jan 2019 - Dec 2020 Designed the public REST API for partners.")
    assert len(jobs) == 1
    assert jobs[0].company == "Acme Inc"
    assert jobs[0].location == "Austin, TX"
    assert jobs[0].start_date == "2019-01"
    assert jobs[0].end_date == "2020-12"
    assert jobs[0].responsibilities == ["Designed the public REST API for partners."]


def test_experience_role_noun_header():
    jobs = extract_experience("Data Analyst Umbrella Corp Boston, MA May 2018 - June 2019 Analyzed churn data for the retention team weekly.")
    assert len(jobs) == 1
    assert jobs[0].position == "Data Analyst"
    assert jobs[0].company == "Umbrella Corp"
    assert jobs[0].location == "Boston, MA"
    assert jobs[0].end_date == "2019-06"


def test_experience_current_keyword_case_insensitive():
    jobs = extract_experience("Product Manager • Hooli • Palo Alto, CA April 2022 - CURRENT Launched two products.")
    assert jobs[0].current is True
    assert jobs[0].end_date == ""


def test_short_and_long_responsibilities_are_dropped():
    long_tail = "x " * 200
    jobs = extract_experience(f"QA Engineer • Vandelay • Newark, NJ March 2015 - May 2016 Led QA. Built {long_tail}")
    assert jobs[0].responsibilities == ["Key responsibilities and achievements in this role."]


def test_experience_without_headers_is_empty():
    assert extract_experience("I have worked at many places over the years.") == []


def test_education_collapses_duplicated_runs():
    edus = extract_education(
        "Master of Science in Computer Science Master of Science in Computer Science Stanford University June 2018"
    )
    assert len(edus) == 1
    assert edus[0].degree == "Master of Science"
    assert edus[0].field == "Computer Science"
    assert edus[0].institution == "Stanford University"
    assert edus[0].graduation_date == "2018-06"
    assert edus[0].gpa == ""


def test_education_university_of_form_and_placeholders():
    edus = extract_education("University of Michigan May 2012")
    assert len(edus) == 1
    assert edus[0].institution == "University of Michigan"
    assert edus[0].degree == "Degree"
    assert edus[0].field == "Field of Study"


def test_education_pairs_attributes_by_position():
    edus = extract_education("PhD Physics Caltech Institute Bachelor Mathematics Reed College")
    assert [e.degree for e in edus] == ["PhD", "Bachelor"]
    assert [e.field for e in edus] == ["Physics", "Mathematics"]
    assert [e.institution for e in edus] == ["Caltech Institute", "Reed College"]


def test_education_without_degree_or_institution_is_empty():
    assert extract_education("Graduated with honours") == []


def test_skill_lines_recovers_category_breaks():
    body = "Programming Languages: Python, Java Script, Type Script Frameworks: Django, React"
    assert skill_lines(body) == [
        "Programming Languages: Python, Java Script, Type Script",
        "Frameworks: Django, React",
    ]


def test_skills_continuation_lines_and_filters():
    cats = extract_skills("Languages: Python, Go,\nRust, Java\nTools: Git; Docker; 2020")
    assert [c.category for c in cats] == ["Languages", "Tools"]
    assert cats[0].skills == ["Python", "Go", "Rust", "Java"]
    assert cats[1].skills == ["Git", "Docker"]


def test_skill_category_without_skills_is_dropped():
    cats = extract_skills("Languages: 1, 2 Tools: Git")
    assert [c.category for c in cats] == ["Tools"]


def test_skills_are_capped_per_category():
    body = "Tools: " + ", ".join(f"tool{i}" for i in range(30))
    assert len(extract_skills(body)[0].skills) == 15


def test_uncategorised_skills_get_default_category():
    cats = extract_skills("Python, SQL, Excel")
    assert cats[0].category == "Skills"
    assert cats[0].skills == ["Python", "SQL", "Excel"]


def test_models_enforce_invariants():
    job = ExperienceEntry(current=True, end_date="2021-01")
    assert job.end_date == ""
    assert ExperienceEntry().responsibilities == ["Key responsibilities and achievements in this role."]
    with pytest.raises(ValidationError):
        SkillCategory(category="Tools", skills=[])


MULTI_WORD_CITY_HEADERS = [
    ("Software Engineer • Google New York, NY January 2020 - Present", "Google", "New York, NY"),
    ("Software Engineer at Google, Mountain View, CA January 2020 - Present", "Google", "Mountain View, CA"),
    ("Data Analyst Umbrella Corp San Francisco, CA May 2018 - June 2019", "Umbrella Corp", "San Francisco, CA"),
]


@pytest.mark.parametrize("header,company,location", MULTI_WORD_CITY_HEADERS)
def test_experience_keeps_multi_word_cities_whole(header, company, location):
    job = extract_experience(header + " Led the platform team for three years.")[0]
    assert job.company == company
    assert job.location == location


def test_bare_domains_after_the_header_are_not_websites():
    text = "Jane Roe jane@x.com PROFESSIONAL SUMMARY Builds apps. TECHNICAL SKILLS Frameworks: React, Socket.io"
    assert extract_personal_info(text).website == ""


def test_bare_domain_in_the_header_is_still_found():
    text = "Jane Roe janeroe.io TECHNICAL SKILLS Frameworks: React, Socket.io"
    assert extract_personal_info(text).website == "https://janeroe.io"
