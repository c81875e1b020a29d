"""Pick and render the resume section a question is about"""

from linkedin_autoapply.reasoning.normalize import normalize_text

# Keyword routing, first match wins
SECTION_KEYWORDS = (
    ("cover_letter", ("cover letter", "why do you want", "why are you interested", "motivation")),
    ("self_identification", ("gender", "pronoun", "veteran", "disability", "ethnicity", "race")),
    ("legal_authorization", ("authoriz", "sponsor", "visa", "citizen", "work permit", "legally")),
    ("work_preferences", ("relocat", "remote", "onsite", "on site", "hybrid", "commut", "travel", "drug", "background")),
    ("salary_expectations", ("salary", "compensation", "pay", "rate")),
    ("availability", ("notice", "start date", "available", "availability")),
    ("education_details", ("degree", "university", "college", "school", "gpa", "major", "education")),
    ("languages", ("language", "fluent", "proficien", "speak")),
    ("experience_details", ("experience", "years", "worked", "project", "skill", "technolog")),
)


def section_for_question(question):
    normalized = normalize_text(question)
    for section, keywords in SECTION_KEYWORDS:
        if any(normalize_text(kw) in normalized for kw in keywords):
            return section
    return "personal_information"


def _lines(mapping):
    return "\n".join(f"- {k.replace('_', ' ')}: {v}" for k, v in mapping.items() if v not in ("", None))


def render_experience(resume):
    blocks = []
    for e in resume.experiences:
        block = f"{e.position} at {e.company} ({e.employment_period})"
        if e.skills:
            block += f"\n  skills: {', '.join(e.skills)}"
        for item in e.responsibilities:
            block += f"\n  - {item}"
        blocks.append(block)
    return "\n".join(blocks)


def render_section(resume, section):
    if section == "self_identification":
        return _lines(resume.self_identification)
    if section == "legal_authorization":
        return _lines(resume.legal_authorization)
    if section == "work_preferences":
        return _lines(resume.work_preferences)
    if section == "salary_expectations":
        return f"- salary range: {resume.salary_expectation}"
    if section == "availability":
        return f"- notice period: {resume.notice_period}"
    if section == "education_details":
        return "\n".join(
            f"{e.degree} in {e.field_of_study}, {e.university} ({e.graduation_year})"
            + (f", GPA {e.gpa}" if e.gpa else "")
            for e in resume.education
        )
    if section == "languages":
        return "\n".join(f"- {l.get('language', '')}: {l.get('proficiency', '')}" for l in resume.languages)
    if section == "experience_details":
        return render_experience(resume) + (f"\nSkills: {', '.join(resume.skills)}" if resume.skills else "")
    p = resume.personal
    return _lines(
        {
            "name": p.name,
            "surname": p.surname,
            "email": p.email,
            "phone": p.phone,
            "city": p.city,
            "country": p.country,
            "linkedin": p.linkedin,
            "github": p.github,
            "summary": resume.summary,
        }
    )


def resume_narrative(resume):
    """Whole resume as plain text, for cover letters and retry prompts"""
    parts = [
        render_section(resume, "personal_information"),
        "Experience:\n" + render_experience(resume),
        "Education:\n" + render_section(resume, "education_details"),
    ]
    if resume.skills:
        parts.append("Skills: " + ", ".join(resume.skills))
    return "\n\n".join(part for part in parts if part.strip())


def resume_excerpt(resume, question):
    """(section name, rendered text) relevant to a question"""
    section = section_for_question(question)
    if section == "cover_letter":
        return section, resume_narrative(resume)
    return section, render_section(resume, section)
