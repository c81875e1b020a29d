"""Shared fixtures: offline and deterministic, no browser and no network"""

import pytest

from linkedin_autoapply.ai.contract import AnswerResponse
from linkedin_autoapply.config import BotSettings
from linkedin_autoapply.models import Education, Experience, JobPosting, PersonalInfo, ResumeData


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch):
    for key in ("AUTOAPPLY_API_URL", "AUTOAPPLY_API_TOKEN", "AUTOAPPLY_MODEL"):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def resume():
    return ResumeData(
        personal=PersonalInfo(
            name="Ada",
            surname="Lovelace",
            email="ada@example.com",
            phone="+44 7700 900123",
            city="London",
            country="United Kingdom",
            linkedin="https://linkedin.com/in/ada",
        ),
        experiences=[
            Experience(
                position="Backend Engineer",
                company="Analytical Engines",
                employment_period="2019 - 2024",
                skills=["Python", "PostgreSQL"],
            ),
            Experience(
                position="Intern",
                company="Difference Ltd",
                employment_period="2017 - 2018",
                skills=["Java"],
            ),
        ],
        education=[Education(degree="Bachelor of Science", university="University of London", gpa="3.8")],
        skills=["Python", "Java", "Go"],
        legal_authorization={"authorized_to_work": "Yes", "requires_sponsorship": "No"},
        work_preferences={"open_to_relocation": "No"},
        self_identification={},
        notice_period="2 weeks",
        salary_expectation="80,000 - 95,000 USD",
    )


@pytest.fixture
def settings(tmp_path):
    return BotSettings(output_dir=str(tmp_path), max_pages=3, login_debounce=2.0)


@pytest.fixture
def make_posting():
    def _make(external_id="42", title="Software Engineer", company="Acme", apply_method=""):
        return JobPosting(
            external_id=external_id,
            title=title,
            company_name=company,
            listing_url=f"https://www.linkedin.com/jobs/view/{external_id}/",
            location="Paris",
            apply_method=apply_method,
        )

    return _make


class ScriptedGenerator:
    """TextGenerator returning (or raising) scripted items in order"""

    def __init__(self, *script):
        self.script = list(script)
        self.requests = []

    async def generate(self, request):
        self.requests.append(request)
        item = self.script.pop(0) if self.script else AnswerResponse.default()
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, str):
            return AnswerResponse(text=item)
        return item


@pytest.fixture
def scripted_generator():
    return ScriptedGenerator


async def no_sleep(_seconds):
    return None
