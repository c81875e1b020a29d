"""Request/response contract with the text-generation backend"""

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True)
class AnswerRequest:
    question: str
    resume_excerpt: str
    kind: str = "text"
    options: tuple = ()
    section: str = ""
    job_description: str = ""
    previous_answer: str = ""
    error: str = ""


@dataclass(frozen=True)
class AnswerResponse:
    text: str = ""
    use_default: bool = False
    metadata: dict = field(default_factory=dict, compare=False)

    @classmethod
    def default(cls):
        return cls(text="", use_default=True)


class TextGenerator(Protocol):
    async def generate(self, request: AnswerRequest) -> AnswerResponse:
        ...
