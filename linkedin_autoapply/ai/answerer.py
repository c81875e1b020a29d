"""Single entry point handlers use to get answers from the text-generation backend"""

import asyncio
import logging

from linkedin_autoapply.ai.contract import AnswerRequest
from linkedin_autoapply.data.answer_bank import NUMERIC_DEFAULT
from linkedin_autoapply.errors import AnswerUnavailable, FatalBotError, TextGenerationError
from linkedin_autoapply.reasoning.normalize import (
    extract_number,
    find_best_match,
    is_placeholder_answer,
    normalize_text,
)
from linkedin_autoapply.reasoning.resume_sections import resume_excerpt, resume_narrative

log = logging.getLogger(__name__)


def names_options(text, options):
    """True when every non-empty line of `text` is exactly one of `options`"""
    valid = {normalize_text(o) for o in options}
    lines = [normalize_text(line.strip().lstrip("-* ")) for line in (text or "").splitlines()]
    lines = [line for line in lines if line]
    return bool(valid and lines) and all(line in valid for line in lines)


def is_rejected_answer(response, request):
    # "None" or "N/A" is a real answer when the control offers it
    if request.options and names_options(response.text, request.options):
        return False
    return is_placeholder_answer(response.text)


class AnswerMemory:
    """Answers given during this run, keyed on (kind, normalized question)"""

    def __init__(self):
        self._answers = {}

    def __len__(self):
        return len(self._answers)

    @staticmethod
    def key(kind, question, options=()):
        return kind, normalize_text(question), tuple(normalize_text(o) for o in options)

    def get(self, kind, question, options=()):
        return self._answers.get(self.key(kind, question, options))

    def put(self, kind, question, answer, options=()):
        self._answers[self.key(kind, question, options)] = answer


class Answerer:
    """
    Wraps a TextGenerator with the run's answering rules.

    Every backend call is bounded by `timeout` seconds and at most `attempts`
    tries; a failed or placeholder answer counts as a try. Exhaustion raises
    AnswerUnavailable, which handlers turn into an unresolved control.
    Fatal backend errors (e.g. insufficient credits) propagate.
    """

    def __init__(self, generator, resume, attempts=2, timeout=60.0, backoff=0.5, sleep=asyncio.sleep):
        self.generator = generator
        self.resume = resume
        self.attempts = max(1, attempts)
        self.timeout = timeout
        self.backoff = backoff
        self._sleep = sleep
        self.memory = AnswerMemory()
        self.job_description = ""
        self.calls = 0

    async def _generate(self, request):
        last_error = None
        for attempt in range(self.attempts):
            if attempt:
                await self._sleep(self.backoff * attempt)
            self.calls += 1
            try:
                response = await asyncio.wait_for(self.generator.generate(request), timeout=self.timeout)
            except FatalBotError:
                raise
            except TextGenerationError as e:
                last_error = e
                log.warning("Backend error (attempt %d/%d): %s", attempt + 1, self.attempts, e)
                continue
            except asyncio.TimeoutError:
                last_error = f"timed out after {self.timeout}s"
                log.warning("Backend timeout (attempt %d/%d)", attempt + 1, self.attempts)
                continue

            if response.use_default:
                return response
            if is_rejected_answer(response, request):
                last_error = f"placeholder answer {response.text!r}"
                log.warning("Rejected placeholder answer for %r", request.question[:60])
                continue
            return response
        raise AnswerUnavailable(request.question, self.attempts, last_error)

    def _request(self, question, kind, options=(), previous_answer="", error=""):
        section, excerpt = resume_excerpt(self.resume, question)
        if error:
            excerpt = resume_narrative(self.resume)
        return AnswerRequest(
            question=question,
            resume_excerpt=excerpt,
            kind=kind,
            options=tuple(options),
            section=section,
            job_description=self.job_description,
            previous_answer=previous_answer,
            error=error,
        )

    async def answer_text(self, question, kind="text", previous_answer="", error=""):
        """Free-text answer. Raises AnswerUnavailable when the backend has none."""
        if not error:
            remembered = self.memory.get(kind, question)
            if remembered is not None:
                return remembered

        request = self._request(question, kind, previous_answer=previous_answer, error=error)
        if request.section == "cover_letter" and kind == "textarea":
            request = self._request(question, "cover_letter")
        response = await self._generate(request)
        if response.use_default:
            raise AnswerUnavailable(question, self.attempts, "backend had no answer")

        answer = response.text.strip()
        self.memory.put(kind, question, answer)
        return answer

    async def answer_numeric(self, question, default=NUMERIC_DEFAULT, previous_answer="", error=""):
        """Integer answer; falls back to `default` when the backend says so or gives no number"""
        if not error:
            remembered = self.memory.get("numeric", question)
            if remembered is not None:
                return remembered

        response = await self._generate(
            self._request(question, "numeric", previous_answer=previous_answer, error=error)
        )
        number = None if response.use_default else extract_number(response.text)
        if number is None:
            log.info("Numeric default %d for %r", default, question[:60])
            number = default
        self.memory.put("numeric", question, number)
        return number

    async def answer_choice(self, question, options):
        """One of `options`, mapped with find_best_match"""
        remembered = self.memory.get("choice", question, options)
        if remembered is not None:
            return remembered

        response = await self._generate(self._request(question, "choice", options=options))
        if response.use_default:
            raise AnswerUnavailable(question, self.attempts, "backend had no answer")
        choice = find_best_match(response.text, list(options))
        self.memory.put("choice", question, choice, options)
        return choice

    async def answer_multi_choice(self, question, options):
        """Subset of `options` that apply; may be empty"""
        response = await self._generate(self._request(question, "multi_choice", options=options))
        if response.use_default:
            return []
        chosen = []
        for line in response.text.splitlines():
            line = line.strip().lstrip("-* ").strip()
            if not line:
                continue
            match = find_best_match(line, list(options))
            if match and match not in chosen:
                chosen.append(match)
        return chosen

    async def cover_letter(self):
        response = await self._generate(self._request("Cover letter", "cover_letter"))
        if response.use_default:
            raise AnswerUnavailable("Cover letter", self.attempts, "backend had no answer")
        return response.text.strip()
