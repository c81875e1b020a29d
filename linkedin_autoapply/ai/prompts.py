"""Prompt templates for the text-generation backend"""

USE_DEFAULT = "USE_DEFAULT"

LANGUAGE_RULE = """## Language Rule
- Always answer in the same language as the question.
- If the language is unclear or mixed, default to English."""

TEXT_TEMPLATE = """Answer the following job application question based on the resume section below.

## Rules
- Answer directly, as the applicant, in the first person.
- Keep it short: one line for single-line fields.
- Never invent employers, degrees or certifications.
- Never answer with placeholders such as "[your answer]".
- If the resume gives no basis for an answer, reply with exactly {use_default}.

{language_rule}

Resume section ({section}):
{resume_section}

Question: {question}
"""

TEXTAREA_TEMPLATE = """Answer the following job application question based on the resume section below.

## Rules
- Write 2-4 sentences in the first person, professional and specific.
- Do not use cover letter format (no addresses, no "Dear Hiring Manager").
- Do not include contact details.

{language_rule}

Resume section ({section}):
{resume_section}

Job description:
{job_description}

Question: {question}
"""

COVER_LETTER_TEMPLATE = """Write a short cover letter (3 paragraphs at most) for the job below.

## Rules
- First person, no placeholders, no addresses or dates.
- Tie two or three concrete achievements from the resume to the job.

Resume:
{resume_section}

Job description:
{job_description}
"""

NUMERIC_TEMPLATE = """Answer the following numeric job application question based on the resume.

## Rules
- Respond with ONLY an integer, no text.
- If the resume does not say, reply with exactly {use_default}.

Resume:
{resume_section}

Question: {question}
"""

OPTIONS_TEMPLATE = """Pick the best answer to the following job application question based on the resume.

## Rules
- Reply with exactly one of the options, copied verbatim.
- No explanation.

Resume section ({section}):
{resume_section}

Question: {question}
Options:
{options}
"""

MULTI_OPTIONS_TEMPLATE = """Pick every option that applies to the applicant for the following question.

## Rules
- Reply with the chosen options copied verbatim, one per line.
- Reply with exactly {use_default} if none applies.

Resume section ({section}):
{resume_section}

Question: {question}
Options:
{options}
"""

RETRY_TEMPLATE = """You previously answered a job application question incorrectly.

Question: {question}

Your previous answer: {previous_answer}
Error received: {error}

Based on my resume:
{resume_section}

Your previous answer was REJECTED. Provide a corrected answer that addresses the error.
Respond with only the answer, no explanation.
"""

TEMPLATES = {
    "text": TEXT_TEMPLATE,
    "textarea": TEXTAREA_TEMPLATE,
    "cover_letter": COVER_LETTER_TEMPLATE,
    "numeric": NUMERIC_TEMPLATE,
    "choice": OPTIONS_TEMPLATE,
    "multi_choice": MULTI_OPTIONS_TEMPLATE,
}

TEMPERATURES = {
    "numeric": 0.3,
    "choice": 0.3,
    "multi_choice": 0.3,
    "cover_letter": 0.7,
}


def render_prompt(request):
    """Fill the template for an AnswerRequest"""
    template = RETRY_TEMPLATE if request.error else TEMPLATES.get(request.kind, TEXT_TEMPLATE)
    return template.format(
        use_default=USE_DEFAULT,
        language_rule=LANGUAGE_RULE,
        section=request.section or "resume",
        resume_section=request.resume_excerpt,
        job_description=request.job_description or "(not available)",
        question=request.question,
        options="\n".join(f"- {opt}" for opt in request.options),
        previous_answer=request.previous_answer or "",
        error=request.error or "",
    )


def build_messages(request):
    return [{"role": "user", "content": render_prompt(request)}]


def temperature_for(request):
    return TEMPERATURES.get(request.kind, 0.5)
